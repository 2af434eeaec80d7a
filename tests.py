"""
a script for validating the functionality of the element table loading and formula evaluation
"""
import unittest
import io
import os
import pathlib
import tempfile
from contextlib import redirect_stdout
import numpy as np
import openpyxl as op
from molecularmass.errors import NotFoundError, ParseError, InvalidFormulaError
from molecularmass.table import load_table, load_table_xlsx, default_table, DEFAULT_TABLE
from molecularmass.formula import chew_formula, tokenize, evaluate, composition_from_formula, molecular_formula, \
    to_subscript, molecular_weights, molecular_weight_error
from molecularmass.molecule import Molecule


validation_path = pathlib.Path(__file__).parent / 'validation_files'

# tolerance for molecular mass comparisons
DELTA = 1e-6


class TestTable(unittest.TestCase):
    def test_load_table(self):
        table = load_table(validation_path / 'short_table.csv')
        self.assertEqual(len(table), 3)
        self.assertEqual(table['H'], 1.008)
        self.assertEqual(table['Ce'], 140.1161)
        self.assertEqual(table['Og'], 294.0)

    def test_multiple_pairs_per_line(self):
        """pairs on a single line, blank lines, trailing delimiters, and duplicate symbols"""
        table = load_table(validation_path / 'multi_pair_table.csv')
        self.assertEqual(
            dict(table),
            {'H': 1.008, 'C': 12.011, 'O': 15.999, 'Ac': 227.0},
        )

    def test_table_is_read_only(self):
        table = load_table(validation_path / 'short_table.csv')
        with self.assertRaises(TypeError):
            table['H'] = 2.

    def test_alternate_delimiter(self):
        with tempfile.TemporaryDirectory() as folder:
            path = pathlib.Path(folder) / 'semicolon_table.csv'
            path.write_text('H;1.008;O;15.999\n')
            table = load_table(path, delimiter=';')
        self.assertEqual(dict(table), {'H': 1.008, 'O': 15.999})

    def test_missing_file(self):
        path = validation_path / 'does_not_exist.csv'
        with self.assertRaises(NotFoundError) as cm:
            load_table(path)
        self.assertEqual(cm.exception.path, path)
        self.assertIsInstance(cm.exception, FileNotFoundError)

    def test_directory(self):
        with self.assertRaises(NotFoundError):
            load_table(validation_path)

    def test_bad_mass(self):
        with self.assertRaises(ParseError) as cm:
            load_table(validation_path / 'bad_mass_table.csv')
        self.assertEqual(cm.exception.line, 2)
        self.assertEqual(cm.exception.field, 'twelve')
        self.assertIsInstance(cm.exception, ValueError)

    def test_missing_mass(self):
        with self.assertRaises(ParseError) as cm:
            load_table(validation_path / 'missing_mass_table.csv')
        self.assertEqual(cm.exception.line, 2)
        self.assertEqual(cm.exception.field, 'C')

    def test_malformed_mass(self):
        with tempfile.TemporaryDirectory() as folder:
            path = pathlib.Path(folder) / 'malformed_table.csv'
            for mass in ['1_008', 'nan', 'inf', '0x10', '1.0.0', '-']:
                path.write_text(f'C,12.011\nH,{mass}\n')
                with self.assertRaises(ParseError) as cm:
                    load_table(path)
                self.assertEqual(cm.exception.line, 2)
                self.assertEqual(cm.exception.field, mass)
            path.write_text('H,+1.008,C,1.2011e1,O,.15999E2\n')
            self.assertEqual(dict(load_table(path)), {'H': 1.008, 'C': 12.011, 'O': 15.999})

    def test_empty_symbol(self):
        with tempfile.TemporaryDirectory() as folder:
            path = pathlib.Path(folder) / 'empty_symbol_table.csv'
            path.write_text('H,1.008\n,5\n')
            with self.assertRaises(ParseError) as cm:
                load_table(path)
        self.assertEqual(cm.exception.line, 2)
        self.assertEqual(cm.exception.field, '')

    def test_undecodable(self):
        """a table which is not valid utf-8 cannot be read"""
        with tempfile.TemporaryDirectory() as folder:
            path = pathlib.Path(folder) / 'binary_table.csv'
            path.write_bytes(b'H,1.008\n\xff\xfe,2\n')
            out = io.StringIO()
            with redirect_stdout(out):
                with self.assertRaises(NotFoundError) as cm:
                    load_table(path, verbose=True)
        self.assertEqual(cm.exception.path, path)
        self.assertTrue(out.getvalue().endswith(' FAIL\n'))

    def test_verbose(self):
        out = io.StringIO()
        with redirect_stdout(out):
            load_table(validation_path / 'short_table.csv', verbose=True)
        self.assertIn('short_table.csv', out.getvalue())
        self.assertIn('DONE (3 elements)', out.getvalue())

    def test_default_table(self):
        table = default_table()
        self.assertEqual(len(table), 118)
        self.assertEqual(table['H'], 1.008)
        self.assertEqual(table['Og'], 294.0)
        self.assertEqual(dict(table), dict(load_table(DEFAULT_TABLE)))

    def test_user_table(self):
        cwd = os.getcwd()
        with tempfile.TemporaryDirectory() as folder:
            (pathlib.Path(folder) / 'user_periodic_table.csv').write_text('H,1.0\nO,16.0\n')
            os.chdir(folder)
            try:
                table = default_table()
            finally:
                os.chdir(cwd)
        self.assertEqual(dict(table), {'H': 1.0, 'O': 16.0})


class TestTableXLSX(unittest.TestCase):
    def setUp(self):
        self.folder = tempfile.TemporaryDirectory()
        self.bookname = pathlib.Path(self.folder.name) / 'element_table.xlsx'
        wb = op.Workbook()
        cs = wb.active
        cs.title = 'masses'
        cs.append(['H', 1.008])
        cs.append(['Ce', 140.1161])
        cs.append([])
        cs.append(['Og', '294'])
        cs.append(['H', 1.00794])
        bad = wb.create_sheet('bad')
        bad.append(['C', 'twelve'])
        blank = wb.create_sheet('blank symbol')
        blank.append(['H', 1.008])
        blank.append(['  ', 5.])
        wb.save(self.bookname)

    def tearDown(self):
        self.folder.cleanup()

    def test_load_table_xlsx(self):
        table = load_table_xlsx(self.bookname)
        self.assertEqual(
            dict(table),
            {'H': 1.00794, 'Ce': 140.1161, 'Og': 294.0},
        )

    def test_sheet(self):
        with self.assertRaises(ParseError) as cm:
            load_table_xlsx(self.bookname, sheet='bad')
        self.assertEqual(cm.exception.line, 1)
        self.assertEqual(cm.exception.field, 'twelve')

    def test_empty_symbol(self):
        with self.assertRaises(ParseError) as cm:
            load_table_xlsx(self.bookname, sheet='blank symbol')
        self.assertEqual(cm.exception.line, 2)

    def test_missing_sheet(self):
        with self.assertRaises(ParseError):
            load_table_xlsx(self.bookname, sheet='not a sheet')

    def test_missing_workbook(self):
        with self.assertRaises(NotFoundError):
            load_table_xlsx(pathlib.Path(self.folder.name) / 'missing.xlsx')


class TestEvaluate(unittest.TestCase):
    def setUp(self):
        self.table = {
            'H': 1.008,
            'C': 12.011,
            'O': 15.999,
            'N': 14.007,
            'Na': 22.98976928,
            'Cl': 35.45,
            'Ac': 227.,
        }

    def test_no_subscripts(self):
        table = load_table(validation_path / 'no_subscript_table.csv')
        self.assertAlmostEqual(evaluate(table, 'CO'), 28.010, delta=DELTA)
        self.assertAlmostEqual(evaluate(table, 'NaCl'), 58.43976928, delta=DELTA)

    def test_subscripts(self):
        self.assertAlmostEqual(evaluate(self.table, 'H2O'), 18.015, delta=DELTA)
        self.assertAlmostEqual(evaluate(self.table, 'Ac2O3'), 501.997, delta=DELTA)
        self.assertAlmostEqual(evaluate(self.table, 'C6H12O6'), 180.156, delta=DELTA)

    def test_single_element(self):
        for symbol, mass in self.table.items():
            self.assertAlmostEqual(evaluate(self.table, symbol), mass, delta=DELTA)
            for n in [1, 2, 9, 10, 37, 120]:
                self.assertAlmostEqual(
                    evaluate(self.table, f'{symbol}{n}'),
                    mass * n,
                    delta=DELTA,
                )

    def test_empty(self):
        self.assertEqual(evaluate(self.table, ''), 0.)

    def test_invalid_symbol(self):
        table = {'H': 1.008, 'C': 12.011}
        with self.assertRaises(InvalidFormulaError) as cm:
            evaluate(table, 'C-H4')
        self.assertEqual(cm.exception.formula, 'C-H4')
        self.assertEqual(str(cm.exception), 'C-H4 is not a valid chemical formula')

    def test_unsupported_syntax(self):
        for formula in ['(CH3)2O', '2H2O', 'H2O+', 'Xx', 'C H4', 'H2O.NaCl', '[13C]O2', 'h2o']:
            with self.assertRaises(InvalidFormulaError) as cm:
                evaluate(self.table, formula)
            self.assertEqual(cm.exception.formula, formula)

    def test_two_character_priority(self):
        table = load_table(validation_path / 'cobalt_table.csv')
        self.assertAlmostEqual(evaluate(table, 'Co'), 58.933194, delta=DELTA)
        self.assertAlmostEqual(evaluate(table, 'CoO'), 74.932194, delta=DELTA)
        self.assertAlmostEqual(evaluate(table, 'Co2C3'), 2 * 58.933194 + 3 * 12.011, delta=DELTA)
        self.assertAlmostEqual(evaluate(table, 'CO'), 28.010, delta=DELTA)
        self.assertEqual(list(tokenize(table, 'CoCO')), [('Co', 1), ('C', 1), ('O', 1)])
        # no backtracking to "C" + "o"
        with self.assertRaises(InvalidFormulaError):
            evaluate(table, 'Coo')

    def test_subscript_advance(self):
        """the scan advances past every digit which was read, regardless of how the subscript is written"""
        self.assertAlmostEqual(evaluate(self.table, 'H007'), 7 * 1.008, delta=DELTA)
        self.assertAlmostEqual(evaluate(self.table, 'H007O'), 7 * 1.008 + 15.999, delta=DELTA)
        self.assertAlmostEqual(evaluate(self.table, 'H1O1'), 1.008 + 15.999, delta=DELTA)
        self.assertAlmostEqual(evaluate(self.table, 'H0'), 0., delta=DELTA)
        self.assertEqual(list(tokenize(self.table, 'C02H010')), [('C', 2), ('H', 10)])

    def test_large_subscript(self):
        for n in [400, 5000]:
            formula = 'H' + '1' * n
            with self.assertRaises(InvalidFormulaError) as cm:
                evaluate(self.table, formula)
            self.assertEqual(cm.exception.formula, formula)
        self.assertEqual(evaluate(self.table, 'H' + '1' * 20), 1.008 * int('1' * 20))

    def test_chew_formula(self):
        self.assertEqual(chew_formula(self.table, 'NaCl'), ('Na', 1, 2))
        self.assertEqual(chew_formula(self.table, 'NaCl', 2), ('Cl', 1, 4))
        self.assertEqual(chew_formula(self.table, 'C6H12O6', 2), ('H', 12, 5))
        self.assertEqual(chew_formula(self.table, 'HN', 1), ('N', 1, 2))

    def test_table_not_mutated(self):
        before = dict(self.table)
        evaluate(self.table, 'C6H12O6')
        composition_from_formula(self.table, 'CH3CH2OH')
        self.assertEqual(self.table, before)


class TestComposition(unittest.TestCase):
    def setUp(self):
        self.table = load_table(DEFAULT_TABLE)

    def test_composition(self):
        self.assertEqual(
            composition_from_formula(self.table, 'CH3CH2OH'),
            {'C': 2, 'H': 6, 'O': 1},
        )
        self.assertEqual(composition_from_formula(self.table, ''), {})

    def test_molecular_formula(self):
        self.assertEqual(molecular_formula({'O': 6, 'H': 12, 'C': 6}), 'C6H12O6')
        self.assertEqual(molecular_formula({'Cl': 1, 'Na': 1}), 'ClNa')
        self.assertEqual(molecular_formula({'O': 1, 'H': 2}), 'H2O')
        self.assertEqual(molecular_formula({'H': 0, 'O': 2}), 'O2')

    def test_to_subscript(self):
        self.assertEqual(to_subscript(12), '₁₂')
        self.assertEqual(to_subscript(0), '₀')

    def test_molecular_weights(self):
        weights = molecular_weights(self.table, ['H2O', 'CO', ''])
        self.assertIsInstance(weights, np.ndarray)
        self.assertEqual(weights.shape, (3,))
        np.testing.assert_allclose(weights, [18.015, 28.010, 0.], atol=DELTA)
        with self.assertRaises(InvalidFormulaError):
            molecular_weights(self.table, ['H2O', 'H2O)'])

    def test_molecular_weight_error(self):
        self.assertAlmostEqual(molecular_weight_error(18.015, 18.015), 0.)
        self.assertAlmostEqual(molecular_weight_error(101., 100.), 0.01)


class TestMolecule(unittest.TestCase):
    def setUp(self):
        self.mol = Molecule('CH3CH2OH')

    def test_molecule(self):
        self.assertEqual(self.mol.formula, 'CH3CH2OH')
        self.assertEqual(self.mol.composition, {'C': 2, 'H': 6, 'O': 1})
        self.assertEqual(self.mol.molecular_formula, 'C2H6O')
        self.assertEqual(self.mol.molecular_formula_formatted, 'C₂H₆O')
        self.assertAlmostEqual(self.mol.molecular_weight, 2 * 12.011 + 6 * 1.008 + 15.999, delta=DELTA)
        self.assertEqual(repr(self.mol), 'Molecule(CH3CH2OH)')

    def test_percent_composition(self):
        pcomp = self.mol.percent_composition
        self.assertAlmostEqual(sum(pcomp.values()), 1., delta=DELTA)
        self.assertAlmostEqual(pcomp['O'], 15.999 / self.mol.molecular_weight, delta=DELTA)
        self.assertEqual(Molecule('').percent_composition, {})

    def test_containment(self):
        self.assertIn('C', self.mol)
        self.assertIn(['C', 'O'], self.mol)
        self.assertIn({'H': 6}, self.mol)
        self.assertNotIn({'H': 7}, self.mol)
        self.assertIn(Molecule('H2O'), self.mol)
        self.assertEqual(self.mol['H'], 6)
        self.assertEqual(list(self.mol), ['C', 'H', 'O'])
        with self.assertRaises(TypeError):
            1 in self.mol

    def test_equality(self):
        self.assertEqual(self.mol, Molecule('C2H6O'))
        self.assertEqual(self.mol, {'C': 2, 'H': 6, 'O': 1})
        self.assertNotEqual(self.mol, Molecule('H2O'))

    def test_table(self):
        table = {'Xy': 100., 'X': 1.}
        mol = Molecule('XyX3', table=table)
        self.assertIs(mol.table, table)
        self.assertAlmostEqual(mol.molecular_weight, 103., delta=DELTA)

    def test_invalid(self):
        with self.assertRaises(InvalidFormulaError):
            Molecule('C6H12O6-')
        with self.assertRaises(TypeError):
            Molecule({'C': 1})

    def test_verbose(self):
        out = io.StringIO()
        with redirect_stdout(out):
            Molecule('H2O', verbose=True)
        self.assertIn('formula: H2O', out.getvalue())
        self.assertIn('molecular weight: 18.015', out.getvalue())
        self.assertIn('elemental percent composition:', out.getvalue())


if __name__ == '__main__':
    unittest.main(verbosity=2)
