"""
Molecule class: a molecular formula interpreted against an element table, with its derived properties.
"""
import sys
from .table import default_table
from .formula import composition_from_formula, evaluate, molecular_formula, to_subscript

VERBOSE = False  # toggle for verbose


class Molecule(object):
    verbose = VERBOSE

    def __init__(self,
                 formula: str,
                 table=None,
                 verbose=VERBOSE,
                 ):
        """
        Interprets a molecular formula and calculates its properties.

        :param str formula: The molecular formula to interpret (e.g. "C6H12O6"). Brackets, charges, and isotopes are
            not supported.
        :param table: Element table (symbol -> atomic mass) to use for calculations. If not specified, the default
            table is loaded (see ``molecularmass.table.default_table``).
        :param bool verbose: Verbose output.

        **Examples**

        >>> mol = Molecule('H2O')
        >>> mol.composition
        {'H': 2, 'O': 1}
        """
        if verbose is True:
            sys.stdout.write(f'Generating molecule object from input {formula}\n')
        if type(formula) is not str:
            raise TypeError(f'The provided formula type is not interpretable: {type(formula)}')
        self.verbose = verbose
        if table is None:
            table = default_table(verbose=verbose)
        self._table = table
        self._formula = formula
        self._comp = composition_from_formula(table, formula)  # raises for invalid formulae
        if self.verbose is True:
            self.print_details()

    def __repr__(self):
        return f'{self.__class__.__name__}({self._formula})'

    def __str__(self):
        return self.__repr__()

    def __contains__(self, item):
        if type(item) == str:
            return item in self._comp
        elif type(item) == list or type(item) == tuple:
            return all([element in self._comp for element in item])
        elif type(item) == dict:
            return all([
                element in self._comp and self._comp[element] >= num for element, num in item.items()
            ])
        elif isinstance(item, Molecule):
            return self.__contains__(item.composition)
        else:
            raise TypeError(f'The item {item} is not a recognized type for containment checks. Type: {type(item)}')

    def __iter__(self):
        for element in self._comp:
            yield element

    def __getitem__(self, item):
        return self._comp[item]

    def __eq__(self, other):
        if type(other) == dict:
            return other == self._comp
        elif isinstance(other, Molecule):
            return other.composition == self._comp
        return False

    def __ne__(self, other):
        return not self.__eq__(other)

    @property
    def formula(self):
        """The formula as provided"""
        return self._formula

    @property
    def table(self):
        """Element table used for calculations"""
        return self._table

    @property
    def composition(self):
        """Composition dictionary"""
        return dict(self._comp)

    @property
    def molecular_weight(self):
        """Molecular weight of the molecule"""
        return evaluate(self._table, self._formula)

    @property
    def molecular_formula(self):
        """Hill formula of the molecule"""
        return molecular_formula(self._comp)

    @property
    def molecular_formula_formatted(self):
        """returns the subscript-formatted molecular formula"""
        return molecular_formula(self._comp, to_subscript)

    @property
    def percent_composition(self):
        """Elemental percent composition (as fractions of the molecular weight)"""
        mw = self.molecular_weight
        if mw == 0.:
            return {}
        return {
            element: self._table[element] * number / mw
            for element, number in self._comp.items()
        }

    def print_details(self):
        """prints the details of the generated molecule"""
        sys.stdout.write(f'{self}\n')
        sys.stdout.write(f'formula: {self.molecular_formula}\n')
        sys.stdout.write(f'molecular weight: {round(self.molecular_weight, 6)}\n')
        sys.stdout.write('\n')
        self.print_percent_composition()

    def print_percent_composition(self):
        """prints the percent composition in a reader-friendly format"""
        sys.stdout.write('elemental percent composition:\n')
        pcomp = self.percent_composition
        for element, percent in sorted(pcomp.items()):
            sys.stdout.write(f'{element}: {percent * 100.:6.4}%\n')
