"""
Interpretation of molecular formula strings against an element table.

A formula is scanned left to right. At each position a two character symbol is tried first, then a one character
symbol, and any digits immediately following the symbol are taken as its subscript. There is no backtracking: if both
"C" and "Co" are defined, "Co" is always chosen at a "Co" prefix.
"""
import numpy as np
from tqdm import tqdm
from .errors import InvalidFormulaError

DIGITS = '0123456789'  # valid subscript characters

unicode_subscripts = {  # subscripts values for unit representations
    0: '₀',
    1: '₁',
    2: '₂',
    3: '₃',
    4: '₄',
    5: '₅',
    6: '₆',
    7: '₇',
    8: '₈',
    9: '₉',
}


def chew_formula(table, formula: str, index: int = 0):
    """
    Interprets the symbol and subscript block which begins at the specified index of the formula.

    :param table: element table (symbol -> atomic mass)
    :param formula: molecular formula
    :param index: index in the formula where the block begins
    :return: symbol, subscript, index following the block
    :rtype: str, int, int
    """
    if index < len(formula) - 1 and formula[index:index + 2] in table:
        symbol = formula[index:index + 2]
    elif formula[index] in table:
        symbol = formula[index]
    else:
        raise InvalidFormulaError(formula)
    index += len(symbol)

    num = ''
    while index < len(formula) and formula[index] in DIGITS:
        num += formula[index]
        index += 1
    if num == '':
        subscript = 1
    else:
        try:
            subscript = int(num)
        except ValueError as e:  # exceeds the integer string conversion limit
            raise InvalidFormulaError(formula) from e
    return symbol, subscript, index


def tokenize(table, formula: str):
    """
    Generator of the symbol, subscript pairs making up a formula.

    :param table: element table (symbol -> atomic mass)
    :param formula: molecular formula
    """
    index = 0
    while index < len(formula):
        symbol, subscript, index = chew_formula(table, formula, index)
        yield symbol, subscript


def evaluate(table, formula: str):
    """
    Calculates the molecular mass of a formula.

    :param table: element table (symbol -> atomic mass)
    :param formula: molecular formula (e.g. "C6H12O6"). An empty formula has a mass of 0.
    :return: molecular mass
    :rtype: float
    """
    mass = 0.
    for symbol, subscript in tokenize(table, formula):
        try:
            mass += table[symbol] * subscript
        except OverflowError as e:  # subscript too large to be represented as a float
            raise InvalidFormulaError(formula) from e
    return mass


def composition_from_formula(table, formula: str):
    """
    Interprets a formula as a composition dictionary. Repeated symbols are summed (e.g. "CH3CH2OH" has a composition
    of ``{'C': 2, 'H': 6, 'O': 1}``).

    :param table: element table (symbol -> atomic mass)
    :param formula: molecular formula
    :return: dictionary of symbol -> number of that element
    :rtype: dict
    """
    comp = {}
    for symbol, subscript in tokenize(table, formula):
        try:
            comp[symbol] += subscript
        except KeyError:
            comp[symbol] = subscript
    return comp


def molecular_formula(comp: dict, formatter=str):
    """
    Generates the Hill formula for a composition (carbon, hydrogen, then the remaining elements alphabetically).

    :param comp: composition dictionary
    :param formatter: function converting an element count to its string representation (e.g. to_subscript)
    :return: molecular formula
    :rtype: str
    """
    out = ''
    for key in ['C', 'H'] + sorted(key for key in comp if key not in ['C', 'H']):
        if comp.get(key, 0) <= 0:
            continue
        out += f'{key}{formatter(comp[key])}' if comp[key] > 1 else key
    return out


def to_subscript(number):
    """
    Converts the value to subscript characters.

    :param int number: number to convert
    :return: subscript
    :rtype: str
    """
    return ''.join(
        [unicode_subscripts[int(val)] for val in str(abs(number))]
    )


def molecular_weights(table, formulas, verbose: bool = False):
    """
    Calculates the molecular mass of each of the provided formulas. If any formula is invalid, an InvalidFormulaError
    is raised and no masses are returned.

    :param table: element table (symbol -> atomic mass)
    :param formulas: iterable of molecular formulas
    :param verbose: show a progress bar
    :return: array of molecular masses
    :rtype: np.ndarray
    """
    formulas = list(formulas)
    out = np.zeros(len(formulas), dtype=np.float64)
    for ind, formula in enumerate(tqdm(formulas, desc='calculating molecular weights', disable=not verbose)):
        out[ind] = evaluate(table, formula)
    return out


def molecular_weight_error(calculated: float, expected: float):
    """
    Calculate the relative error between a calculated and expected molecular weight.

    :param calculated: calculated molecular weight
    :param expected: expected (true) molecular weight
    :return: Calculated error.
    :rtype: float
    """
    return (calculated - expected) / expected
