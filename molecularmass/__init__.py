"""
A Python library for calculating the molecular mass of chemical formulas from a table of atomic masses.
"""
from .errors import NotFoundError, ParseError, InvalidFormulaError
from .table import load_table, load_table_xlsx, default_table
from .formula import evaluate, composition_from_formula, molecular_weights
from .molecule import Molecule

__version__ = '1.0.0'
