"""
Loading of element tables (chemical symbol -> atomic mass) from delimited text files or excel workbooks.

The expected text format is a flat sequence of symbol, mass pairs separated by the delimiter, e.g.

    H,1.008
    He,4.002602,Li,6.94

Each line is tokenized on its own; a record never continues onto the following line.
"""
import os
import re
import sys
from types import MappingProxyType
from zipfile import BadZipFile
import openpyxl as op
from openpyxl.utils.exceptions import InvalidFileException
from .errors import NotFoundError, ParseError

DELIMITER = ','  # field delimiter for text tables
MASS_PATTERN = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')  # decimal atomic mass field
USER_TABLE = 'user_periodic_table.csv'  # user table looked for in the current working directory
DEFAULT_TABLE = os.path.join(  # periodic table shipped with the package
    os.path.dirname(os.path.abspath(__file__)),
    'data',
    'periodic_table.csv',
)


def parse_mass(value, path, line):
    """
    Interprets a single atomic mass field.

    :param value: field value (string or number)
    :param path: source of the field (for error reporting)
    :param int line: line number of the field (for error reporting)
    :return: atomic mass
    :rtype: float
    """
    if type(value) is str and MASS_PATTERN.fullmatch(value.strip()) is None:
        raise ParseError(path, line, value)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ParseError(path, line, value)


def parse_line(line: str, path, lineno: int, delimiter: str = DELIMITER):
    """
    Splits a line into symbol, mass pairs.

    :param line: line of the table file
    :param path: source of the line (for error reporting)
    :param lineno: line number (for error reporting)
    :param delimiter: field delimiter
    :return: list of (symbol, mass) tuples
    :rtype: list
    """
    line = line.strip()
    if line == '':
        return []
    fields = [field.strip() for field in line.split(delimiter)]
    if len(fields) > 1 and fields[-1] == '':  # trailing delimiter
        del fields[-1]
    if len(fields) % 2 != 0:
        raise ParseError(path, lineno, fields[-1], 'has no atomic mass following it')
    for symbol in fields[0::2]:
        if symbol == '':
            raise ParseError(path, lineno, symbol, 'is not a valid chemical symbol')
    return [
        (symbol, parse_mass(mass, path, lineno))
        for symbol, mass in zip(fields[0::2], fields[1::2])
    ]


def load_table(path, delimiter: str = DELIMITER, verbose: bool = False):
    """
    Loads an element table from a delimited text file. Where a symbol is defined more than once, the last definition
    is retained.

    :param path: path to the table file
    :param delimiter: field delimiter (default ',')
    :param verbose: chatty mode
    :return: read-only mapping of symbol to atomic mass
    :rtype: MappingProxyType
    """
    if verbose is True:
        sys.stdout.write(f'Loading element table "{path}"')
    table = {}
    try:
        with open(path, encoding='utf-8') as f:
            for lineno, line in enumerate(f, start=1):
                for symbol, mass in parse_line(line, path, lineno, delimiter):
                    table[symbol] = mass
    except (OSError, UnicodeDecodeError) as e:
        if verbose is True:
            sys.stdout.write(' FAIL\n')
        raise NotFoundError(path, getattr(e, 'strerror', None) or str(e)) from e
    if verbose is True:
        sys.stdout.write(f' DONE ({len(table)} elements)\n')
    return MappingProxyType(table)


def load_table_xlsx(bookname, sheet: str = None, verbose: bool = False):
    """
    Loads an element table from an excel workbook. Symbols are read from column A and atomic masses from column B;
    empty rows are skipped.

    :param bookname: path to the *xlsx file
    :param sheet: name of the sheet containing the table (the active sheet is used if not specified)
    :param verbose: chatty mode
    :return: read-only mapping of symbol to atomic mass
    :rtype: MappingProxyType
    """
    if type(bookname) is not str:
        bookname = str(bookname)
    if verbose is True:
        sys.stdout.write(f'Loading element table from workbook "{bookname}"')
    try:
        wb = op.load_workbook(bookname, read_only=True, data_only=True)
    except (OSError, InvalidFileException, BadZipFile) as e:
        if verbose is True:
            sys.stdout.write(' FAIL\n')
        raise NotFoundError(bookname, str(e)) from e
    try:
        if sheet is None:
            cs = wb.active
        elif sheet in wb.sheetnames:
            cs = wb[sheet]
        else:
            raise ParseError(bookname, None, sheet, 'is not a sheet of the workbook')
        table = {}
        for rowno, row in enumerate(cs.iter_rows(min_col=1, max_col=2, values_only=True), start=1):
            symbol, mass = (tuple(row) + (None, None))[:2]
            if symbol is None and mass is None:  # empty row
                continue
            if symbol is None:
                raise ParseError(bookname, rowno, mass, 'has no chemical symbol preceding it')
            symbol = str(symbol).strip()
            if symbol == '':
                raise ParseError(bookname, rowno, symbol, 'is not a valid chemical symbol')
            table[symbol] = parse_mass(mass, bookname, rowno)
    finally:
        wb.close()
    if verbose is True:
        sys.stdout.write(f' DONE ({len(table)} elements)\n')
    return MappingProxyType(table)


def default_table(verbose: bool = False):
    """
    Loads the default element table. If a file named user_periodic_table.csv is present in the current working
    directory, it is used in place of the table shipped with the package.

    :param verbose: chatty mode
    :return: read-only mapping of symbol to atomic mass
    :rtype: MappingProxyType
    """
    user_path = os.path.join(os.getcwd(), USER_TABLE)
    if os.path.isfile(user_path):
        return load_table(user_path, verbose=verbose)
    return load_table(DEFAULT_TABLE, verbose=verbose)
