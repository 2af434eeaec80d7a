"""
Exceptions raised while loading element tables and interpreting molecular formulas
"""


class NotFoundError(FileNotFoundError):
    def __init__(self, path, reason=None):
        """
        Raised when an element table source cannot be opened or read.

        :param path: path of the table source
        :param reason: optional description of the underlying failure
        """
        self.path = path
        msg = f'The element table "{path}" could not be opened'
        if reason is not None:
            msg += f' ({reason})'
        super().__init__(msg)


class ParseError(ValueError):
    def __init__(self, path, line, field, reason='is not a valid atomic mass'):
        """
        Raised when a record of an element table cannot be interpreted.

        :param path: path of the table source
        :param int line: line (or row) number of the record, starting at 1. None if the failure is not tied to a line.
        :param field: the offending field
        :param str reason: what is wrong with the field
        """
        self.path = path
        self.line = line
        self.field = field
        if line is None:
            super().__init__(f'"{field}" in "{path}" {reason}')
        else:
            super().__init__(f'"{field}" on line {line} of "{path}" {reason}')


class InvalidFormulaError(ValueError):
    def __init__(self, formula: str):
        """Raised when a position in a formula does not resolve to an element of the table."""
        self.formula = formula
        super().__init__(f'{formula} is not a valid chemical formula')
