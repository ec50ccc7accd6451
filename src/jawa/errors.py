## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class JawaError(Exception):
    def __init__(self, message: str = "", *, jawa_token=None, jawa_meta=None):
        """Base class for all Jawa-raised errors."""
        super().__init__(message)
        self.jawa_token: str = jawa_token
        self.jawa_meta: dict = jawa_meta

class JawaSyntaxError(JawaError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None, expected=(), found=None):
        super().__init__(message, jawa_token=token, jawa_meta={'filename': filename, 'line': line, 'column': column})
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token
        self.expected = tuple(expected)
        self.found = found

class JawaIncompleteParse(JawaSyntaxError):
    pass

class JawaNameError(JawaError, NameError):
    """Name lookup fell off the end of the environment chain."""
    pass

class JawaCapabilityError(JawaError, TypeError):
    """Member access, invocation or assignment on a value/node that does not support it."""
    pass

class JawaArityError(JawaError, TypeError):
    def __init__(self, message: str = "", *, expected: int = None, given: int = None, jawa_token=None, jawa_meta=None):
        super().__init__(message, jawa_token=jawa_token, jawa_meta=jawa_meta)
        self.expected = expected
        self.given = given

class JawaTypeError(JawaError, TypeError):
    """Binary operator applied to an unsupported pair of values."""
    pass

class JawaImportError(JawaError, ImportError):
    def __init__(self, message, *, path=(), jawa_token=None, jawa_meta=None):
        super().__init__(message, jawa_token=jawa_token, jawa_meta=jawa_meta)
        self.path = tuple(path)

class JawaEntryPointError(JawaError, RuntimeError):
    pass
