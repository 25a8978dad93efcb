"""
Error types raised while resolving the configuration and reading inputs.
"""


class HtmlBookError(RuntimeError):
    """Base class. `code` is a short machine-readable tag used in log lines."""
    code = "ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code


class UsageError(HtmlBookError):
    """Bad or missing command-line argument. Always fatal."""
    code = "USAGE"

    def __init__(self, arg: str | None = None):
        self.arg = arg
        if arg and arg.startswith('-'):
            message = f'Bad option argument "{arg}"!'
        else:
            message = arg or ""
        super().__init__(message)


class BadFormatError(HtmlBookError):
    """Book file without the #HTMLDOC header."""
    code = "BAD_FORMAT"


class NotFoundError(HtmlBookError):
    """An input could not be located."""
    code = "NOT_FOUND"


class AccessDeniedError(HtmlBookError):
    """Local file access is disabled."""
    code = "ACCESS_DENIED"


class ReadError(HtmlBookError):
    """The input was located but could not be opened or parsed."""
    code = "READ_ERROR"
