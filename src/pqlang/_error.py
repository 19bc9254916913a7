"""Error classes and helpers"""

__all__ = [
    "LangError",
    "ParseError",
    "EvalError",
    "ProgramError",
    "LibraryNotFoundError",
    "describe",
]


class LangError(Exception):
    """Base for all errors reported by PQLang.

    Args:
        message: (str) Error description
        position: (SourcePosition | None) Optional source location

    Attributes:
        message: (str) Error description
        position: (SourcePosition | None) Where the error occurred
    """

    prefix = "Error! "

    def __init__(self, message, position=None):
        self.message = message
        self.position = position
        super().__init__(message)

    def __str__(self):
        if self.position:
            return f"{self.message} ({self.position})"
        return self.message


class ParseError(LangError):
    """Malformed program text."""

    prefix = "Parse Error! "


class LibraryNotFoundError(ParseError):
    """An imported library could not be located."""


class EvalError(LangError):
    """Error detected by the interpreter while evaluating."""


class ProgramError(LangError):
    """Error raised by the program itself with `error(...)`."""

    prefix = "Program error: "


def describe(error):
    """Human readable, prefixed message for an interpreter error.

    Args:
        error: (LangError) Error to describe
    Returns:
        (str) Message like "Parse Error! Could not parse: 1+"
    """
    return f"{error.prefix}{error}"
