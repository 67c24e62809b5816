"""
Exceptions raised while reading OSO shader files.

Every error carries an ``ErrorKind`` so callers can branch on the failure
category, and parse errors keep the line number and offending token needed to
point at the source.
"""

from enum import Enum, auto


class ErrorKind(Enum):
    """Categories of OSO reading failures."""

    IO = auto()
    INVALID_FORMAT = auto()
    UNSUPPORTED_VERSION = auto()
    PARSE = auto()
    INCOMPLETE = auto()
    CONVERSION = auto()


class OsoError(Exception):
    """Base class for all OSO reading errors."""

    kind = ErrorKind.INVALID_FORMAT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class OsoIOError(OsoError):
    """The shader file could not be found or read."""

    kind = ErrorKind.IO

    def __init__(self, message: str):
        super().__init__(f"IO error: {message}")


class InvalidFormatError(OsoError):
    """The input is not OSO text."""

    kind = ErrorKind.INVALID_FORMAT

    def __init__(self, message: str):
        super().__init__(f"Invalid OSO file format: {message}")


class UnsupportedVersionError(OsoError):
    """The declared format version is older than the reader supports."""

    kind = ErrorKind.UNSUPPORTED_VERSION

    def __init__(self, major: int, minor: int):
        super().__init__(f"Unsupported OSO version: {major}.{minor}")
        self.major = major
        self.minor = minor


class ParseError(OsoError):
    """A symbol line does not match the type grammar.

    Examples:
        >>> raise ParseError(4, "Invalid type specification: flaot", "flaot", 1)
        ParseError: Parse error at line 4: Invalid type specification: flaot
    """

    kind = ErrorKind.PARSE

    def __init__(
        self,
        line: int,
        message: str,
        token: str | None = None,
        token_index: int | None = None,
    ):
        """Initialize the error.

        Args:
            line: 1-based line number of the offending line
            message: Description of the mismatch
            token: The token that failed to parse, if known
            token_index: Position of the token within the line's token list
        """
        super().__init__(f"Parse error at line {line}: {message}")
        self.line = line
        self.reason = message
        self.token = token
        self.token_index = token_index


class IncompleteError(OsoError):
    """The input ended before a shader was declared."""

    kind = ErrorKind.INCOMPLETE

    def __init__(self, message: str):
        super().__init__(f"Incomplete parse: {message}")


class ConversionError(OsoError):
    """A parsed parameter has no valid typed representation."""

    kind = ErrorKind.CONVERSION

    def __init__(self, message: str, name: str | None = None):
        super().__init__(f"Conversion error: {message}")
        self.name = name


__all__ = [
    "ErrorKind",
    "OsoError",
    "OsoIOError",
    "InvalidFormatError",
    "UnsupportedVersionError",
    "ParseError",
    "IncompleteError",
    "ConversionError",
]
