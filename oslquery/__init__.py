from oslquery.errors import (
    ConversionError,
    ErrorKind,
    IncompleteError,
    InvalidFormatError,
    OsoError,
    OsoIOError,
    ParseError,
    UnsupportedVersionError,
)
from oslquery.query import OslQuery
from oslquery.types import Direction, Metadata, MetadataKind, Parameter, TypedParameter

__version__ = "0.1.0"


__all__ = [
    "OslQuery",
    "Parameter",
    "Direction",
    "TypedParameter",
    "Metadata",
    "MetadataKind",
    "ErrorKind",
    "OsoError",
    "OsoIOError",
    "InvalidFormatError",
    "UnsupportedVersionError",
    "ParseError",
    "IncompleteError",
    "ConversionError",
]
