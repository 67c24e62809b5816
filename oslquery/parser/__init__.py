"""
OSO parsing pipeline.

Tokenizer, directive grammar, hint grammar, parameter builder and the line
dispatcher that ties them together.
"""

from oslquery.parser.models import BaseType, ParameterBuilder, SymType, TypeDesc
from oslquery.parser.reader import OsoReader
from oslquery.parser.tokenizer import tokenize_line

__all__ = [
    "BaseType",
    "OsoReader",
    "ParameterBuilder",
    "SymType",
    "TypeDesc",
    "tokenize_line",
]
