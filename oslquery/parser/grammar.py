"""
Directive grammar for the OSO format.

Small recognizers for the version line, shader declarations, symbol kinds and
type specifications. Each returns ``None`` when its input does not match so
the reader can decide whether the mismatch matters.
"""

import re

from oslquery.constants import SHADER_KINDS, VERSION_KEYWORD
from oslquery.parser.models import BaseType, SymType, TypeDesc

IDENTIFIER_PATTERN = r"[A-Za-z_$][A-Za-z0-9_$.]*"

_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN)
_VERSION_RE = re.compile(
    rf"{VERSION_KEYWORD}[ \t]+([+-]?[0-9]+)\.([0-9]+)"
)
_SHADER_RE = re.compile(rf"({IDENTIFIER_PATTERN})[ \t]+")
_QUOTED_RE = re.compile(r'"([^"]*)"')
_TYPESPEC_RE = re.compile(r"([a-z]+)(\[\]|\[[0-9]+\])?")
_CLOSURE_RE = re.compile(r"closure[ \t]+(.*)")


def parse_version(line: str) -> tuple[int, int] | None:
    """Match an ``OpenShadingLanguage <major>.<minor>`` line.

    Returns:
        ``(major, minor)`` or ``None`` if the line is not a version line
    """
    match = _VERSION_RE.match(line)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def unescape_string(text: str) -> str:
    return (
        text.replace("\\n", "\n")
        .replace("\\t", "\t")
        .replace("\\r", "\r")
        .replace('\\"', '"')
        .replace("\\\\", "\\")
    )


def is_shader_line(line: str) -> bool:
    """Check if a line starts with a shader kind keyword and whitespace."""
    for kind in SHADER_KINDS:
        if line.startswith(kind) and line[len(kind) : len(kind) + 1] in (" ", "\t"):
            return True
    return False


def parse_shader_decl(line: str) -> tuple[str, str, str] | None:
    """Parse ``<kind> <name>`` where the name is quoted or a bare identifier.

    Returns:
        ``(kind, name, rest_of_line)`` or ``None`` if no name could be read
    """
    match = _SHADER_RE.match(line)
    if match is None:
        return None
    kind = match.group(1)
    pos = match.end()

    quoted = _QUOTED_RE.match(line, pos)
    if quoted is not None:
        return kind, unescape_string(quoted.group(1)), line[quoted.end() :]

    ident = _IDENTIFIER_RE.match(line, pos)
    if ident is not None:
        return kind, ident.group(0), line[ident.end() :]
    return None


def parse_symtype(token: str) -> SymType | None:
    try:
        return SymType(token)
    except ValueError:
        return None


def parse_typespec(text: str) -> TypeDesc | None:
    """Parse a type specification.

    Accepts a basetype keyword with an optional ``[]`` or ``[N]`` suffix, or
    the same preceded by ``closure``.

    Args:
        text: Type text, e.g. ``float``, ``color[3]``, ``closure color``

    Returns:
        Parsed type descriptor or ``None`` if the text is not a type
    """
    is_closure = False
    closure = _CLOSURE_RE.fullmatch(text)
    if closure is not None:
        is_closure = True
        text = closure.group(1)

    match = _TYPESPEC_RE.fullmatch(text)
    if match is None:
        return None

    basetype = BaseType.from_name(match.group(1))
    if basetype is None:
        return None

    suffix = match.group(2)
    if suffix is None:
        arraylen = 0
    elif suffix == "[]":
        arraylen = -1
    else:
        arraylen = int(suffix[1:-1])

    return TypeDesc(basetype=basetype, arraylen=arraylen, is_closure=is_closure)
