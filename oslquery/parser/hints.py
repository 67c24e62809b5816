"""
Hint parsing for the OSO format.

Hints are ``%tag{...}`` annotations attached to a parameter or to the shader.
Each tag has its own small grammar:

* ``%meta{type,name,value}`` or ``%meta{type name "value"}``
* ``%structfields{a,b,c}``
* ``%struct{"name"}`` and ``%space{"name"}``
* ``%default{value}`` or ``%default{[v1,v2,...]}``

Malformed bodies never raise; the parsers return ``None`` and the hint is
skipped.
"""

import sys

from oslquery.constants import META_HINT
from oslquery.parser.models import BaseType, ParameterBuilder, TypeDesc
from oslquery.parser.tokenizer import parse_float, parse_int


def _braced_content(hint: str) -> str | None:
    """Text between the first ``{`` and the last ``}`` of a hint."""
    start = hint.find("{")
    end = hint.rfind("}")
    if start < 0 or end < 0:
        return None
    return hint[start + 1 : end]


def split_quoted(text: str) -> list[str]:
    """Split on spaces, keeping double-quoted runs together without quotes.

    A backslash inside quotes escapes the next character.
    """
    parts: list[str] = []
    current: list[str] = []
    in_quotes = False
    escape_next = False
    i = 0

    while i < len(text):
        ch = text[i]
        i += 1
        if escape_next:
            current.append(ch)
            escape_next = False
        elif ch == "\\" and in_quotes:
            escape_next = True
        elif ch == '"':
            in_quotes = not in_quotes
            if not in_quotes and current:
                parts.append("".join(current))
                current = []
                while i < len(text) and text[i] == " ":
                    i += 1
        elif ch == " " and not in_quotes:
            if current:
                parts.append("".join(current))
                current = []
        else:
            current.append(ch)

    if current:
        parts.append("".join(current))
    return parts


def make_metadata(type_name: str, name: str, value: str) -> ParameterBuilder:
    """Build a metadata entry, coercing the value according to its type.

    Unknown type names are treated as ``string``. A value that does not parse
    as the declared numeric type is kept as a string.
    """
    basetype = BaseType.from_name(type_name) or BaseType.STRING
    meta = ParameterBuilder(name=name, type_desc=TypeDesc(basetype))
    meta.valid_default = True

    if basetype is BaseType.INT:
        number = parse_int(value)
        if number is not None:
            meta.idefault.append(number)
        else:
            meta.sdefault.append(value)
    elif basetype is BaseType.FLOAT:
        real = parse_float(value)
        if real is not None:
            meta.fdefault.append(real)
        else:
            meta.sdefault.append(value)
    else:
        meta.sdefault.append(value)

    return meta


def parse_metadata_hint(hint: str) -> ParameterBuilder | None:
    """Parse a ``%meta{...}`` hint.

    Args:
        hint: Hint token, with or without the ``%meta{`` prefix

    Returns:
        Metadata entry as a builder, or ``None`` if the body is malformed
    """
    body = hint[len(META_HINT) :] if hint.startswith(META_HINT) else hint
    end = body.find("}")
    content = body if end < 0 else body[:end]

    if "," in content:
        parts = [part.strip() for part in content.split(",")]
        if len(parts) >= 3:
            value = ",".join(parts[2:]).strip().strip('"')
            return make_metadata(parts[0], parts[1], value)

    parts = split_quoted(content)
    if len(parts) >= 3:
        return make_metadata(parts[0], parts[1], " ".join(parts[2:]))
    if len(parts) == 2:
        return make_metadata(BaseType.STRING.value, parts[0], parts[1])
    return None


def parse_structfields_hint(hint: str) -> list[str] | None:
    """Parse ``%structfields{a,b,c}`` into field names, ``None`` when empty."""
    content = _braced_content(hint)
    if content is None:
        return None
    fields = [sys.intern(name.strip()) for name in content.split(",") if name.strip()]
    return fields or None


def _parse_name_hint(hint: str) -> str | None:
    content = _braced_content(hint)
    if content is None:
        return None
    name = content.strip().strip('"')
    return sys.intern(name) if name else None


def parse_struct_hint(hint: str) -> str | None:
    """Parse ``%struct{"name"}``."""
    return _parse_name_hint(hint)


def parse_space_hint(hint: str) -> str | None:
    """Parse ``%space{"name"}``."""
    return _parse_name_hint(hint)


def parse_default_hint(hint: str) -> list[str] | None:
    """Parse ``%default{v}`` or ``%default{[v1,v2]}`` into raw value strings."""
    content = _braced_content(hint)
    if content is None:
        return None
    content = content.strip()
    if not content:
        return None

    if content.startswith("[") and content.endswith("]"):
        values = [item.strip().strip('"') for item in content[1:-1].split(",")]
        values = [value for value in values if value]
    else:
        values = [content.strip('"')]

    return values or None


def apply_default_hint(builder: ParameterBuilder, values: list[str]) -> None:
    """Append ``%default`` values to the builder buffer matching its type.

    Entries that do not parse as the parameter's numeric type are dropped.
    """
    basetype = builder.basetype
    if basetype is BaseType.INT:
        for value in values:
            number = parse_int(value)
            if number is not None:
                builder.idefault.append(number)
    elif basetype.is_float_based:
        for value in values:
            real = parse_float(value)
            if real is not None:
                builder.fdefault.append(real)
    elif basetype is BaseType.STRING:
        builder.sdefault.extend(values)

    builder.valid_default = True
