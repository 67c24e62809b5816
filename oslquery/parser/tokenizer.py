"""
Line tokenizer for the OSO format.

OSO directives are whitespace separated, but quoted strings and ``%tag{...}``
hint blocks may contain whitespace and must stay in one token. The tokenizer
is permissive: an unterminated quote or brace block runs to the end of the
line instead of raising.
"""

import re

from oslquery.constants import INT32_MAX, INT32_MIN

_WHITESPACE = frozenset(" \t\r\n")

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)


def tokenize_line(line: str) -> list[str]:
    """Split one OSO line into tokens.

    Args:
        line: A single line of OSO text

    Returns:
        Tokens in line order; quoted strings keep their quotes and hint blocks
        keep their braces
    """
    tokens: list[str] = []
    length = len(line)
    start = 0
    in_token = False
    i = 0

    while i < length:
        ch = line[i]

        if ch == '"':
            if not in_token:
                start = i
                in_token = True
            j = i + 1
            while j < length:
                if line[j] == '"' and line[j - 1] != "\\":
                    tokens.append(line[start : j + 1])
                    in_token = False
                    break
                j += 1
            i = j + 1
            continue

        if ch == "%":
            if not in_token:
                start = i
                in_token = True
            depth = 0
            j = i + 1
            while j < length:
                c = line[j]
                if c == "{":
                    depth += 1
                elif c == "}":
                    depth -= 1
                    if depth == 0:
                        tokens.append(line[start : j + 1])
                        in_token = False
                        break
                elif depth == 0 and c in _WHITESPACE:
                    tokens.append(line[start:j])
                    in_token = False
                    break
                j += 1
            i = j + 1
            if in_token and i >= length:
                tokens.append(line[start:])
                in_token = False
            continue

        if ch in _WHITESPACE:
            if in_token:
                tokens.append(line[start:i])
                in_token = False
        elif not in_token:
            start = i
            in_token = True
        i += 1

    if in_token:
        tokens.append(line[start:])

    return tokens


def parse_int(text: str) -> int | None:
    """Parse a signed 32-bit integer literal, ``None`` if it is not one."""
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    if value < INT32_MIN or value > INT32_MAX:
        return None
    return value


def parse_float(text: str) -> float | None:
    """Parse a decimal, ``inf`` or ``nan`` literal, ``None`` if it is not one."""
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def unescape_default(text: str) -> str:
    return (
        text.replace("\\\\", "\\")
        .replace("\\n", "\n")
        .replace("\\t", "\t")
        .replace("\\r", "\r")
        .replace('\\"', '"')
    )


def parse_default_token(token: str) -> int | float | str | None:
    """Interpret a default-value token from a symbol line.

    Quoted tokens become strings, integer literals become ints, other numeric
    literals become floats. Anything else yields ``None``.
    """
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        return unescape_default(token[1:-1])

    value = parse_int(token)
    if value is not None:
        return value

    return parse_float(token)
