"""
Line dispatcher for OSO files.

The reader walks the text one line at a time. Version and shader lines fill in
the shader identity, symbol lines open a ``ParameterBuilder`` for each
``param``/``oparam``, and hint tokens on the same or following lines refine
the open builder (or the shader when no builder is open). A builder is turned
into a ``Parameter`` when the next symbol line starts, when the ``code``
section begins, or at the end of input.
"""

import sys
from pathlib import Path

from loguru import logger

from oslquery.constants import (
    CODE_MARKER,
    COMMENT_PREFIX,
    DEFAULT_HINT,
    HINT_PREFIX,
    INITEXPR_HINT,
    META_HINT,
    MIN_MAJOR_VERSION,
    SPACE_HINT,
    STRUCT_HINT,
    STRUCTFIELDS_HINT,
)
from oslquery.errors import (
    ConversionError,
    InvalidFormatError,
    OsoIOError,
    ParseError,
    UnsupportedVersionError,
)
from oslquery.parser import grammar, hints
from oslquery.parser.models import ParameterBuilder, ReaderState, SymType
from oslquery.parser.tokenizer import parse_default_token, tokenize_line
from oslquery.parser.unify import build_metadata, build_parameter
from oslquery.query import OslQuery
from oslquery.types import Metadata, Parameter


def iter_lines(content: str):
    """Yield ``(line_number, line)`` pairs, numbering from 1.

    Lines are split on ``\\n`` with one trailing ``\\r`` removed; a final
    newline does not start an extra line.
    """
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for number, line in enumerate(lines, start=1):
        if line.endswith("\r"):
            line = line[:-1]
        yield number, line


class OsoReader:
    """Parser turning OSO text into an ``OslQuery``.

    Every parse starts from an empty state, so a reader can be reused.

    Attributes:
        line_no: Number of the line being processed
        diagnostics: Parameters dropped by the last parse because they could
            not be converted
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        """Clear everything collected by a previous parse."""
        self.line_no = 0
        self.diagnostics: list[ConversionError] = []
        self._current: ParameterBuilder | None = None
        self._shader_name = ""
        self._shader_type = ""
        self._parameters: list[Parameter] = []
        self._metadata: list[Metadata] = []

    @property
    def state(self) -> ReaderState:
        if self._current is None:
            return ReaderState.SCANNING
        return ReaderState.IN_PARAMETER

    def parse_file(self, path: str | Path) -> OslQuery:
        """Read and parse an OSO file.

        Raises:
            OsoIOError: If the file cannot be read
            InvalidFormatError: If the file is not UTF-8 text
        """
        try:
            content = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise InvalidFormatError(f"{path} is not a text file: {e}") from e
        except OSError as e:
            raise OsoIOError(str(e)) from e
        return self.parse_string(content)

    def parse_string(self, content: str) -> OslQuery:
        """Parse OSO text.

        Raises:
            UnsupportedVersionError: If the declared major version is below 1
            ParseError: If a symbol line has an invalid type
        """
        self._reset()
        for line_no, line in iter_lines(content):
            self.line_no = line_no
            stripped = line.strip()
            if not stripped or stripped.startswith(COMMENT_PREFIX):
                continue
            if not self._dispatch(line):
                logger.debug(f"Reached code section at line {self.line_no}")
                break

        self._finish_current()

        return OslQuery(
            shader_name=self._shader_name,
            shader_type=self._shader_type,
            parameters=tuple(self._parameters),
            metadata=tuple(self._metadata),
        )

    def _dispatch(self, line: str) -> bool:
        """Process one non-blank line, ``False`` once the code section starts."""
        version = grammar.parse_version(line)
        if version is not None:
            major, minor = version
            if major < MIN_MAJOR_VERSION:
                raise UnsupportedVersionError(major, minor)
            logger.debug(f"OSO version {major}.{minor}")
            return True

        if grammar.is_shader_line(line):
            self._handle_shader(line)
            return True

        tokens = tokenize_line(line)
        if not tokens:
            return True

        symtype = grammar.parse_symtype(tokens[0])
        if symtype is not None:
            self._handle_symbol(symtype, tokens)
        elif line.startswith(CODE_MARKER):
            return False
        elif line.startswith(HINT_PREFIX):
            for token in tokens:
                if token.startswith(HINT_PREFIX):
                    self._handle_hint(token)
        return True

    def _handle_shader(self, line: str) -> None:
        decl = grammar.parse_shader_decl(line)
        if decl is None:
            return
        shader_type, shader_name, rest = decl
        self._shader_type = sys.intern(shader_type)
        self._shader_name = sys.intern(shader_name)
        logger.debug(f"Shader: {shader_type} {shader_name}")

        # Hints on the declaration line describe the shader itself
        for token in tokenize_line(rest):
            if token.startswith(HINT_PREFIX):
                self._handle_hint(token, global_context=True)

    def _handle_symbol(self, symtype: SymType, tokens: list[str]) -> None:
        self._finish_current()

        if len(tokens) < 3:
            return

        if tokens[1] == "closure":
            if len(tokens) < 4:
                raise ParseError(
                    self.line_no,
                    "Incomplete closure type specification",
                    tokens[1],
                    1,
                )
            type_desc = grammar.parse_typespec(f"{tokens[1]} {tokens[2]}")
            if type_desc is None:
                raise ParseError(
                    self.line_no,
                    f"Invalid closure type: {tokens[1]} {tokens[2]}",
                    tokens[1],
                    1,
                )
            name_index = 3
        else:
            type_desc = grammar.parse_typespec(tokens[1])
            if type_desc is None:
                raise ParseError(
                    self.line_no,
                    f"Invalid type specification: {tokens[1]}",
                    tokens[1],
                    1,
                )
            name_index = 2

        if symtype.is_parameter:
            self._current = ParameterBuilder(
                name=tokens[name_index],
                type_desc=type_desc,
                is_output=symtype is SymType.OUTPUT_PARAM,
            )

        index = name_index + 1
        while index < len(tokens) and not tokens[index].startswith(HINT_PREFIX):
            value = parse_default_token(tokens[index])
            if value is not None and self._current is not None:
                self._current.add_default(value)
            index += 1

        for token in tokens[index:]:
            if token.startswith(HINT_PREFIX):
                self._handle_hint(token)

    def _handle_hint(self, hint: str, global_context: bool = False) -> None:
        """Apply one ``%`` token to the open builder or to the shader.

        Unknown tags and malformed bodies are ignored.
        """
        current = None if global_context else self._current

        if hint.startswith(META_HINT):
            meta = hints.parse_metadata_hint(hint)
            if meta is None:
                return
            if current is not None:
                current.metadata.append(meta)
            else:
                converted = build_metadata(meta)
                if converted is not None:
                    self._metadata.append(converted)
            return

        if current is None:
            return

        if hint.startswith(STRUCTFIELDS_HINT):
            fields = hints.parse_structfields_hint(hint)
            if fields is not None:
                current.fields = fields
        elif hint.startswith(STRUCT_HINT):
            current.structname = hints.parse_struct_hint(hint)
            current.is_struct = current.structname is not None
        elif hint.startswith(SPACE_HINT):
            space = hints.parse_space_hint(hint)
            if space is not None:
                current.spacename.append(space)
        elif hint.startswith(DEFAULT_HINT):
            values = hints.parse_default_hint(hint)
            if values is not None:
                hints.apply_default_hint(current, values)
        elif hint == INITEXPR_HINT:
            current.valid_default = False

    def _finish_current(self) -> None:
        """Convert the open builder and append it to the parameter list."""
        builder = self._current
        self._current = None
        if builder is None:
            return

        try:
            param = build_parameter(builder)
        except ConversionError as e:
            logger.warning(f"Dropping parameter at line {self.line_no}: {e}")
            self.diagnostics.append(e)
            return

        self._parameters.append(param)
        logger.debug(f"Parameter: {param.direction.value} {param.name}")
