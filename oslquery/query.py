"""
Query interface over a parsed OSO shader.

``OslQuery`` is the immutable result of reading one shader: its name and
type, the parameters in declaration order and the shader-level metadata.
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from oslquery import types as t
from oslquery.constants import OSO_EXTENSION, SEARCHPATH_SEPARATOR
from oslquery.errors import OsoIOError


def find_shader(path: str | Path, searchpath: str = "") -> Path | None:
    """Locate a shader file.

    A path without the ``.oso`` suffix is tried with it first, then the path
    as given, then every directory of the colon-separated search path, each
    with and without the suffix.

    Args:
        path: Shader file path or bare shader name
        searchpath: Colon-separated list of directories

    Returns:
        Path of the first existing candidate, or ``None``
    """
    path = Path(path)

    if path.suffix != OSO_EXTENSION and path.name:
        with_ext = path.with_suffix(OSO_EXTENSION)
        if with_ext.exists():
            return with_ext

    if path.exists():
        return path

    if searchpath:
        for directory in searchpath.split(SEARCHPATH_SEPARATOR):
            candidate = Path(directory) / path
            if candidate.exists():
                return candidate
            if candidate.name:
                candidate = candidate.with_suffix(OSO_EXTENSION)
                if candidate.exists():
                    return candidate

    return None


@dataclass(frozen=True)
class OslQuery:
    """Shader information read from an OSO file.

    Attributes:
        shader_name: Name from the shader declaration
        shader_type: ``shader``, ``surface``, ``displacement`` or ``volume``
        parameters: Parameters in declaration order
        metadata: Shader-level metadata
    """

    shader_name: str = ""
    shader_type: str = ""
    parameters: tuple[t.Parameter, ...] = ()
    metadata: tuple[t.Metadata, ...] = ()

    @classmethod
    def from_string(cls, content: str) -> "OslQuery":
        """Parse OSO text.

        Raises:
            OsoError: If the text cannot be parsed
        """
        from oslquery.parser.reader import OsoReader

        return OsoReader().parse_string(content)

    @classmethod
    def open(cls, path: str | Path, searchpath: str = "") -> "OslQuery":
        """Find and parse an OSO file.

        Args:
            path: Shader file path or bare shader name
            searchpath: Colon-separated directories to look in

        Raises:
            OsoIOError: If no candidate file exists or it cannot be read
            OsoError: If the file cannot be parsed
        """
        from oslquery.parser.reader import OsoReader

        found = find_shader(path, searchpath)
        if found is None:
            raise OsoIOError(f"Shader file not found: {path}")
        logger.debug(f"Reading shader from {found}")
        return OsoReader().parse_file(found)

    def param_count(self) -> int:
        return len(self.parameters)

    def param_at(self, index: int) -> t.Parameter | None:
        """Get a parameter by position, ``None`` if out of range."""
        if 0 <= index < len(self.parameters):
            return self.parameters[index]
        return None

    def param_by_name(self, name: str) -> t.Parameter | None:
        """Get a parameter by name.

        Names are not required to be unique; the first declared match wins.
        """
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def params(self) -> tuple[t.Parameter, ...]:
        return self.parameters

    def input_params(self) -> Iterator[t.Parameter]:
        return (param for param in self.parameters if not param.is_output)

    def output_params(self) -> Iterator[t.Parameter]:
        return (param for param in self.parameters if param.is_output)

    def find_metadata(self, name: str) -> t.Metadata | None:
        for meta in self.metadata:
            if meta.name == name:
                return meta
        return None

    def is_valid(self) -> bool:
        """Check if a shader declaration was read."""
        return bool(self.shader_name) and bool(self.shader_type)

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data suitable for ``json.dumps``."""
        return {
            "shader_name": self.shader_name,
            "shader_type": self.shader_type,
            "parameters": [parameter_to_dict(param) for param in self.parameters],
            "metadata": [metadata_to_dict(meta) for meta in self.metadata],
        }


def _plain(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_plain(item) for item in value]
    # JSON has no inf or nan
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def metadata_to_dict(meta: t.Metadata) -> dict[str, Any]:
    return {
        "name": meta.name,
        "kind": meta.kind.name.lower(),
        "value": _plain(meta.value),
    }


def parameter_to_dict(param: t.Parameter) -> dict[str, Any]:
    """Convert a parameter to plain data."""
    typed = param.typed
    data: dict[str, Any] = {
        "name": param.name,
        "direction": param.direction.value,
        "type": t.format_type(typed),
        "default": _plain(t.default_of(typed)),
    }
    if t.is_array(typed):
        data["size"] = getattr(typed, "size", None)
    space = t.space_of(typed)
    if space is not None:
        data["space"] = space
    if param.struct_name is not None:
        data["struct_name"] = param.struct_name
    if param.fields:
        data["fields"] = list(param.fields)
    data["metadata"] = [metadata_to_dict(meta) for meta in param.metadata]
    return data
