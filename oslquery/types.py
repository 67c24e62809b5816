"""
Typed shader parameters.

A parameter's type and its default value are unified into one variant of
``TypedParameter``, so a color parameter can only ever carry a 3-float
default, a matrix a 16-float default, and so on. The variants are plain frozen
dataclasses with no shared base class; code that needs to treat them
uniformly dispatches with ``match`` (see ``has_default``, ``type_name``).
"""

import sys
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import TypeAlias

Triple: TypeAlias = tuple[float, float, float]
Matrix16: TypeAlias = tuple[float, ...]  # always 16 floats, row-major


# ============= Scalar Types =============


@dataclass(frozen=True)
class Int:
    default: int | None = None


@dataclass(frozen=True)
class Float:
    default: float | None = None


@dataclass(frozen=True)
class String:
    default: str | None = None


# ============= Geometric Types =============


@dataclass(frozen=True)
class Color:
    """RGB color; ``space`` names the color space (e.g. ``"hsv"``)."""

    default: Triple | None = None
    space: str | None = None


@dataclass(frozen=True)
class Point:
    """3D point; ``space`` names the coordinate system (e.g. ``"world"``)."""

    default: Triple | None = None
    space: str | None = None


@dataclass(frozen=True)
class Vector:
    default: Triple | None = None
    space: str | None = None


@dataclass(frozen=True)
class Normal:
    default: Triple | None = None
    space: str | None = None


@dataclass(frozen=True)
class Matrix:
    default: Matrix16 | None = None


# ============= Fixed-Size Array Types =============


@dataclass(frozen=True)
class IntArray:
    size: int
    default: tuple[int, ...] | None = None


@dataclass(frozen=True)
class FloatArray:
    size: int
    default: tuple[float, ...] | None = None


@dataclass(frozen=True)
class StringArray:
    size: int
    default: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ColorArray:
    size: int
    default: tuple[Triple, ...] | None = None
    space: str | None = None


@dataclass(frozen=True)
class PointArray:
    size: int
    default: tuple[Triple, ...] | None = None
    space: str | None = None


@dataclass(frozen=True)
class VectorArray:
    size: int
    default: tuple[Triple, ...] | None = None
    space: str | None = None


@dataclass(frozen=True)
class NormalArray:
    size: int
    default: tuple[Triple, ...] | None = None
    space: str | None = None


@dataclass(frozen=True)
class MatrixArray:
    size: int
    default: tuple[Matrix16, ...] | None = None


# ============= Dynamic Array Types =============


@dataclass(frozen=True)
class IntDynamicArray:
    default: tuple[int, ...] | None = None


@dataclass(frozen=True)
class FloatDynamicArray:
    default: tuple[float, ...] | None = None


@dataclass(frozen=True)
class StringDynamicArray:
    default: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ColorDynamicArray:
    default: tuple[Triple, ...] | None = None
    space: str | None = None


@dataclass(frozen=True)
class PointDynamicArray:
    default: tuple[Triple, ...] | None = None
    space: str | None = None


@dataclass(frozen=True)
class VectorDynamicArray:
    default: tuple[Triple, ...] | None = None
    space: str | None = None


@dataclass(frozen=True)
class NormalDynamicArray:
    default: tuple[Triple, ...] | None = None
    space: str | None = None


@dataclass(frozen=True)
class MatrixDynamicArray:
    default: tuple[Matrix16, ...] | None = None


# ============= Special Types =============


@dataclass(frozen=True)
class Closure:
    """Runtime-composed shading function, never has a default."""

    closure_type: str = "closure"


TypedParameter: TypeAlias = (
    Int
    | Float
    | String
    | Color
    | Point
    | Vector
    | Normal
    | Matrix
    | IntArray
    | FloatArray
    | StringArray
    | ColorArray
    | PointArray
    | VectorArray
    | NormalArray
    | MatrixArray
    | IntDynamicArray
    | FloatDynamicArray
    | StringDynamicArray
    | ColorDynamicArray
    | PointDynamicArray
    | VectorDynamicArray
    | NormalDynamicArray
    | MatrixDynamicArray
    | Closure
)

FIXED_ARRAY_TYPES = (
    IntArray,
    FloatArray,
    StringArray,
    ColorArray,
    PointArray,
    VectorArray,
    NormalArray,
    MatrixArray,
)
DYNAMIC_ARRAY_TYPES = (
    IntDynamicArray,
    FloatDynamicArray,
    StringDynamicArray,
    ColorDynamicArray,
    PointDynamicArray,
    VectorDynamicArray,
    NormalDynamicArray,
    MatrixDynamicArray,
)


def default_of(param: TypedParameter):
    """Get the default value of a typed parameter, ``None`` if it has none."""
    match param:
        case Closure():
            return None
        case _:
            return param.default


def has_default(param: TypedParameter) -> bool:
    return default_of(param) is not None


def is_array(param: TypedParameter) -> bool:
    return isinstance(param, FIXED_ARRAY_TYPES + DYNAMIC_ARRAY_TYPES)


def is_dynamic_array(param: TypedParameter) -> bool:
    return isinstance(param, DYNAMIC_ARRAY_TYPES)


def is_closure(param: TypedParameter) -> bool:
    return isinstance(param, Closure)


def space_of(param: TypedParameter) -> str | None:
    """Get the coordinate space of a geometric parameter."""
    match param:
        case (
            Color(space=space)
            | Point(space=space)
            | Vector(space=space)
            | Normal(space=space)
            | ColorArray(space=space)
            | PointArray(space=space)
            | VectorArray(space=space)
            | NormalArray(space=space)
            | ColorDynamicArray(space=space)
            | PointDynamicArray(space=space)
            | VectorDynamicArray(space=space)
            | NormalDynamicArray(space=space)
        ):
            return space
        case _:
            return None


def type_name(param: TypedParameter) -> str:
    """Get the type name, arrays spelled with ``[]`` regardless of size."""
    match param:
        case Int():
            return "int"
        case Float():
            return "float"
        case String():
            return "string"
        case Color():
            return "color"
        case Point():
            return "point"
        case Vector():
            return "vector"
        case Normal():
            return "normal"
        case Matrix():
            return "matrix"
        case IntArray() | IntDynamicArray():
            return "int[]"
        case FloatArray() | FloatDynamicArray():
            return "float[]"
        case StringArray() | StringDynamicArray():
            return "string[]"
        case ColorArray() | ColorDynamicArray():
            return "color[]"
        case PointArray() | PointDynamicArray():
            return "point[]"
        case VectorArray() | VectorDynamicArray():
            return "vector[]"
        case NormalArray() | NormalDynamicArray():
            return "normal[]"
        case MatrixArray() | MatrixDynamicArray():
            return "matrix[]"
        case Closure():
            return "closure"
    raise TypeError(f"Not a typed parameter: {param!r}")


def format_type(param: TypedParameter) -> str:
    """Format the declared type, including fixed array sizes.

    Examples:
        >>> format_type(FloatArray(size=3))
        'float[3]'
        >>> format_type(Closure("bsdf"))
        'closure bsdf'
    """
    match param:
        case Closure(closure_type=closure_type):
            return f"closure {closure_type}"
        case (
            IntArray(size=size)
            | FloatArray(size=size)
            | StringArray(size=size)
            | ColorArray(size=size)
            | PointArray(size=size)
            | VectorArray(size=size)
            | NormalArray(size=size)
            | MatrixArray(size=size)
        ):
            return f"{type_name(param)[:-2]}[{size}]"
        case _:
            return type_name(param)


def without_default(param: TypedParameter) -> TypedParameter:
    """Return the same variant with its default removed."""
    match param:
        case Closure():
            return param
        case _:
            return replace(param, default=None)


# ============= Metadata =============


class MetadataKind(Enum):
    INT = auto()
    FLOAT = auto()
    STRING = auto()
    INT_ARRAY = auto()
    FLOAT_ARRAY = auto()
    STRING_ARRAY = auto()


MetadataValue: TypeAlias = (
    int | float | str | tuple[int, ...] | tuple[float, ...] | tuple[str, ...]
)


@dataclass(frozen=True)
class Metadata:
    """Named metadata value attached to a parameter or to the shader.

    Attributes:
        name: Metadata name (e.g. ``label``, ``help``, ``min``)
        value: A scalar, or a tuple when more than one value was given
    """

    name: str
    value: MetadataValue

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", sys.intern(self.name))

    @property
    def kind(self) -> MetadataKind:
        value = self.value
        if isinstance(value, tuple):
            first = value[0]
            if isinstance(first, str):
                return MetadataKind.STRING_ARRAY
            if isinstance(first, float):
                return MetadataKind.FLOAT_ARRAY
            return MetadataKind.INT_ARRAY
        if isinstance(value, str):
            return MetadataKind.STRING
        if isinstance(value, float):
            return MetadataKind.FLOAT
        return MetadataKind.INT


# ============= Parameters =============


class Direction(Enum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class Parameter:
    """A shader parameter with its direction, typed value and metadata.

    Output parameters never carry a default; use ``Parameter.output`` to
    build one from a typed value that may still hold a default.

    Attributes:
        name: Parameter name
        direction: Input or output
        typed: The unified type and default value
        metadata: Attached metadata in declaration order
        struct_name: Struct type name for struct parameters
        fields: Struct field names for struct parameters
    """

    name: str
    direction: Direction
    typed: TypedParameter
    metadata: tuple[Metadata, ...] = ()
    struct_name: str | None = None
    fields: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", sys.intern(self.name))
        if self.direction is Direction.OUTPUT and has_default(self.typed):
            raise ValueError(f"Output parameter '{self.name}' cannot have a default")

    @classmethod
    def input(cls, name: str, typed: TypedParameter, **kwargs) -> "Parameter":
        return cls(name, Direction.INPUT, typed, **kwargs)

    @classmethod
    def output(cls, name: str, typed: TypedParameter, **kwargs) -> "Parameter":
        """Create an output parameter, dropping any default of ``typed``."""
        return cls(name, Direction.OUTPUT, without_default(typed), **kwargs)

    @property
    def is_output(self) -> bool:
        return self.direction is Direction.OUTPUT

    @property
    def default(self):
        return default_of(self.typed)

    def find_metadata(self, name: str) -> Metadata | None:
        """Find metadata by name, first match wins."""
        for meta in self.metadata:
            if meta.name == name:
                return meta
        return None


__all__ = [
    "Int",
    "Float",
    "String",
    "Color",
    "Point",
    "Vector",
    "Normal",
    "Matrix",
    "IntArray",
    "FloatArray",
    "StringArray",
    "ColorArray",
    "PointArray",
    "VectorArray",
    "NormalArray",
    "MatrixArray",
    "IntDynamicArray",
    "FloatDynamicArray",
    "StringDynamicArray",
    "ColorDynamicArray",
    "PointDynamicArray",
    "VectorDynamicArray",
    "NormalDynamicArray",
    "MatrixDynamicArray",
    "Closure",
    "TypedParameter",
    "default_of",
    "has_default",
    "is_array",
    "is_dynamic_array",
    "is_closure",
    "space_of",
    "type_name",
    "format_type",
    "without_default",
    "MetadataKind",
    "MetadataValue",
    "Metadata",
    "Direction",
    "Parameter",
]
