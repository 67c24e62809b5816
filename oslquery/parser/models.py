"""
Intermediate data models for the OSO reader.

This module contains the type descriptors produced by the type grammar and the
mutable parameter builder that the reader fills line by line before it is
converted into a typed ``Parameter``.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum, auto


class BaseType(Enum):
    """Scalar and geometric data categories of OSL symbols."""

    NONE = "none"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    COLOR = "color"
    POINT = "point"
    VECTOR = "vector"
    NORMAL = "normal"
    MATRIX = "matrix"

    @classmethod
    def from_name(cls, name: str) -> "BaseType | None":
        """Look up a basetype by its exact lowercase keyword."""
        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def components(self) -> int:
        """Number of floats making up one value of this type."""
        if self.is_geometric:
            return 3
        if self is BaseType.MATRIX:
            return 16
        return 1

    @property
    def is_geometric(self) -> bool:
        """Check if type is a 3-component color/point/vector/normal."""
        return self in {
            BaseType.COLOR,
            BaseType.POINT,
            BaseType.VECTOR,
            BaseType.NORMAL,
        }

    @property
    def is_float_based(self) -> bool:
        """Check if values of this type are stored as floats."""
        return self is BaseType.FLOAT or self is BaseType.MATRIX or self.is_geometric


class SymType(Enum):
    """Declared role of a symbol line."""

    PARAM = "param"
    OUTPUT_PARAM = "oparam"
    LOCAL = "local"
    TEMP = "temp"
    GLOBAL = "global"
    CONST = "const"

    @property
    def is_parameter(self) -> bool:
        """Check if symbols of this kind are queryable shader parameters."""
        return self in {SymType.PARAM, SymType.OUTPUT_PARAM}


@dataclass(frozen=True)
class TypeDesc:
    """Parsed type of a symbol.

    Attributes:
        basetype: Component type
        arraylen: 0 for scalars, -1 for unsized arrays, N for fixed arrays
        is_closure: Whether the symbol was declared ``closure <type>``
    """

    basetype: BaseType
    arraylen: int = 0
    is_closure: bool = False

    @property
    def is_array(self) -> bool:
        return self.arraylen != 0

    @property
    def is_unsized_array(self) -> bool:
        return self.arraylen == -1

    def __str__(self) -> str:
        name = self.basetype.value
        if self.is_closure:
            name = f"closure {name}"
        if self.is_unsized_array:
            return f"{name}[]"
        if self.is_array:
            return f"{name}[{self.arraylen}]"
        return name


class ReaderState(Enum):
    """Dispatcher states of the OSO reader."""

    SCANNING = auto()
    IN_PARAMETER = auto()


@dataclass
class ParameterBuilder:
    """Accumulator for one parameter (or one metadata entry) being read.

    Defaults are collected into three separate buffers. Only the buffer
    matching the basetype is used when the builder is converted, the others
    may still pick up values from tokens that did not parse as expected.

    Attributes:
        name: Symbol name
        type_desc: Declared type
        is_output: Declared with ``oparam``
        is_struct: A struct type name was attached
        valid_default: The collected defaults describe a static default
        idefault: Pending integer defaults
        fdefault: Pending float defaults
        sdefault: Pending string defaults
        spacename: Coordinate space names from ``%space`` hints
        structname: Struct type name from ``%struct``
        fields: Struct field names from ``%structfields``
        metadata: Metadata entries, each one a builder of the same shape
    """

    name: str
    type_desc: TypeDesc
    is_output: bool = False
    is_struct: bool = False
    valid_default: bool = False
    idefault: list[int] = field(default_factory=list)
    fdefault: list[float] = field(default_factory=list)
    sdefault: list[str] = field(default_factory=list)
    spacename: list[str] = field(default_factory=list)
    structname: str | None = None
    fields: list[str] = field(default_factory=list)
    metadata: list["ParameterBuilder"] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = sys.intern(self.name)

    @property
    def basetype(self) -> BaseType:
        return self.type_desc.basetype

    def add_default(self, value: int | float | str) -> None:
        """Append one default token value to the buffer it belongs to.

        Integers are widened to floats for float-based types.
        """
        if isinstance(value, str):
            self.sdefault.append(value)
        elif isinstance(value, float):
            self.fdefault.append(value)
        elif self.basetype.is_float_based:
            self.fdefault.append(float(value))
        else:
            self.idefault.append(value)
        self.valid_default = True
