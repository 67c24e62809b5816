"""
Conversion of parameter builders into typed parameters.

The reader collects defaults into untyped buffers. This module picks the one
``TypedParameter`` variant matching the declared basetype and array shape and
moves the matching buffer into it, grouping flat floats into 3- or 16-float
tuples for geometric and matrix types.
"""

import numpy as np

from oslquery import types as t
from oslquery.constants import DEFAULT_CLOSURE_TYPE
from oslquery.errors import ConversionError
from oslquery.parser.models import BaseType, ParameterBuilder

# (scalar, fixed array, dynamic array) variant per basetype
_VARIANTS = {
    BaseType.INT: (t.Int, t.IntArray, t.IntDynamicArray),
    BaseType.FLOAT: (t.Float, t.FloatArray, t.FloatDynamicArray),
    BaseType.STRING: (t.String, t.StringArray, t.StringDynamicArray),
    BaseType.COLOR: (t.Color, t.ColorArray, t.ColorDynamicArray),
    BaseType.POINT: (t.Point, t.PointArray, t.PointDynamicArray),
    BaseType.VECTOR: (t.Vector, t.VectorArray, t.VectorDynamicArray),
    BaseType.NORMAL: (t.Normal, t.NormalArray, t.NormalDynamicArray),
    BaseType.MATRIX: (t.Matrix, t.MatrixArray, t.MatrixDynamicArray),
}


def group_floats(values: list[float], width: int) -> tuple[tuple[float, ...], ...]:
    """Group a flat float buffer into consecutive tuples of ``width`` floats.

    A trailing partial tuple is dropped.
    """
    count = len(values) // width
    if count == 0:
        return ()
    rows = np.asarray(values[: count * width], dtype=np.float64).reshape(count, width)
    return tuple(tuple(float(x) for x in row) for row in rows)


def _buffer(builder: ParameterBuilder) -> list:
    basetype = builder.basetype
    if basetype is BaseType.INT:
        return builder.idefault
    if basetype is BaseType.STRING:
        return builder.sdefault
    return builder.fdefault


def _scalar_default(builder: ParameterBuilder):
    values = _buffer(builder)
    if not builder.valid_default or not values:
        return None
    width = builder.basetype.components
    if width == 1:
        return values[0]
    # A geometric default must be made of whole tuples
    if len(values) % width != 0:
        return None
    return group_floats(values, width)[0]


def _array_default(builder: ParameterBuilder):
    values = _buffer(builder)
    if not builder.valid_default or not values:
        return None
    width = builder.basetype.components
    if width == 1:
        return tuple(values)
    return group_floats(values, width)


def build_typed(builder: ParameterBuilder) -> t.TypedParameter:
    """Select and fill the typed variant for a builder.

    Raises:
        ConversionError: If the basetype is ``none`` without ``closure``
    """
    type_desc = builder.type_desc
    if type_desc.is_closure:
        return t.Closure(closure_type=builder.structname or DEFAULT_CLOSURE_TYPE)

    basetype = type_desc.basetype
    if basetype is BaseType.NONE:
        raise ConversionError(
            f"Parameter '{builder.name}' has type none but is not a closure",
            name=builder.name,
        )

    scalar, fixed, dynamic = _VARIANTS[basetype]
    kwargs = {}
    if basetype.is_geometric:
        kwargs["space"] = builder.spacename[0] if builder.spacename else None

    if type_desc.is_unsized_array:
        return dynamic(default=_array_default(builder), **kwargs)
    if type_desc.is_array:
        return fixed(size=type_desc.arraylen, default=_array_default(builder), **kwargs)
    return scalar(default=_scalar_default(builder), **kwargs)


def build_metadata(meta: ParameterBuilder) -> t.Metadata | None:
    """Convert a metadata builder, ``None`` if it holds no value.

    Integers take precedence over floats, floats over strings.
    """
    for values in (meta.idefault, meta.fdefault, meta.sdefault):
        if values:
            value = values[0] if len(values) == 1 else tuple(values)
            return t.Metadata(name=meta.name, value=value)
    return None


def build_parameter(builder: ParameterBuilder) -> t.Parameter:
    """Convert a finished builder into an immutable ``Parameter``.

    Raises:
        ConversionError: If the builder has no valid typed representation
    """
    typed = build_typed(builder)
    metadata = tuple(
        meta
        for meta in (build_metadata(m) for m in builder.metadata)
        if meta is not None
    )
    extra = {
        "metadata": metadata,
        "struct_name": builder.structname,
        "fields": tuple(builder.fields),
    }
    if builder.is_output:
        return t.Parameter.output(builder.name, typed, **extra)
    return t.Parameter.input(builder.name, typed, **extra)
