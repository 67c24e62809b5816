"""Tests for converting parameter builders into typed parameters."""

import pytest

from oslquery import types as t
from oslquery.errors import ConversionError
from oslquery.parser.hints import make_metadata
from oslquery.parser.models import BaseType, ParameterBuilder, TypeDesc
from oslquery.parser.unify import (
    build_metadata,
    build_parameter,
    build_typed,
    group_floats,
)


def make_builder(
    basetype: BaseType, arraylen: int = 0, *defaults, **kwargs
) -> ParameterBuilder:
    builder = ParameterBuilder(
        name="p", type_desc=TypeDesc(basetype, arraylen), **kwargs
    )
    for value in defaults:
        builder.add_default(value)
    return builder


class TestGroupFloats:
    """Tests for group_floats."""

    def test_groups_of_three(self) -> None:
        assert group_floats([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 3) == (
            (1.0, 2.0, 3.0),
            (4.0, 5.0, 6.0),
        )

    def test_partial_tuple_dropped(self) -> None:
        assert group_floats([1.0, 2.0, 3.0, 4.0], 3) == ((1.0, 2.0, 3.0),)
        assert group_floats([1.0, 2.0], 3) == ()

    def test_matrix(self) -> None:
        values = [float(i) for i in range(16)]
        assert group_floats(values, 16) == (tuple(values),)


class TestBuildTyped:
    """Tests for build_typed."""

    def test_scalars(self) -> None:
        assert build_typed(make_builder(BaseType.INT, 0, 42)) == t.Int(42)
        assert build_typed(make_builder(BaseType.FLOAT, 0, 0.5)) == t.Float(0.5)
        assert build_typed(make_builder(BaseType.STRING, 0, "hi")) == t.String("hi")

    def test_int_default_widened_for_float(self) -> None:
        typed = build_typed(make_builder(BaseType.FLOAT, 0, 1))

        assert typed == t.Float(1.0)
        assert isinstance(typed.default, float)

    def test_no_default(self) -> None:
        assert build_typed(make_builder(BaseType.FLOAT)) == t.Float(None)

    def test_color_default(self) -> None:
        typed = build_typed(make_builder(BaseType.COLOR, 0, 1, 0, 0))
        assert typed == t.Color(default=(1.0, 0.0, 0.0), space=None)

    def test_geometric_default_needs_whole_tuple(self) -> None:
        typed = build_typed(make_builder(BaseType.POINT, 0, 1.0, 2.0))
        assert typed == t.Point(default=None)

    def test_space_from_hint(self) -> None:
        builder = make_builder(BaseType.NORMAL, 0, 0, 0, 1)
        builder.spacename.append("world")

        typed = build_typed(builder)

        assert typed == t.Normal(default=(0.0, 0.0, 1.0), space="world")

    def test_matrix_default(self) -> None:
        identity = [1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1]
        typed = build_typed(make_builder(BaseType.MATRIX, 0, *identity))

        assert isinstance(typed, t.Matrix)
        assert typed.default == tuple(float(v) for v in identity)

    def test_fixed_array(self) -> None:
        typed = build_typed(make_builder(BaseType.FLOAT, 5, 1.0, 2.0, 3.0, 4.0, 5.0))
        assert typed == t.FloatArray(size=5, default=(1.0, 2.0, 3.0, 4.0, 5.0))

    def test_fixed_array_of_colors(self) -> None:
        typed = build_typed(make_builder(BaseType.COLOR, 2, 1, 0, 0, 0, 1, 0))
        assert typed == t.ColorArray(
            size=2, default=((1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        )

    def test_dynamic_array(self) -> None:
        typed = build_typed(make_builder(BaseType.STRING, -1, "a", "b"))
        assert typed == t.StringDynamicArray(default=("a", "b"))

    def test_dynamic_array_without_default(self) -> None:
        assert build_typed(make_builder(BaseType.INT, -1)) == t.IntDynamicArray()

    def test_invalid_default_discarded(self) -> None:
        builder = make_builder(BaseType.FLOAT, 0, 0.5)
        builder.valid_default = False

        assert build_typed(builder) == t.Float(None)

    def test_closure(self) -> None:
        builder = ParameterBuilder(
            name="bsdf", type_desc=TypeDesc(BaseType.COLOR, is_closure=True)
        )
        assert build_typed(builder) == t.Closure("closure")

    def test_none_type_fails(self) -> None:
        builder = ParameterBuilder(name="bad", type_desc=TypeDesc(BaseType.NONE))

        with pytest.raises(ConversionError) as exc_info:
            build_typed(builder)

        assert exc_info.value.name == "bad"
        assert "bad" in str(exc_info.value)


class TestBuildMetadata:
    """Tests for build_metadata."""

    def test_string(self) -> None:
        meta = build_metadata(make_metadata("string", "label", "Color"))
        assert meta == t.Metadata("label", "Color")
        assert meta.kind is t.MetadataKind.STRING

    def test_int_precedes_other_buffers(self) -> None:
        builder = make_metadata("int", "n", "3")
        builder.sdefault.append("ignored")

        assert build_metadata(builder) == t.Metadata("n", 3)

    def test_several_values_become_tuple(self) -> None:
        builder = make_metadata("float", "range", "0")
        builder.fdefault.append(1.0)

        meta = build_metadata(builder)

        assert meta.value == (0.0, 1.0)
        assert meta.kind is t.MetadataKind.FLOAT_ARRAY

    def test_empty(self) -> None:
        builder = ParameterBuilder(name="x", type_desc=TypeDesc(BaseType.STRING))
        assert build_metadata(builder) is None


class TestBuildParameter:
    """Tests for build_parameter."""

    def test_input(self) -> None:
        builder = make_builder(BaseType.FLOAT, 0, 0.5)
        builder.metadata.append(make_metadata("float", "min", "0"))

        param = build_parameter(builder)

        assert param.direction is t.Direction.INPUT
        assert param.default == 0.5
        assert param.metadata == (t.Metadata("min", 0.0),)

    def test_output_drops_default(self) -> None:
        builder = make_builder(BaseType.COLOR, 0, 0, 0, 0, is_output=True)

        param = build_parameter(builder)

        assert param.is_output
        assert param.default is None
        assert param.typed == t.Color()

    def test_struct_information(self) -> None:
        builder = make_builder(BaseType.FLOAT)
        builder.structname = "Layer"
        builder.is_struct = True
        builder.fields = ["weight", "tint"]

        param = build_parameter(builder)

        assert param.struct_name == "Layer"
        assert param.fields == ("weight", "tint")
