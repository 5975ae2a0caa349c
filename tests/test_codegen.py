"""Literal formatting, type conversion and per-compile naming."""

import math
import unittest

import pytest

from shader_graph.codegen.literals import (
    can_coerce,
    cast_expr,
    coerce_expr,
    format_fixed,
    format_float,
    format_literal,
    is_zero_literal,
    vec_literal,
)
from shader_graph.codegen.preamble import VERTEX_SHADER, fragment_preamble
from shader_graph.codegen.shader_context import ShaderContext, sanitize_identifier
from shader_graph.config import CompileOptions
from shader_graph.ir.types import DataType


class TestFormatFloat(unittest.TestCase):
    def test_integers_get_decimal_point(self):
        self.assertEqual(format_float(5), "5.0")
        self.assertEqual(format_float(-2), "-2.0")
        self.assertEqual(format_float(0), "0.0")

    def test_fractions(self):
        self.assertEqual(format_float(0.25), "0.25")
        self.assertEqual(format_float(1e-06), "1e-06")

    def test_non_finite(self):
        self.assertEqual(format_float(math.inf), "0.0")
        self.assertEqual(format_float(math.nan), "0.0")

    def test_fixed(self):
        self.assertEqual(format_fixed(3, 3), "3.000")
        self.assertEqual(vec_literal((1, 0.5, 0.25)), "vec3(1.00, 0.50, 0.25)")
        self.assertEqual(vec_literal((2,)), "2.00")


class TestFormatLiteral:
    @pytest.mark.parametrize("value, dtype, expected", [
        (0.3, DataType.FLOAT, "0.3"),
        (2, DataType.VEC3, "vec3(2.0)"),
        ((1, 2), DataType.VEC2, "vec2(1.0, 2.0)"),
        ([1, 0.5, 0.3, 1], DataType.VEC3, "vec3(1.0, 0.5, 0.3)"),
        ((0.25, 0.75, 0.05), DataType.VEC3, "vec3(0.25, 0.75, 0.05)"),
        ((0.7, 0.1), DataType.FLOAT, "0.7"),
    ])
    def test_formats(self, value, dtype, expected):
        assert format_literal(value, dtype) == expected

    @pytest.mark.parametrize("value, dtype", [
        ((1, 2), DataType.VEC3),
        ("0.5", DataType.FLOAT),
        (True, DataType.FLOAT),
        ({"x": 1}, DataType.VEC2),
    ])
    def test_unusable(self, value, dtype):
        assert format_literal(value, dtype) is None

    def test_zero_literal_detection(self):
        assert is_zero_literal("0.0")
        assert is_zero_literal("-0.0")
        assert not is_zero_literal("0.5")
        assert not is_zero_literal("vec2(0.0)")


class TestConversions:
    def test_implicit(self):
        assert can_coerce(DataType.FLOAT, DataType.VEC4)
        assert can_coerce(DataType.VEC2, DataType.VEC2)
        assert not can_coerce(DataType.VEC3, DataType.FLOAT)
        assert not can_coerce(DataType.VEC2, DataType.VEC3)
        assert coerce_expr("x", DataType.FLOAT, DataType.VEC2) == "vec2(x)"
        with pytest.raises(ValueError):
            coerce_expr("x", DataType.VEC3, DataType.VEC2)

    @pytest.mark.parametrize("src, dst, expected", [
        (DataType.VEC2, DataType.FLOAT, "x.x"),
        (DataType.VEC3, DataType.FLOAT, "dot(x, vec3(0.33333333))"),
        (DataType.FLOAT, DataType.VEC4, "vec4(vec3(x), 1.0)"),
        (DataType.VEC2, DataType.VEC4, "vec4(x, 0.0, 1.0)"),
        (DataType.VEC3, DataType.VEC4, "vec4(x, 1.0)"),
        (DataType.VEC4, DataType.VEC3, "x.rgb"),
        (DataType.VEC4, DataType.VEC2, "x.xy"),
        (DataType.VEC3, DataType.VEC3, "x"),
    ])
    def test_explicit_casts(self, src, dst, expected):
        assert cast_expr("x", src, dst) == expected


class TestDataType(unittest.TestCase):
    def test_from_name(self):
        self.assertIs(DataType.from_name("vec3"), DataType.VEC3)
        self.assertIs(DataType.from_name(" Float "), DataType.FLOAT)
        with self.assertRaises(ValueError):
            DataType.from_name("mat3")

    def test_zero_literals(self):
        self.assertEqual(DataType.FLOAT.zero_literal(), "0.0")
        self.assertEqual(DataType.VEC4.zero_literal(), "vec4(0.0)")
        self.assertEqual(str(DataType.VEC2), "vec2")
        self.assertEqual(DataType.VEC3.component_count(), 3)


class TestSanitize(unittest.TestCase):
    def test_plain_ids_unchanged(self):
        self.assertEqual(sanitize_identifier("circle"), "circle")
        self.assertEqual(sanitize_identifier("node_12"), "node_12")

    def test_invalid_characters(self):
        self.assertEqual(sanitize_identifier("my-node.1"), "my_node_1")
        self.assertEqual(sanitize_identifier("a  b"), "a_b")

    def test_reserved_forms(self):
        self.assertEqual(sanitize_identifier("__preview_output__"), "preview_output")
        self.assertEqual(sanitize_identifier("gl_color"), "n_gl_color")
        self.assertEqual(sanitize_identifier("3d"), "n_3d")
        self.assertEqual(sanitize_identifier("---"), "node")


class TestShaderContext(unittest.TestCase):
    def test_colliding_ids_get_unique_bases(self):
        ctx = ShaderContext()

        self.assertEqual(ctx.base_name("a-b"), "a_b")
        self.assertEqual(ctx.base_name("a.b"), "a_b_2")
        self.assertEqual(ctx.base_name("a-b"), "a_b")

    def test_bases_avoid_program_symbols(self):
        ctx = ShaderContext(["u_time", "u_resolution", "make_light"])

        self.assertEqual(ctx.base_name("u"), "n_u")
        self.assertEqual(ctx.base_name("make"), "n_make")
        self.assertEqual(ctx.base_name("u_time"), "u_time")
        self.assertEqual(ctx.scope("u", 1).var("time"), "n_u_time_i1")

    def test_scope_suffix(self):
        ctx = ShaderContext()

        self.assertEqual(ctx.scope("ripple").var("uv"), "ripple_uv")
        self.assertEqual(ctx.scope("ripple", 2).var("uv"), "ripple_uv_i2")

    def test_helpers_deduplicated_in_order(self):
        ctx = ShaderContext()
        ctx.add_helpers(["float a() { return 1.0; }", "float b() { return 2.0; }"])
        ctx.add_helpers(["float a() { return 1.0; }", "float c() { return 3.0; }"])

        self.assertEqual(len(ctx.helpers), 3)
        self.assertTrue(ctx.helpers[2].startswith("float c()"))

    def test_bindings(self):
        ctx = ShaderContext()
        ctx.bind("n", {"value": "n_value"})

        self.assertEqual(ctx.lookup("n", "value"), "n_value")
        self.assertIsNone(ctx.lookup("n", "other"))
        self.assertIsNone(ctx.lookup("m", "value"))


class TestPreamble(unittest.TestCase):
    def test_precision_option(self):
        text = fragment_preamble(CompileOptions(precision="highp"))

        self.assertTrue(text.startswith("precision highp float;"))
        self.assertIn("uniform vec2 u_resolution;", text)
        self.assertIn("uniform vec2 u_mouse;", text)

    def test_vertex_shader_writes_vuv(self):
        self.assertIn("vUv = position * 0.5 + 0.5;", VERTEX_SHADER)


if __name__ == '__main__':
    unittest.main()
