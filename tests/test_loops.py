"""
Loop region planning and unrolling.

Covers the structural pass (planner.loops) directly and the unrolled text
the emitter produces for it.
"""

import unittest

from shader_graph.compiler import compile_graph
from shader_graph.config import DEFAULT_OPTIONS
from shader_graph.diagnostics import DiagnosticCollector, DiagnosticKind
from shader_graph.ir.types import DataType
from shader_graph.planner.analysis import build_downstream_map, resolve_order
from shader_graph.planner.loops import LoopRegion, is_loop_marker, parse_iterations, plan_loops

from conftest import assert_diagnostic, assert_no_diagnostics, build_graph, main_body


def _plan(graph):
    diagnostics = DiagnosticCollector()
    snapshot = graph.snapshot()
    order = resolve_order(snapshot.nodes, diagnostics)
    downstream = build_downstream_map(snapshot.nodes, order)
    plan = plan_loops(order, snapshot.node_map(), downstream, DEFAULT_OPTIONS, diagnostics)
    return plan, diagnostics, snapshot


def _float_loop(iterations=2):
    """constant -> loopStart(float) -> loopFloatAccumulate -> loopEnd -> floatToVec3 -> output"""
    graph = build_graph(
        [("constant", "c", {"value": 0.5}), ("loopStart", "start"), ("loopFloatAccumulate", "acc"),
         ("loopEnd", "end", {"iterations": iterations}), ("floatToVec3", "gray"), ("output", "out")],
        [("c", "value", "start", "carry"), ("start", "carry", "acc", "value"),
         ("acc", "value", "end", "carry"), ("end", "result", "gray", "input"),
         ("gray", "rgb", "out", "color")],
    )
    start = graph.get("start")
    start.inputs["carry"].type = DataType.FLOAT
    start.outputs["carry"].type = DataType.FLOAT
    return graph


class TestParseIterations(unittest.TestCase):
    def test_numbers_round(self):
        self.assertEqual(parse_iterations(3, DEFAULT_OPTIONS), 3)
        self.assertEqual(parse_iterations(2.6, DEFAULT_OPTIONS), 3)

    def test_clamped_to_max(self):
        self.assertEqual(parse_iterations(40, DEFAULT_OPTIONS), 16)

    def test_numeric_strings(self):
        self.assertEqual(parse_iterations(" 5 ", DEFAULT_OPTIONS), 5)

    def test_non_numeric_uses_default(self):
        self.assertEqual(parse_iterations("lots", DEFAULT_OPTIONS), 4)
        self.assertEqual(parse_iterations(None, DEFAULT_OPTIONS), 4)
        self.assertEqual(parse_iterations(True, DEFAULT_OPTIONS), 4)

    def test_below_minimum_is_returned(self):
        self.assertEqual(parse_iterations(0, DEFAULT_OPTIONS), 0)
        self.assertEqual(parse_iterations(-3, DEFAULT_OPTIONS), -3)


class TestPlanLoops:
    def test_region_delimited(self, ripple_loop_graph):
        plan, diagnostics, _ = _plan(ripple_loop_graph)

        assert not diagnostics
        assert len(plan.regions) == 1
        region = plan.regions[0]
        assert (region.start_id, region.end_id, region.body) == ("start", "end", ["ripple"])
        assert region.iterations == 3
        assert region.carry_type is DataType.VEC2

    def test_region_replaces_end_in_steps(self, ripple_loop_graph):
        plan, _, _ = _plan(ripple_loop_graph)

        assert plan.steps[:2] == ["uv", "start"]
        assert isinstance(plan.steps[2], LoopRegion)
        assert plan.steps[3:] == ["len", "gray", "out"]
        assert plan.region_for("ripple") is plan.regions[0]
        assert plan.region_for("uv") is None

    def test_carry_type_propagated_to_markers(self):
        plan, _, snapshot = _plan(_float_loop())

        assert plan.regions[0].carry_type is DataType.FLOAT
        end = snapshot.get("end")
        assert end.inputs["carry"].type is DataType.FLOAT
        assert end.outputs["result"].type is DataType.FLOAT

    def test_is_loop_marker(self, ripple_loop_graph):
        assert is_loop_marker(ripple_loop_graph.get("start"))
        assert is_loop_marker(ripple_loop_graph.get("end"))
        assert not is_loop_marker(ripple_loop_graph.get("ripple"))


class TestUnroll:
    def test_three_copies_of_body(self, ripple_loop_graph):
        """
        Given: loopStart -> loopRippleStep -> loopEnd with iterations = 3
        When: Compiled
        Then: Three suffixed copies, each reading the previous one, and the
              end bound to the third
        """
        result = compile_graph(ripple_loop_graph)
        text = result.program_text

        assert_no_diagnostics(result)
        assert "vec2 ripple_uv_i0 = start_carry + vec2(" in text
        assert "vec2 ripple_uv_i1 = ripple_uv_i0 + vec2(" in text
        assert "vec2 ripple_uv_i2 = ripple_uv_i1 + vec2(" in text
        assert "ripple_uv_i3" not in text
        assert result.variable("end", "result") == "ripple_uv_i2"
        assert result.variable("ripple", "uv") == "ripple_uv_i2"
        assert "float len_output = length(ripple_uv_i2) * 1.0;" in main_body(result)

    def test_start_declares_initial_carry(self, ripple_loop_graph):
        result = compile_graph(ripple_loop_graph)

        assert "vec2 start_carry = uv_uv;" in main_body(result)
        assert "end_result" not in result.program_text

    def test_iterations_clamped(self, ripple_loop_graph):
        ripple_loop_graph.get("end").params["iterations"] = 40
        text = compile_graph(ripple_loop_graph).program_text

        assert "ripple_uv_i15" in text
        assert "ripple_uv_i16" not in text

    def test_loop_header_comment(self, ripple_loop_graph):
        body = main_body(compile_graph(ripple_loop_graph))

        assert "// loop start -> end x3" in body
        assert "// loopRippleStep ripple [2]" in body

    def test_float_carry(self):
        result = compile_graph(_float_loop(iterations=2))

        assert_no_diagnostics(result)
        assert "float start_carry = c_value;" in main_body(result)
        assert "float acc_value_i1 = acc_value_i0 + sin(" in result.program_text
        assert result.variable("end", "result") == "acc_value_i1"
        assert "vec3 gray_rgb = vec3(acc_value_i1);" in main_body(result)

    def test_side_inputs_read_global_values(self):
        """A body node input wired from outside the chain reads the same value every iteration."""
        graph = build_graph(
            [("uv", "uv"), ("constant", "k", {"value": 0.1}), ("loopStart", "start"),
             ("multiplyVec2", "grow"), ("loopEnd", "end", {"iterations": 2}), ("length", "len"),
             ("output", "out")],
            [("uv", "uv", "start", "carry"), ("start", "carry", "grow", "input"),
             ("k", "value", "grow", "scale"), ("grow", "result", "end", "carry"),
             ("end", "result", "len", "input")],
        )
        text = compile_graph(graph).program_text

        assert "vec2 grow_result_i0 = start_carry * k_value;" in text
        assert "vec2 grow_result_i1 = grow_result_i0 * k_value;" in text

    def test_body_diagnostics_reported_once(self):
        graph = build_graph(
            [("uv", "uv"), ("makeVec3", "m"), ("loopStart", "start"), ("addVec2", "shift"),
             ("loopEnd", "end", {"iterations": 3}), ("output", "out")],
            [("uv", "uv", "start", "carry"), ("start", "carry", "shift", "a"),
             ("m", "rgb", "shift", "b"), ("shift", "result", "end", "carry")],
        )
        result = compile_graph(graph)
        mismatches = [d for d in result.issues if d.kind is DiagnosticKind.TYPE_MISMATCH]

        assert len(mismatches) == 1
        assert mismatches[0].node_id == "shift"
        assert "vec2 shift_result_i2 = shift_result_i1 + vec2(0.0);" in result.program_text


class TestAmbiguousLoops(unittest.TestCase):
    def test_branching_chain_compiles_once(self):
        graph = build_graph(
            [("uv", "uv"), ("loopStart", "start"), ("loopRippleStep", "ripple"), ("length", "len"),
             ("loopEnd", "end", {"iterations": 3}), ("output", "out")],
            [("uv", "uv", "start", "carry"), ("start", "carry", "ripple", "uv"),
             ("start", "carry", "len", "input"), ("ripple", "uv", "end", "carry")],
        )
        result = compile_graph(graph)

        assert_diagnostic(result, "Node start:", "branches at start (to len, ripple)")
        self.assertEqual(result.issues[0].kind, DiagnosticKind.AMBIGUOUS_LOOP)
        self.assertNotIn("_i0", result.program_text)
        self.assertIn("vec2 end_result = ripple_uv;", main_body(result))

    def test_start_without_end(self):
        graph = build_graph(
            [("uv", "uv"), ("loopStart", "start"), ("loopRippleStep", "ripple"), ("output", "out")],
            [("uv", "uv", "start", "carry"), ("start", "carry", "ripple", "uv")],
        )
        result = compile_graph(graph)

        assert_diagnostic(result, "Node start:", "no loop end is reachable")
        self.assertIn("ripple_uv", result.program_text)

    def test_nested_start(self):
        graph = build_graph(
            [("uv", "uv"), ("loopStart", "outer"), ("loopStart", "inner"),
             ("loopEnd", "innerEnd", {"iterations": 2}), ("loopEnd", "outerEnd", {"iterations": 2}),
             ("output", "out")],
            [("uv", "uv", "outer", "carry"), ("outer", "carry", "inner", "carry"),
             ("inner", "carry", "innerEnd", "carry"), ("innerEnd", "result", "outerEnd", "carry")],
        )
        result = compile_graph(graph)

        assert_diagnostic(result, "Node outer:", "nested loop start inner")
        # The inner pair is still a valid region of its own
        self.assertEqual(result.variable("innerEnd", "result"), "inner_carry")
        self.assertIn("vec2 inner_carry = outer_carry;", main_body(result))

    def test_zero_iterations(self):
        graph = build_graph(
            [("uv", "uv"), ("loopStart", "start"), ("loopRippleStep", "ripple"),
             ("loopEnd", "end", {"iterations": 0}), ("output", "out")],
            [("uv", "uv", "start", "carry"), ("start", "carry", "ripple", "uv"),
             ("ripple", "uv", "end", "carry")],
        )
        result = compile_graph(graph)

        assert_diagnostic(result, "Node end:", "iterations resolve to 0")
        self.assertIn("vec2 end_result = ripple_uv;", main_body(result))

    def test_orphan_end(self):
        graph = build_graph(
            [("uv", "uv"), ("loopEnd", "end"), ("length", "len"), ("output", "out")],
            [("uv", "uv", "end", "carry"), ("end", "result", "len", "input")],
        )
        result = compile_graph(graph)

        assert_diagnostic(result, "Node end:", "no matching loop start")
        self.assertIn("vec2 end_result = uv_uv;", main_body(result))
        self.assertEqual(result.variable("end", "result"), "end_result")


if __name__ == '__main__':
    unittest.main()
