"""
Pytest configuration and shared fixtures for Shader Graph tests.

This file provides:
1. Graph fixtures built through the public registry (create_node + connect)
2. Helper functions for common assertions on compiled programs

Usage:
    pytest tests/ -v
"""

import re

import pytest

from shader_graph.ir.graph import NodeGraph
from shader_graph.nodes.registry import create_node


# =============================================================================
# GRAPH BUILDING
# =============================================================================

def build_graph(nodes, wires=()):
    """
    Build a NodeGraph from (kind, id[, params]) tuples and
    (producer, output, consumer, input) wires.
    """
    graph = NodeGraph()
    for entry in nodes:
        kind, node_id = entry[0], entry[1]
        params = entry[2] if len(entry) > 2 else None
        graph.add(create_node(kind, node_id, params))
    for producer, output_key, consumer, input_key in wires:
        graph.connect(producer, output_key, consumer, input_key)
    return graph


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

@pytest.fixture
def empty_graph():
    """Creates an empty NodeGraph for testing."""
    return NodeGraph()


@pytest.fixture
def circle_graph():
    """
    uv -> circleSDF -> floatToVec3 -> output

    Node ids: uv, circle, gray, out
    """
    return build_graph(
        [("uv", "uv"), ("circleSDF", "circle"), ("floatToVec3", "gray"), ("output", "out")],
        [("uv", "uv", "circle", "position"),
         ("circle", "distance", "gray", "input"),
         ("gray", "rgb", "out", "color")],
    )


@pytest.fixture
def ripple_loop_graph():
    """
    uv -> loopStart -> loopRippleStep -> loopEnd(iterations=3) -> length -> floatToVec3 -> output

    Node ids: uv, start, ripple, end, len, gray, out
    """
    return build_graph(
        [("uv", "uv"), ("loopStart", "start"), ("loopRippleStep", "ripple"),
         ("loopEnd", "end", {"iterations": 3}), ("length", "len"),
         ("floatToVec3", "gray"), ("output", "out")],
        [("uv", "uv", "start", "carry"),
         ("start", "carry", "ripple", "uv"),
         ("ripple", "uv", "end", "carry"),
         ("end", "result", "len", "input"),
         ("len", "output", "gray", "input"),
         ("gray", "rgb", "out", "color")],
    )


@pytest.fixture
def noise_graph():
    """
    Two fbm nodes and a voronoi sharing the hash helper, mixed into one output.

    Node ids: uv, fbmA, fbmB, cells, sum, sum2, gray, out
    """
    return build_graph(
        [("uv", "uv"), ("fbm", "fbmA"), ("fbm", "fbmB", {"octaves": 6}), ("voronoi", "cells"),
         ("add", "sum"), ("add", "sum2"), ("floatToVec3", "gray"), ("output", "out")],
        [("uv", "uv", "fbmA", "uv"),
         ("uv", "uv", "fbmB", "uv"),
         ("uv", "uv", "cells", "uv"),
         ("fbmA", "value", "sum", "a"),
         ("fbmB", "value", "sum", "b"),
         ("sum", "result", "sum2", "a"),
         ("cells", "dist", "sum2", "b"),
         ("sum2", "result", "gray", "input"),
         ("gray", "rgb", "out", "color")],
    )


# =============================================================================
# ASSERTION HELPERS
# =============================================================================

def main_body(result):
    """Lines of main() without indentation or blank lines."""
    text = result.program_text
    body = text[text.index("void main() {"):]
    return [line.strip() for line in body.split("\n")[1:-2] if line.strip()]


def statement_index(result, needle):
    """Index of the first main() line containing ``needle``."""
    for i, line in enumerate(main_body(result)):
        if needle in line:
            return i
    raise AssertionError(f"No statement containing {needle!r} in:\n{result.program_text}")


def assert_no_diagnostics(result):
    assert not result.diagnostics, f"Unexpected diagnostics: {list(result.diagnostics)}"


def assert_diagnostic(result, *fragments):
    """Assert some diagnostic message contains every fragment."""
    for message in result.diagnostics:
        if all(fragment in message for fragment in fragments):
            return message
    raise AssertionError(f"No diagnostic containing {fragments}; got {list(result.diagnostics)}")


def assert_declared_once(result, variable):
    """Assert ``variable`` is declared exactly once in the program."""
    pattern = re.compile(rf"\b(float|vec2|vec3|vec4)\s+{re.escape(variable)}\b")
    count = len(pattern.findall(result.program_text))
    assert count == 1, f"Expected one declaration of {variable}, found {count}"


def assert_writes_frag_color(result, expr_fragment=None):
    writes = [line for line in main_body(result) if line.startswith("gl_FragColor")]
    assert len(writes) == 1, f"Expected one gl_FragColor write, got {writes}"
    if expr_fragment is not None:
        assert expr_fragment in writes[0], f"{expr_fragment!r} not in {writes[0]!r}"
    return writes[0]
