"""Dependency resolution: evaluation order, cycles and broken wires."""

import unittest

from shader_graph.diagnostics import DiagnosticCollector, DiagnosticKind
from shader_graph.planner.analysis import build_downstream_map, find_cycles, resolve_order

from conftest import build_graph


def _resolve(graph):
    diagnostics = DiagnosticCollector()
    return resolve_order(graph.nodes, diagnostics), diagnostics


class TestResolveOrder(unittest.TestCase):
    def test_chain_order(self):
        graph = build_graph(
            [("output", "d"), ("floatToVec3", "c"), ("length", "b"), ("uv", "a")],
            [("a", "uv", "b", "input"), ("b", "output", "c", "input"), ("c", "rgb", "d", "color")],
        )
        order, diagnostics = _resolve(graph)

        self.assertEqual(order.order, ["a", "b", "c", "d"])
        self.assertEqual(len(diagnostics), 0)

    def test_ties_broken_by_id(self):
        graph = build_graph([("constant", "n3"), ("constant", "n10"), ("constant", "n2")])
        order, _ = _resolve(graph)

        # Plain string comparison
        self.assertEqual(order.order, ["n10", "n2", "n3"])

    def test_ready_node_with_smaller_id_jumps_ahead(self):
        graph = build_graph(
            [("constant", "a"), ("add", "b"), ("constant", "c")],
            [("a", "value", "b", "a")],
        )
        order, _ = _resolve(graph)

        self.assertEqual(order.order, ["a", "b", "c"])

    def test_upstream_map(self):
        graph = build_graph(
            [("constant", "a"), ("constant", "b"), ("add", "sum")],
            [("a", "value", "sum", "a"), ("b", "value", "sum", "b")],
        )
        order, _ = _resolve(graph)

        self.assertEqual(order.upstream["sum"], {"a", "b"})
        self.assertEqual(order.upstream["a"], set())


class TestBrokenInputs(unittest.TestCase):
    def test_missing_producer(self):
        graph = build_graph([("add", "sum")])
        graph.connect("gone", "value", "sum", "a")
        order, diagnostics = _resolve(graph)

        self.assertTrue(order.is_broken("sum", "a"))
        self.assertFalse(order.is_broken("sum", "b"))
        self.assertEqual(order.order, ["sum"])
        self.assertEqual(diagnostics.items[0].kind, DiagnosticKind.DANGLING_CONNECTION)
        self.assertEqual(diagnostics.messages(),
                         ("Node sum: input 'a' is connected to missing node gone",))

    def test_missing_output(self):
        graph = build_graph([("constant", "k"), ("add", "sum")])
        graph.connect("k", "nope", "sum", "a")
        order, diagnostics = _resolve(graph)

        self.assertTrue(order.is_broken("sum", "a"))
        self.assertEqual(order.upstream["sum"], set())
        self.assertIn("missing output 'nope' on node k", diagnostics.messages()[0])


class TestCycles:
    def test_two_node_cycle_with_consumer(self):
        """
        Given: x <-> y, with z consuming y
        When: Resolved
        Then: x and y reported and excluded, z scheduled with its wire broken
        """
        graph = build_graph(
            [("add", "x"), ("add", "y"), ("add", "z")],
            [("x", "result", "y", "a"), ("y", "result", "x", "a"), ("y", "result", "z", "a")],
        )
        order, diagnostics = _resolve(graph)

        assert order.order == ["z"]
        assert order.cyclic == {"x", "y"}
        assert order.is_broken("z", "a")
        assert [d.node_id for d in diagnostics.of_kind(DiagnosticKind.CYCLIC_DEPENDENCY)] == ["x", "y"]
        assert diagnostics.messages()[1] == "Node y: cyclic dependency detected (x -> y -> x)"

    def test_acyclic_nodes_before_and_after_cycle(self):
        graph = build_graph(
            [("constant", "k"), ("add", "x"), ("add", "y"), ("add", "z"), ("floatToVec3", "gray")],
            [("k", "value", "x", "b"), ("x", "result", "y", "a"), ("y", "result", "x", "a"),
             ("y", "result", "z", "a"), ("z", "result", "gray", "input")],
        )
        order, _ = _resolve(graph)

        assert order.order == ["k", "z", "gray"]

    def test_separate_cycles_each_reported(self):
        graph = build_graph(
            [("add", "a1"), ("add", "a2"), ("add", "b1"), ("add", "b2"), ("add", "b3")],
            [("a1", "result", "a2", "a"), ("a2", "result", "a1", "a"),
             ("b1", "result", "b2", "a"), ("b2", "result", "b3", "a"), ("b3", "result", "b1", "a")],
        )
        order, diagnostics = _resolve(graph)

        assert order.order == []
        assert len(diagnostics) == 5
        assert "Node b2: cyclic dependency detected (b1 -> b2 -> b3 -> b1)" in diagnostics.messages()

    def test_find_cycles_ignores_chains(self):
        upstream = {"a": set(), "b": {"a"}, "c": {"b", "d"}, "d": {"c"}}

        assert find_cycles(upstream, {"b", "c", "d"}) == [["c", "d"]]


class TestDownstreamMap(unittest.TestCase):
    def test_consumers_sorted_and_deduplicated(self):
        graph = build_graph(
            [("constant", "k"), ("add", "zed"), ("add", "alpha")],
            [("k", "value", "zed", "a"), ("k", "value", "zed", "b"), ("k", "value", "alpha", "a")],
        )
        order, _ = _resolve(graph)
        downstream = build_downstream_map(graph.nodes, order)

        self.assertEqual(downstream["k"], ["alpha", "zed"])
        self.assertEqual(downstream["zed"], [])

    def test_broken_and_cyclic_wires_skipped(self):
        graph = build_graph(
            [("add", "x"), ("add", "y"), ("add", "z")],
            [("x", "result", "y", "a"), ("y", "result", "x", "a"), ("y", "result", "z", "a")],
        )
        order, _ = _resolve(graph)
        downstream = build_downstream_map(graph.nodes, order)

        self.assertEqual(downstream["y"], [])
        self.assertEqual(downstream["x"], [])


if __name__ == '__main__':
    unittest.main()
