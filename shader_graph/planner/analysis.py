"""
Dependency resolution for a graph snapshot.

Produces a deterministic evaluation order (Kahn's algorithm, ties broken by
ascending node id) and reports the structural problems that make some
wires unusable: connections to nodes or outputs that no longer exist, and
dependency cycles. Nodes on a cycle are left out of the order; nodes that
merely consume a cycle still get scheduled, with the broken wire treated
as unconnected.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from ..diagnostics import DiagnosticCollector, DiagnosticKind
from ..ir.graph import GraphNode

logger = logging.getLogger(__name__)


@dataclass
class DependencyOrder:
    order: List[str] = field(default_factory=list)
    # Nodes on a dependency cycle, excluded from generation
    cyclic: Set[str] = field(default_factory=set)
    # (node_id, input_key) pairs whose wire must be treated as unconnected
    broken_inputs: Set[Tuple[str, str]] = field(default_factory=set)
    # node_id -> producer ids it actually depends on
    upstream: Dict[str, Set[str]] = field(default_factory=dict)

    def is_broken(self, node_id: str, input_key: str) -> bool:
        return (node_id, input_key) in self.broken_inputs


def build_upstream_map(nodes: List[GraphNode], diagnostics: DiagnosticCollector,
                       result: DependencyOrder) -> Dict[str, Set[str]]:
    """Upstream producer ids per node, reporting dangling connections."""
    node_map = {node.id: node for node in nodes}
    upstream: Dict[str, Set[str]] = {}
    for node in nodes:
        producers = set()
        for input_key, conn in node.connections():
            producer = node_map.get(conn.node_id)
            if producer is None:
                diagnostics.node(DiagnosticKind.DANGLING_CONNECTION, node.id,
                                 f"input '{input_key}' is connected to missing node {conn.node_id}")
                result.broken_inputs.add((node.id, input_key))
            elif conn.output_key not in producer.outputs:
                diagnostics.node(DiagnosticKind.DANGLING_CONNECTION, node.id,
                                 f"input '{input_key}' is connected to missing output "
                                 f"'{conn.output_key}' on node {producer.id}")
                result.broken_inputs.add((node.id, input_key))
            else:
                producers.add(producer.id)
        upstream[node.id] = producers
    return upstream


def _kahn(upstream: Dict[str, Set[str]], done: Set[str], order: List[str]):
    """Append every node whose producers are all done, smallest id first."""
    remaining = {nid: deps - done for nid, deps in upstream.items() if nid not in done}
    downstream: Dict[str, List[str]] = {nid: [] for nid in remaining}
    for nid, deps in remaining.items():
        for dep in deps:
            downstream[dep].append(nid)

    ready = [nid for nid, deps in remaining.items() if not deps]
    heapq.heapify(ready)
    while ready:
        nid = heapq.heappop(ready)
        order.append(nid)
        done.add(nid)
        for consumer in downstream[nid]:
            pending = remaining[consumer]
            pending.discard(nid)
            if not pending:
                heapq.heappush(ready, consumer)


def find_cycles(upstream: Dict[str, Set[str]], candidates: Set[str]) -> List[List[str]]:
    """
    Strongly connected components among ``candidates`` that form a cycle.

    Iterative Tarjan; each returned cycle is sorted by node id and the list
    is sorted by its first member.
    """
    index: Dict[str, int] = {}
    low: Dict[str, int] = {}
    on_stack: Set[str] = set()
    stack: List[str] = []
    cycles: List[List[str]] = []
    counter = 0

    for root in sorted(candidates):
        if root in index:
            continue
        work = [(root, iter(sorted(upstream[root] & candidates)))]
        index[root] = low[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        while work:
            nid, deps = work[-1]
            advanced = False
            for dep in deps:
                if dep not in index:
                    index[dep] = low[dep] = counter
                    counter += 1
                    stack.append(dep)
                    on_stack.add(dep)
                    work.append((dep, iter(sorted(upstream[dep] & candidates))))
                    advanced = True
                    break
                if dep in on_stack:
                    low[nid] = min(low[nid], index[dep])
            if advanced:
                continue
            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[nid])
            if low[nid] == index[nid]:
                component = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == nid:
                        break
                if len(component) > 1 or nid in upstream[nid]:
                    cycles.append(sorted(component))

    return sorted(cycles, key=lambda c: c[0])


def resolve_order(nodes: List[GraphNode], diagnostics: DiagnosticCollector) -> DependencyOrder:
    """
    Deterministic topological order of ``nodes``.

    Cycle members are reported once each and removed; their consumers are
    scheduled afterwards with the wire from the cycle marked broken.
    """
    result = DependencyOrder()
    upstream = build_upstream_map(nodes, diagnostics, result)
    result.upstream = upstream

    done: Set[str] = set()
    _kahn(upstream, done, result.order)

    stuck = set(upstream) - done
    if stuck:
        for cycle in find_cycles(upstream, stuck):
            path = " -> ".join(cycle + [cycle[0]])
            for member in cycle:
                diagnostics.node(DiagnosticKind.CYCLIC_DEPENDENCY, member,
                                 f"cyclic dependency detected ({path})")
            result.cyclic.update(cycle)

        # Consumers of cycle members lose that wire and can be scheduled
        node_map = {node.id: node for node in nodes}
        for nid in sorted(stuck - result.cyclic):
            for input_key, conn in node_map[nid].connections():
                if conn.node_id in result.cyclic:
                    result.broken_inputs.add((nid, input_key))
            upstream[nid] = upstream[nid] - result.cyclic
        done.update(result.cyclic)
        _kahn(upstream, done, result.order)

    logger.debug(f"Resolved order for {len(nodes)} nodes: {len(result.order)} scheduled, "
                 f"{len(result.cyclic)} cyclic")
    return result


def build_downstream_map(nodes: List[GraphNode], order: DependencyOrder) -> Dict[str, List[str]]:
    """Consumers per producer over the usable wires, in ascending id order."""
    downstream: Dict[str, List[str]] = {node.id: [] for node in nodes}
    for node in nodes:
        if node.id in order.cyclic:
            continue
        for input_key, conn in node.connections():
            if order.is_broken(node.id, input_key) or conn.node_id in order.cyclic:
                continue
            if node.id not in downstream[conn.node_id]:
                downstream[conn.node_id].append(node.id)
    for consumers in downstream.values():
        consumers.sort()
    return downstream
