# Loop structures for unrolled loop-start / loop-end chains
#
# A LoopRegion is a start marker, the single-consumer chain of body nodes
# hanging off its carry output, and the end marker that chain feeds. The
# emitter replays the body once per iteration at the end marker's slot.

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union

from ..config import CompileOptions
from ..codegen.literals import is_number
from ..diagnostics import DiagnosticCollector, DiagnosticKind
from ..ir.graph import GraphNode
from ..ir.types import DataType
from ..nodes.loops import LOOP_END, LOOP_START, carry_type
from .analysis import DependencyOrder

logger = logging.getLogger(__name__)


@dataclass
class LoopRegion:
    start_id: str
    end_id: str
    body: List[str] = field(default_factory=list)  # chain order
    iterations: int = 1
    carry_type: DataType = DataType.VEC2


@dataclass
class StructuralPlan:
    """Emission order: node ids, with each unrolled loop as one LoopRegion at its end's slot."""
    steps: List[Union[str, LoopRegion]] = field(default_factory=list)
    regions: List[LoopRegion] = field(default_factory=list)

    def region_for(self, node_id: str) -> Optional[LoopRegion]:
        for region in self.regions:
            if node_id in (region.start_id, region.end_id) or node_id in region.body:
                return region
        return None


def is_loop_marker(node: GraphNode) -> bool:
    return node.type in (LOOP_START, LOOP_END)


def parse_iterations(value, options: CompileOptions) -> int:
    """Rounded iteration count, clamped to the maximum; may be below the minimum."""
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            value = None
    if not is_number(value):
        return options.default_iterations
    return min(int(round(value)), options.max_iterations)


def _delimit(start: GraphNode, node_map: Dict[str, GraphNode], downstream: Dict[str, List[str]],
             diagnostics: DiagnosticCollector, preview_sink_id: str) -> Optional[LoopRegion]:
    """Walk the single-consumer chain from ``start`` to its loop end."""
    body: List[str] = []
    current = start.id
    while True:
        consumers = downstream.get(current, [])
        if consumers == [preview_sink_id]:
            # Previewing inside the body: the slice ends before the loop end
            logger.debug(f"Loop {start.id} cut by preview at {current}; compiling the chain once")
            return None
        if not consumers:
            diagnostics.node(DiagnosticKind.AMBIGUOUS_LOOP, start.id,
                             "no loop end is reachable from this loop start; compiling the chain once")
            return None
        if len(consumers) > 1:
            diagnostics.node(DiagnosticKind.AMBIGUOUS_LOOP, start.id,
                             f"loop chain branches at {current} (to {', '.join(consumers)}); "
                             f"compiling the chain once")
            return None

        nxt = node_map[consumers[0]]
        if nxt.type == LOOP_END:
            return LoopRegion(start.id, nxt.id, body)
        if nxt.type == LOOP_START:
            diagnostics.node(DiagnosticKind.AMBIGUOUS_LOOP, start.id,
                             f"nested loop start {nxt.id} inside loop chain; compiling the chain once")
            return None
        body.append(nxt.id)
        current = nxt.id


def _upstream_closure(node_id: str, order: DependencyOrder) -> Set[str]:
    seen: Set[str] = set()
    pending = [node_id]
    while pending:
        for dep in order.upstream.get(pending.pop(), ()):
            if dep not in seen and dep not in order.cyclic:
                seen.add(dep)
                pending.append(dep)
    return seen


def plan_loops(order: DependencyOrder, node_map: Dict[str, GraphNode],
               downstream: Dict[str, List[str]], options: CompileOptions,
               diagnostics: DiagnosticCollector) -> StructuralPlan:
    """
    Detect start/end pairs in the evaluation order and fold their bodies
    into LoopRegions.

    Accepted regions get their carry type written onto both markers'
    sockets so the marker generators see the wire type. Anything that
    cannot be delimited stays in the plan as ordinary nodes, which makes
    the markers pass-throughs and the body a single pass.
    """
    plan = StructuralPlan()
    for nid in order.order:
        node = node_map[nid]
        if node.type != LOOP_START:
            continue
        region = _delimit(node, node_map, downstream, diagnostics, options.preview_sink_id)
        if region is None:
            continue

        end = node_map[region.end_id]
        iterations = parse_iterations(end.params.get("iterations"), options)
        if iterations < options.min_iterations:
            diagnostics.node(DiagnosticKind.AMBIGUOUS_LOOP, end.id,
                             f"iterations resolve to {iterations}; compiling the loop body once")
            continue

        region.iterations = iterations
        region.carry_type = carry_type(node)
        for socket in (node.inputs.get("carry"), end.inputs.get("carry"), end.outputs.get("result")):
            if socket is not None:
                socket.type = region.carry_type
        plan.regions.append(region)
        logger.debug(f"Loop {region.start_id} -> {region.end_id}: {len(region.body)} body nodes "
                     f"x {iterations} ({region.carry_type})")

    # Ends not fed by any start
    claimed_ends = {r.end_id for r in plan.regions}
    for nid in order.order:
        node = node_map[nid]
        if node.type == LOOP_END and nid not in claimed_ends:
            if not any(node_map[dep].type == LOOP_START for dep in _upstream_closure(nid, order)):
                diagnostics.node(DiagnosticKind.AMBIGUOUS_LOOP, nid,
                                 "loop end has no matching loop start; passing its input through")

    body_ids = {nid for region in plan.regions for nid in region.body}
    by_end = {region.end_id: region for region in plan.regions}
    for nid in order.order:
        if nid in body_ids:
            continue
        plan.steps.append(by_end.get(nid, nid))
    return plan
