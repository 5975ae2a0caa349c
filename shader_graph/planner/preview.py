# Dependency slicing for isolated node previews

import logging
from collections import deque
from typing import Optional, Set, Tuple

from ..config import PREVIEW_SINK_ID
from ..ir.graph import Connection, GraphNode, InputSocket, NodeGraph
from ..ir.types import DataType
from ..nodes.output import OUTPUT, VEC4_OUTPUT

logger = logging.getLogger(__name__)


def collect_upstream(graph: NodeGraph, target_id: str) -> Set[str]:
    """Ids of ``target_id`` and everything it transitively depends on."""
    node_map = graph.node_map()
    visited = {target_id}
    queue = deque([target_id])
    while queue:
        node = node_map.get(queue.popleft())
        if node is None:
            continue
        for producer_id in node.upstream_ids():
            if producer_id in node_map and producer_id not in visited:
                visited.add(producer_id)
                queue.append(producer_id)
    return visited


def choose_preview_output(node: GraphNode) -> Optional[Tuple[str, DataType]]:
    """Prefer a vec3 output, then vec4, then the first declared one."""
    if not node.outputs:
        return None
    for wanted in (DataType.VEC3, DataType.VEC4):
        for key, socket in node.outputs.items():
            if socket.type is wanted:
                return key, wanted
    key, socket = next(iter(node.outputs.items()))
    return key, socket.type


def build_preview_graph(graph: NodeGraph, target_id: str, sink_id: str = PREVIEW_SINK_ID) -> NodeGraph:
    """
    Minimal graph rendering ``target_id``: the node, its transitive inputs
    and a synthetic sink wired to its preferred output.

    Falls back to the unmodified graph when the target is missing or has
    no outputs. Existing nodes are shared with ``graph``, not copied.
    """
    target = graph.get(target_id)
    if target is None:
        logger.debug(f"Preview target {target_id} not in graph; compiling full graph")
        return graph
    choice = choose_preview_output(target)
    if choice is None:
        logger.debug(f"Preview target {target_id} has no outputs; compiling full graph")
        return graph

    output_key, dtype = choice
    keep = collect_upstream(graph, target_id)
    sink = GraphNode(
        id=sink_id,
        type=VEC4_OUTPUT if dtype is DataType.VEC4 else OUTPUT,
        inputs={"color": InputSocket(dtype, "Color", Connection(target_id, output_key))},
    )
    nodes = [node for node in graph.nodes if node.id in keep]
    logger.debug(f"Preview slice for {target_id}: {len(nodes)} of {len(graph.nodes)} nodes")
    return NodeGraph(nodes + [sink])
