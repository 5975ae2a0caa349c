"""
Graph snapshot: the node instances a compile consumes.

A NodeGraph is owned by whoever built it (the editor, a JSON file, a test).
The compiler never mutates the graph it is given; it works on
``graph.snapshot()``, a deep copy taken at the start of every compile.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .types import DataType

LiteralValue = Union[float, int, Sequence[float]]


@dataclass(frozen=True)
class Connection:
    """Reference from an input socket to a producer's output socket."""
    node_id: str
    output_key: str


@dataclass
class OutputSocket:
    type: DataType
    label: str = ""


@dataclass
class InputSocket:
    type: DataType
    label: str = ""
    connection: Optional[Connection] = None
    default_value: Optional[LiteralValue] = None

    @property
    def is_connected(self) -> bool:
        return self.connection is not None


@dataclass
class GraphNode:
    id: str
    type: str
    inputs: Dict[str, InputSocket] = field(default_factory=dict)
    outputs: Dict[str, OutputSocket] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    bypassed: bool = False
    position: Tuple[float, float] = (0.0, 0.0)

    def connections(self) -> Iterator[Tuple[str, Connection]]:
        """Yield (input_key, connection) for every connected input."""
        for key, socket in self.inputs.items():
            if socket.connection is not None:
                yield key, socket.connection

    def upstream_ids(self) -> List[str]:
        seen = []
        for _, conn in self.connections():
            if conn.node_id not in seen:
                seen.append(conn.node_id)
        return seen


@dataclass
class NodeGraph:
    nodes: List[GraphNode] = field(default_factory=list)

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def node_map(self) -> Dict[str, GraphNode]:
        return {node.id: node for node in self.nodes}

    def get(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def add(self, node: GraphNode) -> GraphNode:
        self.nodes.append(node)
        return node

    def connect(self, producer_id: str, output_key: str, consumer_id: str, input_key: str):
        """
        Wire producer.output_key into consumer.input_key.

        Replaces any existing connection on that input (single producer).
        """
        consumer = self.get(consumer_id)
        if consumer is None:
            raise KeyError(f"No node with id {consumer_id!r}")
        if input_key not in consumer.inputs:
            raise KeyError(f"Node {consumer_id!r} has no input {input_key!r}")
        consumer.inputs[input_key].connection = Connection(producer_id, output_key)

    def disconnect(self, consumer_id: str, input_key: str):
        consumer = self.get(consumer_id)
        if consumer is not None and input_key in consumer.inputs:
            consumer.inputs[input_key].connection = None

    def snapshot(self) -> "NodeGraph":
        """Frozen-per-compile deep copy."""
        return copy.deepcopy(self)
