"""
JSON form of a graph snapshot.

Shape (camelCase keys, as saved by the editor):

    {"nodes": [{"id": "n1", "type": "circleSDF", "position": {"x": 0, "y": 0},
                "inputs": {"position": {"type": "vec2", "label": "Position",
                                        "connection": {"nodeId": "n0", "outputKey": "uv"}}},
                "outputs": {"distance": {"type": "float", "label": "Distance"}},
                "params": {"radius": 0.3}, "bypassed": false}]}

Node kinds are not checked here; unknown kinds load and are reported by
the compiler.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from ..errors import GraphFormatError
from .graph import Connection, GraphNode, InputSocket, NodeGraph, OutputSocket
from .types import DataType


def _socket_type(data: Mapping[str, Any], where: str) -> DataType:
    try:
        return DataType.from_name(data.get("type", "float"))
    except ValueError as exc:
        raise GraphFormatError(f"{where}: {exc}") from None


def _input_from_dict(data: Mapping[str, Any], where: str) -> InputSocket:
    if not isinstance(data, Mapping):
        raise GraphFormatError(f"{where}: socket must be an object")
    connection = None
    conn = data.get("connection")
    if conn is not None:
        if not isinstance(conn, Mapping) or "nodeId" not in conn or "outputKey" not in conn:
            raise GraphFormatError(f"{where}: connection needs nodeId and outputKey")
        connection = Connection(str(conn["nodeId"]), str(conn["outputKey"]))
    default = data.get("defaultValue")
    if isinstance(default, list):
        default = tuple(default)
    return InputSocket(_socket_type(data, where), str(data.get("label", "")), connection, default)


def _output_from_dict(data: Mapping[str, Any], where: str) -> OutputSocket:
    if not isinstance(data, Mapping):
        raise GraphFormatError(f"{where}: socket must be an object")
    return OutputSocket(_socket_type(data, where), str(data.get("label", "")))


def _socket_map(data: Mapping[str, Any], key: str, node_id: str) -> Mapping[str, Any]:
    sockets = data.get(key) or {}
    if not isinstance(sockets, Mapping):
        raise GraphFormatError(f"node {node_id}: {key} must be an object keyed by socket name")
    return sockets


def _position(value: Any, node_id: str):
    """Editor canvas position, as {"x", "y"} or an [x, y] pair."""
    if not value:
        return (0.0, 0.0)
    try:
        if isinstance(value, Mapping):
            return (float(value.get("x", 0.0)), float(value.get("y", 0.0)))
        if isinstance(value, (list, tuple)) and len(value) >= 2:
            return (float(value[0]), float(value[1]))
    except (TypeError, ValueError):
        raise GraphFormatError(f"node {node_id}: position coordinates must be numbers") from None
    raise GraphFormatError(f"node {node_id}: position must be {{x, y}} or an [x, y] pair")


def node_from_dict(data: Mapping[str, Any]) -> GraphNode:
    if not isinstance(data, Mapping):
        raise GraphFormatError("node must be an object")
    if "id" not in data or "type" not in data:
        raise GraphFormatError("node needs 'id' and 'type'")
    node_id = str(data["id"])
    params = data.get("params") or {}
    if not isinstance(params, Mapping):
        raise GraphFormatError(f"node {node_id}: params must be an object")
    return GraphNode(
        id=node_id,
        type=str(data["type"]),
        inputs={key: _input_from_dict(sock, f"node {node_id} input {key}")
                for key, sock in _socket_map(data, "inputs", node_id).items()},
        outputs={key: _output_from_dict(sock, f"node {node_id} output {key}")
                 for key, sock in _socket_map(data, "outputs", node_id).items()},
        params=dict(params),
        bypassed=bool(data.get("bypassed", False)),
        position=_position(data.get("position"), node_id),
    )


def graph_from_dict(data: Mapping[str, Any]) -> NodeGraph:
    if isinstance(data, list):
        nodes = data
    elif isinstance(data, Mapping):
        nodes = data.get("nodes")
    else:
        nodes = None
    if not isinstance(nodes, list):
        raise GraphFormatError("graph must be a list of nodes or an object with a 'nodes' list")
    return NodeGraph([node_from_dict(node) for node in nodes])


def node_to_dict(node: GraphNode) -> Dict[str, Any]:
    inputs = {}
    for key, socket in node.inputs.items():
        entry: Dict[str, Any] = {"type": str(socket.type), "label": socket.label}
        if socket.connection is not None:
            entry["connection"] = {"nodeId": socket.connection.node_id,
                                   "outputKey": socket.connection.output_key}
        if socket.default_value is not None:
            value = socket.default_value
            entry["defaultValue"] = list(value) if isinstance(value, tuple) else value
        inputs[key] = entry
    return {
        "id": node.id,
        "type": node.type,
        "position": {"x": node.position[0], "y": node.position[1]},
        "inputs": inputs,
        "outputs": {key: {"type": str(s.type), "label": s.label} for key, s in node.outputs.items()},
        "params": node.params,
        "bypassed": node.bypassed,
    }


def graph_to_dict(graph: NodeGraph) -> Dict[str, Any]:
    return {"nodes": [node_to_dict(node) for node in graph.nodes]}


def loads_graph(text: str) -> NodeGraph:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GraphFormatError(f"invalid JSON: {exc}") from exc
    return graph_from_dict(data)


def dumps_graph(graph: NodeGraph, indent: int = 2) -> str:
    return json.dumps(graph_to_dict(graph), indent=indent)


def load_graph(path: Union[str, Path]) -> NodeGraph:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GraphFormatError(f"cannot read {path}: {exc}", str(path)) from exc
    except UnicodeDecodeError as exc:
        raise GraphFormatError(f"{path}: not UTF-8 text: {exc}", str(path)) from exc
    try:
        return loads_graph(text)
    except GraphFormatError as exc:
        raise GraphFormatError(f"{path}: {exc}", str(path)) from exc


def dump_graph(graph: NodeGraph, path: Union[str, Path]):
    Path(path).write_text(dumps_graph(graph) + "\n", encoding="utf-8")
