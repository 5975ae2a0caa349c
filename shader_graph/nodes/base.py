"""
Node definition protocol.

A NodeDefinition is a read-only registry entry: socket schemas, default
parameters, shared helper sources and a ``generate`` function.

``generate(node, inputs, names)`` receives the node instance, a mapping of
every input key to a resolved GLSL expression, and a NameScope that hands
out the variable names the node may declare. It returns a NodeCode with
the statements to append to ``main()`` and the expression bound to each
output. Generators must be pure: the same node, inputs and scope always
yield the same text.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import NodeGenerationError
from ..ir.graph import GraphNode, InputSocket, OutputSocket
from ..ir.types import DataType
from ..codegen.literals import format_float, is_number, is_vector_value, vec_literal

# Parameter holding hand-written statements that replace a node's generated code
CODE_OVERRIDE_PARAM = "__codeOverride"


@dataclass(frozen=True)
class SocketSchema:
    type: DataType
    label: str = ""
    default: Any = None


def sockets(**schemas) -> Dict[str, SocketSchema]:
    """
    Build a socket schema mapping from keyword arguments.

    Each value is a DataType, a (DataType, label) tuple or a SocketSchema:
        sockets(uv=DataType.VEC2, radius=(DataType.FLOAT, "Radius"))
    """
    result = {}
    for key, spec in schemas.items():
        if isinstance(spec, SocketSchema):
            result[key] = spec
        elif isinstance(spec, tuple):
            result[key] = SocketSchema(*spec)
        else:
            result[key] = SocketSchema(spec, key.replace('_', ' ').title())
    return result


@dataclass
class NodeCode:
    statements: List[str] = field(default_factory=list)
    outputs: Dict[str, str] = field(default_factory=dict)


class NameScope:
    """Variable names available to one node during one emission pass."""

    def __init__(self, base: str, suffix: str = ""):
        self.base = base
        self.suffix = suffix

    def var(self, key: str) -> str:
        return f"{self.base}_{key}{self.suffix}"

    def __repr__(self):
        return f"NameScope({self.base!r}, {self.suffix!r})"


GenerateFn = Callable[[GraphNode, Mapping[str, str], NameScope], NodeCode]
SocketBuilder = Callable[[Mapping[str, Any]], Tuple[Dict[str, SocketSchema], Dict[str, SocketSchema]]]


@dataclass(frozen=True)
class NodeDefinition:
    kind: str
    label: str
    category: str
    generate: GenerateFn
    inputs: Mapping[str, SocketSchema] = field(default_factory=dict)
    outputs: Mapping[str, SocketSchema] = field(default_factory=dict)
    default_params: Mapping[str, Any] = field(default_factory=dict)
    helpers: Tuple[str, ...] = ()
    description: str = ""
    # Per-instance helper sources (customFn user functions)
    extra_helpers: Optional[Callable[[GraphNode], Sequence[str]]] = None
    # Rebuilds socket schemas from params for kinds whose sockets are a parameter
    build_sockets: Optional[SocketBuilder] = None
    is_sink: bool = False

    def helper_sources(self, node: GraphNode) -> Tuple[str, ...]:
        sources = list(self.helpers)
        if self.extra_helpers is not None:
            sources.extend(self.extra_helpers(node))
        return tuple(s for s in (src.strip() for src in sources) if s)

    def socket_schemas(self, params: Mapping[str, Any]):
        if self.build_sockets is None:
            return dict(self.inputs), dict(self.outputs)
        try:
            return self.build_sockets(params)
        except (TypeError, ValueError, AttributeError, KeyError) as exc:
            raise NodeGenerationError(f"cannot build sockets from params: {exc}") from exc

    def instantiate(self, node_id: str, params: Optional[Mapping[str, Any]] = None,
                    position=(0.0, 0.0)) -> GraphNode:
        merged = copy.deepcopy(dict(self.default_params))
        if params:
            merged.update(copy.deepcopy(dict(params)))
        inputs, outputs = self.socket_schemas(merged)
        return GraphNode(
            id=node_id,
            type=self.kind,
            inputs={k: InputSocket(s.type, s.label, default_value=s.default) for k, s in inputs.items()},
            outputs={k: OutputSocket(s.type, s.label) for k, s in outputs.items()},
            params=merged,
            position=tuple(position),
        )


# =============================================================================
# Parameter helpers
# =============================================================================

def param_float(node: GraphNode, key: str, default: float) -> float:
    value = node.params.get(key)
    return float(value) if is_number(value) else float(default)


def param_int(node: GraphNode, key: str, default: int) -> int:
    value = node.params.get(key)
    if is_number(value):
        return int(round(value))
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def param_str(node: GraphNode, key: str, default: str) -> str:
    value = node.params.get(key)
    return value if isinstance(value, str) else default


def param_vec(node: GraphNode, key: str, default: Sequence[float]) -> Tuple[float, ...]:
    value = node.params.get(key)
    if is_vector_value(value) and len(value) >= len(default):
        return tuple(float(v) for v in value[:len(default)])
    return tuple(default)


def f(node: GraphNode, key: str, default: float) -> str:
    """Float parameter as a GLSL literal."""
    return format_float(param_float(node, key, default))


def vec3_param(node: GraphNode, key: str, default: Sequence[float]) -> str:
    return vec_literal(param_vec(node, key, default), digits=2)


def single(names: NameScope, dtype: DataType, key: str, expr: str) -> NodeCode:
    """One declaration bound to one output; the common generator shape."""
    var = names.var(key)
    return NodeCode([f"{dtype.glsl} {var} = {expr};"], {key: var})
