# Node Definition Registry
# Maps node kind -> NodeDefinition

from typing import Any, Dict, List, Mapping, Optional

from ..errors import DuplicateNodeKindError, UnknownNodeKindError
from ..ir.graph import GraphNode
from .base import NodeDefinition
from . import color, effects, loops, math, noise, output, physics, primitives, sources, transforms

_MODULES = (sources, transforms, primitives, math, noise, color, physics, effects, loops, output)


def _build_registry(modules) -> Dict[str, NodeDefinition]:
    registry: Dict[str, NodeDefinition] = {}
    for module in modules:
        for definition in module.DEFINITIONS:
            if definition.kind in registry:
                raise DuplicateNodeKindError(definition.kind)
            registry[definition.kind] = definition
    return registry


# Registry mapping node kind to its definition
NODE_REGISTRY: Dict[str, NodeDefinition] = _build_registry(_MODULES)


def get_definition(kind: str) -> Optional[NodeDefinition]:
    """Get the definition for a node kind, or None if not found."""
    return NODE_REGISTRY.get(kind)


def require_definition(kind: str) -> NodeDefinition:
    definition = NODE_REGISTRY.get(kind)
    if definition is None:
        raise UnknownNodeKindError(kind)
    return definition


def create_node(kind: str, node_id: str, params: Optional[Mapping[str, Any]] = None,
                position=(0.0, 0.0)) -> GraphNode:
    """Instantiate a node with its definition's sockets and default params."""
    return require_definition(kind).instantiate(node_id, params, position)


def nodes_by_category() -> Dict[str, List[NodeDefinition]]:
    categories: Dict[str, List[NodeDefinition]] = {}
    for definition in NODE_REGISTRY.values():
        categories.setdefault(definition.category, []).append(definition)
    return categories


__all__ = ['NODE_REGISTRY', 'get_definition', 'require_definition', 'create_node', 'nodes_by_category']
