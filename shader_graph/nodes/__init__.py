from .base import NodeDefinition, NodeCode, NameScope, SocketSchema, CODE_OVERRIDE_PARAM
from .registry import NODE_REGISTRY, get_definition, require_definition, create_node, nodes_by_category

__all__ = [
    'NodeDefinition',
    'NodeCode',
    'NameScope',
    'SocketSchema',
    'CODE_OVERRIDE_PARAM',
    'NODE_REGISTRY',
    'get_definition',
    'require_definition',
    'create_node',
    'nodes_by_category',
]
