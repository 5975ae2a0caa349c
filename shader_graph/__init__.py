"""
Shader Graph: compiles node graphs into GLSL fragment programs.

    from shader_graph import NodeGraph, create_node, compile_graph

    graph = NodeGraph()
    graph.add(create_node("uv", "uv"))
    graph.add(create_node("circleSDF", "circle"))
    graph.add(create_node("floatToVec3", "gray"))
    graph.add(create_node("output", "out"))
    graph.connect("uv", "uv", "circle", "position")
    graph.connect("circle", "distance", "gray", "input")
    graph.connect("gray", "rgb", "out", "color")

    result = compile_graph(graph)
    result.program_text, result.diagnostics, result.node_output_variables
"""

from .compiler import CompiledResult, GraphCompiler, compile_graph, get_compiler
from .config import CompileOptions, SessionOptions, DEFAULT_OPTIONS
from .diagnostics import Diagnostic, DiagnosticKind
from .errors import (
    ShaderGraphError,
    CompilationError,
    NodeGenerationError,
    GraphFormatError,
    RegistryError,
    UnknownNodeKindError,
)
from .ir.graph import Connection, GraphNode, InputSocket, NodeGraph, OutputSocket
from .ir.serialization import dump_graph, graph_from_dict, graph_to_dict, load_graph
from .ir.types import DataType
from .nodes.registry import NODE_REGISTRY, create_node, get_definition, nodes_by_category
from .planner.preview import build_preview_graph
from .session import RecompileSession
from .utils.glsl_parser import build_custom_fn_params, parse_glsl_functions

__version__ = "0.1.0"

__all__ = [
    'CompiledResult',
    'GraphCompiler',
    'compile_graph',
    'get_compiler',
    'CompileOptions',
    'SessionOptions',
    'DEFAULT_OPTIONS',
    'Diagnostic',
    'DiagnosticKind',
    'ShaderGraphError',
    'CompilationError',
    'NodeGenerationError',
    'GraphFormatError',
    'RegistryError',
    'UnknownNodeKindError',
    'Connection',
    'GraphNode',
    'InputSocket',
    'NodeGraph',
    'OutputSocket',
    'dump_graph',
    'graph_from_dict',
    'graph_to_dict',
    'load_graph',
    'DataType',
    'NODE_REGISTRY',
    'create_node',
    'get_definition',
    'nodes_by_category',
    'build_preview_graph',
    'RecompileSession',
    'build_custom_fn_params',
    'parse_glsl_functions',
]
