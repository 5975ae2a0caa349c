"""
Custom exceptions for Shader Graph.

Graph-data problems (unknown kinds, dangling wires, cycles, type mismatches,
ambiguous loops, missing sinks) are never raised out of the compiler; they
become diagnostics on the compiled result. The exceptions here cover the
remaining failure classes: bad input files, registry misuse and node
generators that cannot produce code.

Exception Hierarchy:
    ShaderGraphError (base)
    ├── CompilationError
    │   └── NodeGenerationError
    ├── GraphFormatError
    └── RegistryError
        ├── UnknownNodeKindError
        └── DuplicateNodeKindError
"""


class ShaderGraphError(Exception):
    """Base exception for all Shader Graph errors."""
    pass


# =============================================================================
# Compilation Errors
# =============================================================================

class CompilationError(ShaderGraphError):
    """Base exception for compilation/code generation errors."""
    pass


class NodeGenerationError(CompilationError):
    """
    Raised by a node generator that cannot emit code for its parameters.

    The emitter turns this into a diagnostic and substitutes zero values
    for the node's outputs.
    """

    def __init__(self, message: str, node_id: str = None):
        super().__init__(message)
        self.node_id = node_id


# =============================================================================
# Input Errors
# =============================================================================

class GraphFormatError(ShaderGraphError):
    """Raised when a serialized graph cannot be read into a NodeGraph."""

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


# =============================================================================
# Registry Errors
# =============================================================================

class RegistryError(ShaderGraphError):
    """Base exception for node registry errors."""
    pass


class UnknownNodeKindError(RegistryError):
    """Raised when a node kind has no registered definition."""

    def __init__(self, kind: str):
        super().__init__(f"Unknown node kind: {kind}")
        self.kind = kind


class DuplicateNodeKindError(RegistryError):
    """Raised when two definitions register the same kind."""

    def __init__(self, kind: str):
        super().__init__(f"Node kind registered twice: {kind}")
        self.kind = kind
