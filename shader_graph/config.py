"""
Compiler and session settings.

Defaults match what the editor ships with; hosts override individual
fields with ``dataclasses.replace(DEFAULT_OPTIONS, ...)``.
"""

from dataclasses import dataclass
from typing import Tuple


PREVIEW_SINK_ID = "__preview_output__"


@dataclass(frozen=True)
class CompileOptions:
    # Loop unrolling bounds for loopEnd.iterations
    min_iterations: int = 1
    max_iterations: int = 16
    default_iterations: int = 4

    # Written when the graph has no single sink
    fallback_color: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)

    precision: str = "mediump"
    preview_sink_id: str = PREVIEW_SINK_ID

    # Emit a "// kind node_id" comment above each node's statements
    annotate: bool = True


@dataclass(frozen=True)
class SessionOptions:
    debounce_seconds: float = 0.5


DEFAULT_OPTIONS = CompileOptions()
DEFAULT_SESSION_OPTIONS = SessionOptions()
