"""
Diagnostics collector.

Every recoverable problem found while compiling a graph is recorded here
instead of aborting the compile. The compiled result exposes the messages
as plain strings; the structured entries stay available for tooling.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    UNKNOWN_NODE_KIND = auto()
    DANGLING_CONNECTION = auto()
    CYCLIC_DEPENDENCY = auto()
    TYPE_MISMATCH = auto()
    AMBIGUOUS_LOOP = auto()
    MISSING_SINK = auto()
    GENERATION_FAILED = auto()


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    node_id: Optional[str] = None

    def __str__(self):
        return self.message


class DiagnosticCollector:
    def __init__(self):
        self._items: List[Diagnostic] = []

    def add(self, kind: DiagnosticKind, message: str, node_id: Optional[str] = None) -> Diagnostic:
        diagnostic = Diagnostic(kind, message, node_id)
        self._items.append(diagnostic)
        logger.warning(message)
        return diagnostic

    def node(self, kind: DiagnosticKind, node_id: str, message: str) -> Diagnostic:
        """Record a diagnostic prefixed with the offending node's id."""
        return self.add(kind, f"Node {node_id}: {message}", node_id)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self._items if d.kind is kind]

    @property
    def items(self) -> Tuple[Diagnostic, ...]:
        return tuple(self._items)

    def messages(self) -> Tuple[str, ...]:
        return tuple(d.message for d in self._items)

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return bool(self._items)
