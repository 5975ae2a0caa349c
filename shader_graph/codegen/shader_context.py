"""
Per-compile naming and binding state for the emitter.

One ShaderContext lives for exactly one compile: it maps node ids to GLSL
identifier bases, records the expression bound to every output, and keeps
the ordered helper set. Nothing here outlives the call that created it.
"""

import re
from typing import Dict, Iterable, List, Optional, Set

from ..nodes.base import NameScope

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_UNDERSCORE_RUN = re.compile(r"_{2,}")

# GLSL ES reserves identifiers starting with gl_ and containing "__"
_RESERVED_PREFIXES = ("gl_", "webgl_", "_webgl_")


def sanitize_identifier(name: str) -> str:
    """Turn a node id into a legal GLSL identifier fragment."""
    ident = _INVALID_CHARS.sub("_", name)
    ident = _UNDERSCORE_RUN.sub("_", ident).strip("_")
    if not ident:
        ident = "node"
    if ident[0].isdigit() or ident.lower().startswith(_RESERVED_PREFIXES):
        ident = f"n_{ident}"
    return ident


class ShaderContext:
    """Naming context and output bindings for a single compile."""

    def __init__(self, reserved: Iterable[str] = ()):
        self._bases: Dict[str, str] = {}
        self._taken: Set[str] = set()
        # Program-level symbols a local declaration must not shadow
        self._reserved = frozenset(reserved)
        self.bindings: Dict[str, Dict[str, str]] = {}
        self._helpers: Dict[str, None] = {}

    # -------------------------------------------------------------------------
    # Names
    # -------------------------------------------------------------------------

    def _clashes(self, base: str) -> bool:
        # Every variable is base_<key>[suffix], so only symbols with that prefix can collide
        prefix = f"{base}_"
        return any(name.startswith(prefix) for name in self._reserved)

    def base_name(self, node_id: str) -> str:
        base = self._bases.get(node_id)
        if base is None:
            candidate = sanitize_identifier(node_id)
            if self._clashes(candidate):
                candidate = f"n_{candidate}"
            base, n = candidate, 2
            while base in self._taken or self._clashes(base):
                base = f"{candidate}_{n}"
                n += 1
            self._bases[node_id] = base
            self._taken.add(base)
        return base

    def scope(self, node_id: str, iteration: Optional[int] = None) -> NameScope:
        suffix = "" if iteration is None else f"_i{iteration}"
        return NameScope(self.base_name(node_id), suffix)

    # -------------------------------------------------------------------------
    # Bindings
    # -------------------------------------------------------------------------

    def bind(self, node_id: str, outputs: Dict[str, str]):
        self.bindings[node_id] = dict(outputs)

    def lookup(self, node_id: str, output_key: str) -> Optional[str]:
        return self.bindings.get(node_id, {}).get(output_key)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def add_helpers(self, sources):
        """Append helper sources not seen before, keeping first-seen order."""
        for source in sources:
            if source not in self._helpers:
                self._helpers[source] = None

    @property
    def helpers(self) -> List[str]:
        return list(self._helpers)
