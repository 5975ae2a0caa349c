"""
Recompile scheduling for an editing session.

The compiler itself is stateless; this is the small piece of the editing
layer that decides *when* to call it. Structural edits (adding, removing or
wiring nodes) compile immediately. Parameter edits from sliders and text
fields are coalesced: each one reschedules a single pending compile, which
runs once the user pauses for ``debounce_seconds``. The most recent graph
always wins.

Example:
    session = RecompileSession(on_result=renderer.update_program)
    session.structural_change(graph)         # compiles now
    session.param_change(graph)              # compiles 0.5s after the last edit
"""

import logging
import threading
from typing import Callable, Optional

from .compiler import CompiledResult, compile_graph
from .config import DEFAULT_SESSION_OPTIONS, SessionOptions
from .ir.graph import NodeGraph

logger = logging.getLogger(__name__)

CompileFn = Callable[[NodeGraph], CompiledResult]
ResultCallback = Callable[[CompiledResult], None]
# (delay_seconds, callback) -> object with start() and cancel(), like threading.Timer
TimerFactory = Callable[[float, Callable[[], None]], object]


class RecompileSession:
    def __init__(self, on_result: ResultCallback, compile_fn: CompileFn = compile_graph,
                 options: Optional[SessionOptions] = None,
                 timer_factory: TimerFactory = threading.Timer):
        self.on_result = on_result
        self.compile_fn = compile_fn
        self.options = options or DEFAULT_SESSION_OPTIONS
        self.timer_factory = timer_factory
        self.last_result: Optional[CompiledResult] = None
        # Reentrant so on_result may start another edit from inside the callback
        self._lock = threading.RLock()
        self._timer = None
        self._pending: Optional[NodeGraph] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def structural_change(self, graph: NodeGraph) -> CompiledResult:
        """Compile now, superseding any debounced compile."""
        with self._lock:
            self._cancel_locked()
            generation = self._generation
        return self._run(graph, generation)

    def param_change(self, graph: NodeGraph, debounce: bool = True) -> Optional[CompiledResult]:
        """
        Schedule a compile after the debounce window.

        With ``debounce=False`` (discrete controls) this behaves like a
        structural change.
        """
        if not debounce or self.options.debounce_seconds <= 0:
            return self.structural_change(graph)
        with self._lock:
            self._cancel_locked()
            generation = self._generation
            self._pending = graph
            self._timer = self.timer_factory(self.options.debounce_seconds,
                                             lambda: self._fire(generation))
            self._timer.start()
        return None

    def flush(self) -> Optional[CompiledResult]:
        """Run the pending compile now, if there is one."""
        with self._lock:
            graph = self._pending
            self._cancel_locked()
            generation = self._generation
        if graph is None:
            return None
        return self._run(graph, generation)

    def cancel(self):
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self):
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending = None
        self._generation += 1

    def _fire(self, generation: int):
        with self._lock:
            if generation != self._generation or self._pending is None:
                # Superseded by a later edit
                return
            graph = self._pending
            self._timer = None
            self._pending = None
        self._run(graph, generation)

    def _run(self, graph: NodeGraph, generation: int) -> CompiledResult:
        # Compiles run outside the lock; only the newest one is delivered
        result = self.compile_fn(graph)
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Dropped superseded compile {generation} (current {self._generation})")
                return result
            self.last_result = result
            logger.debug(f"Recompiled: {len(result.diagnostics)} diagnostics, fingerprint {result.fingerprint}")
            self.on_result(result)
        return result
