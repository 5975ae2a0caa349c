import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..config import CompileOptions
from ..diagnostics import DiagnosticCollector, DiagnosticKind
from ..errors import NodeGenerationError
from ..ir.graph import Connection, GraphNode
from ..ir.types import DataType
from ..nodes.base import CODE_OVERRIDE_PARAM, NameScope, NodeDefinition
from ..nodes.registry import get_definition
from ..planner.analysis import DependencyOrder
from ..planner.loops import LoopRegion, StructuralPlan, is_loop_marker
from ..utils.glsl_parser import parse_glsl_functions
from .literals import can_coerce, cast_expr, coerce_expr, format_float, format_literal
from .preamble import HOST_SYMBOLS, fragment_preamble
from .shader_context import ShaderContext

logger = logging.getLogger(__name__)

# Resolves a connection to (expression, producer type), or None if the producer has no value
Lookup = Callable[[Connection], Optional[Tuple[str, DataType]]]

INDENT = "    "


class ShaderGenerator:
    """
    Generates a GLSL fragment program from a planned node order.

    One generator serves one compile. It walks the structural plan, asks
    each node's definition for code with resolved input expressions, and
    assembles preamble, deduplicated helpers and ``main()``.
    """
    def __init__(self, nodes: Dict[str, GraphNode], order: DependencyOrder, plan: StructuralPlan,
                 options: CompileOptions, diagnostics: DiagnosticCollector):
        self.nodes = nodes
        self.order = order
        self.plan = plan
        self.options = options
        self.diagnostics = diagnostics
        self.ctx = ShaderContext(self._program_symbols())
        self._silent = False

    def _program_symbols(self) -> List[str]:
        """Uniform, varying and helper function names visible to ``main()``."""
        symbols = list(HOST_SYMBOLS)
        for node in self.nodes.values():
            definition = get_definition(node.type)
            if definition is not None:
                for source in definition.helper_sources(node):
                    symbols.extend(fn.name for fn in parse_glsl_functions(source))
        return symbols

    def generate(self) -> Tuple[str, Dict[str, Dict[str, str]]]:
        body = self._generate_body()
        sections = [fragment_preamble(self.options)]
        if self.ctx.helpers:
            sections.append("\n\n".join(self.ctx.helpers))
        sections.append(self._generate_main(body))
        return "\n\n".join(sections) + "\n", self.ctx.bindings

    def _generate_main(self, body: List[str]) -> str:
        lines = ["void main() {"]
        for statement in body:
            for line in statement.split("\n"):
                lines.append(f"{INDENT}{line}" if line.strip() else "")
        lines.append("}")
        return "\n".join(lines)

    # -------------------------------------------------------------------------
    # Body
    # -------------------------------------------------------------------------

    def _generate_body(self) -> List[str]:
        sink_id = self._designated_sink()
        body: List[str] = []
        for step in self.plan.steps:
            if isinstance(step, LoopRegion):
                body.extend(self._emit_loop(step))
                continue
            node = self.nodes[step]
            definition = get_definition(node.type)
            if definition is not None and definition.is_sink:
                # The designated sink is written last; extra sinks are dropped
                continue
            body.extend(self._emit_node(node, self._global_lookup, self.ctx.bindings))

        if sink_id is not None:
            body.extend(self._emit_node(self.nodes[sink_id], self._global_lookup, self.ctx.bindings))
        else:
            color = ", ".join(format_float(c) for c in self.options.fallback_color)
            body.append(f"gl_FragColor = vec4({color});")
        return body

    def _designated_sink(self) -> Optional[str]:
        sinks = []
        for step in self.plan.steps:
            if isinstance(step, str):
                definition = get_definition(self.nodes[step].type)
                if definition is not None and definition.is_sink:
                    sinks.append(step)
        if len(sinks) == 1:
            return sinks[0]
        if not sinks:
            self.diagnostics.add(DiagnosticKind.MISSING_SINK,
                                 "Graph has no output node; writing fallback color")
        else:
            self.diagnostics.add(DiagnosticKind.MISSING_SINK,
                                 f"Graph has {len(sinks)} output nodes ({', '.join(sinks)}); "
                                 f"exactly one is required, writing fallback color")
        return None

    def _report(self, kind: DiagnosticKind, node_id: str, message: str):
        if not self._silent:
            self.diagnostics.node(kind, node_id, message)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def _global_lookup(self, conn: Connection) -> Optional[Tuple[str, DataType]]:
        expr = self.ctx.lookup(conn.node_id, conn.output_key)
        if expr is None:
            return None
        return expr, self.nodes[conn.node_id].outputs[conn.output_key].type

    def _emit_node(self, node: GraphNode, lookup: Lookup, bindings: Dict[str, Dict[str, str]],
                   iteration: Optional[int] = None) -> List[str]:
        definition = get_definition(node.type)
        if definition is None:
            self._report(DiagnosticKind.UNKNOWN_NODE_KIND, node.id, f"unknown node kind '{node.type}'")
            return []

        try:
            inputs = self._resolve_inputs(node, definition, lookup)
        except NodeGenerationError as exc:
            return self._fail(node, bindings, exc)

        if node.bypassed and not (definition.is_sink or is_loop_marker(node)):
            bindings[node.id] = self._bypass(node, inputs)
            return []

        self.ctx.add_helpers(definition.helper_sources(node))
        scope = self.ctx.scope(node.id, iteration)
        try:
            code = definition.generate(node, inputs, scope)
        except NodeGenerationError as exc:
            return self._fail(node, bindings, exc)

        outputs = dict(code.outputs)
        for key, socket in node.outputs.items():
            if key not in outputs:
                self._report(DiagnosticKind.GENERATION_FAILED, node.id,
                             f"generator did not bind output '{key}'; using zero")
                outputs[key] = socket.type.zero_literal()
        bindings[node.id] = outputs

        statements = list(code.statements)
        override = node.params.get(CODE_OVERRIDE_PARAM)
        if isinstance(override, str) and override.strip():
            statements = [line.strip() for line in override.strip().split("\n")]

        if self.options.annotate and statements:
            label = f"{node.type} {node.id}" if iteration is None else f"{node.type} {node.id} [{iteration}]"
            statements.insert(0, f"// {label}")
        return statements

    def _fail(self, node: GraphNode, bindings: Dict[str, Dict[str, str]], exc: NodeGenerationError) -> List[str]:
        self._report(DiagnosticKind.GENERATION_FAILED, node.id, f"{exc}; using zero outputs")
        bindings[node.id] = {key: socket.type.zero_literal() for key, socket in node.outputs.items()}
        return []

    def _resolve_inputs(self, node: GraphNode, definition: NodeDefinition, lookup: Lookup) -> Dict[str, str]:
        schema, _ = definition.socket_schemas(node.params)
        keys = list(node.inputs) + [key for key in schema if key not in node.inputs]

        resolved: Dict[str, str] = {}
        for key in keys:
            socket = node.inputs.get(key)
            dtype = socket.type if socket is not None else schema[key].type
            expr = None
            if socket is not None and socket.connection is not None and not self.order.is_broken(node.id, key):
                found = lookup(socket.connection)
                if found is not None:
                    expr = self._coerce(node, key, dtype, socket.connection, *found)
            if expr is None:
                expr = self._literal_default(node, key, dtype, socket, schema.get(key))
            resolved[key] = expr
        return resolved

    def _coerce(self, node, key, dtype, conn, expr, src_type) -> str:
        if can_coerce(src_type, dtype):
            return coerce_expr(expr, src_type, dtype)
        self._report(DiagnosticKind.TYPE_MISMATCH, node.id,
                     f"input '{key}' expects {dtype} but {conn.node_id}.{conn.output_key} is {src_type}; "
                     f"using zero")
        return dtype.zero_literal()

    @staticmethod
    def _literal_default(node, key, dtype, socket, schema) -> str:
        candidates = [node.params.get(key)]
        if socket is not None:
            candidates.append(socket.default_value)
        if schema is not None:
            candidates.append(schema.default)
        for value in candidates:
            if value is None:
                continue
            literal = format_literal(value, dtype)
            if literal is not None:
                return literal
        return dtype.zero_literal()

    def _bypass(self, node: GraphNode, inputs: Dict[str, str]) -> Dict[str, str]:
        """Bind each output to the first input of the same type, connected inputs first."""
        candidates = [(key, socket) for key, socket in node.inputs.items() if key in inputs]
        candidates.sort(key=lambda item: item[1].connection is None)
        outputs = {}
        for out_key, out_socket in node.outputs.items():
            match = next((key for key, socket in candidates if socket.type is out_socket.type), None)
            if match is not None:
                outputs[out_key] = inputs[match]
            elif candidates:
                key, socket = candidates[0]
                outputs[out_key] = cast_expr(inputs[key], socket.type, out_socket.type)
            else:
                outputs[out_key] = out_socket.type.zero_literal()
        return outputs

    # -------------------------------------------------------------------------
    # Loops
    # -------------------------------------------------------------------------

    def _emit_loop(self, region: LoopRegion) -> List[str]:
        end = self.nodes[region.end_id]
        carry = self.ctx.lookup(region.start_id, "carry") or region.carry_type.zero_literal()
        lines = [f"// loop {region.start_id} -> {region.end_id} x{region.iterations}"]
        local: Dict[str, Dict[str, str]] = {}

        for i in range(region.iterations):
            self._silent = i > 0
            local = {}
            lookup = self._iteration_lookup(region, carry, local)
            for body_id in region.body:
                lines.extend(self._emit_node(self.nodes[body_id], lookup, local, iteration=i))
            carry = self._resolve_inputs(end, get_definition(end.type), lookup)["carry"]
        self._silent = False

        for body_id, outputs in local.items():
            self.ctx.bind(body_id, outputs)
        self.ctx.bind(end.id, {"result": carry})
        return lines

    def _iteration_lookup(self, region: LoopRegion, carry: str, local: Dict[str, Dict[str, str]]) -> Lookup:
        def lookup(conn: Connection):
            if conn.node_id == region.start_id:
                return carry, region.carry_type
            if conn.node_id in local:
                expr = local[conn.node_id].get(conn.output_key)
                if expr is None:
                    return None
                return expr, self.nodes[conn.node_id].outputs[conn.output_key].type
            return self._global_lookup(conn)
        return lookup
