"""
Effect nodes, including the two user-programmable kinds.

``expr`` substitutes up to four named float inputs into a one-line GLSL
expression. ``customFn`` takes its whole socket list from ``params["inputs"]``
and injects ``params["glslFunctions"]`` into the program's helper section,
so the registry rebuilds its schemas per instance.
"""

import re
from typing import Any, Dict, Mapping

from ..errors import NodeGenerationError
from ..ir.types import DataType
from ..codegen.shader_lib import GRAIN_GLSL, MAKE_LIGHT_GLSL, TONEMAP_GLSL
from .base import NodeCode, NodeDefinition, SocketSchema, f, param_str, single, sockets

TONEMAP_FUNCTIONS = {"aces": "toneACES", "hable": "toneHable", "unreal": "toneUnreal", "tanh": "toneTanh"}

EXPR_SLOTS = ("in0", "in1", "in2", "in3")

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _substitute(text: str, name: str, expr: str) -> str:
    return re.sub(rf"\b{re.escape(name)}\b", lambda _: expr, text)


def _output_type(node, default="float") -> DataType:
    name = param_str(node, "outputType", default)
    try:
        return DataType.from_name(name)
    except ValueError:
        raise NodeGenerationError(f"invalid output type {name!r}", node.id) from None


def _socket_type(name: Any) -> DataType:
    try:
        return DataType.from_name(name)
    except ValueError:
        return DataType.FLOAT


# =============================================================================
# Fixed effects
# =============================================================================

def _make_light(node, inputs, names):
    return single(names, DataType.FLOAT, "glow", f"make_light({inputs['distance']}, {inputs['brightness']})")


def _tone_map(node, inputs, names):
    fn = TONEMAP_FUNCTIONS.get(param_str(node, "mode", "aces"), "toneACES")
    return single(names, DataType.VEC3, "color", f"{fn}({inputs['color']})")


def _grain(node, inputs, names):
    var = names.var("color")
    call = f"applyGrain({inputs['color']}, {inputs['uv']}, {f(node, 'amount', 0.05)}, {inputs['seed']})"
    return NodeCode([f"vec3 {var} = {call};"], {"color": var, "uv": inputs["uv"]})


# =============================================================================
# Expression node
# =============================================================================

def _expr_sockets(params: Mapping[str, Any]):
    inputs = {slot: SocketSchema(DataType.FLOAT, str(params.get(f"{slot}Name") or slot)) for slot in EXPR_SLOTS}
    out_type = _socket_type(params.get("outputType", "float"))
    return inputs, {"result": SocketSchema(out_type, "Result")}


def _expr(node, inputs, names):
    out_type = _output_type(node)
    expr = param_str(node, "expr", "").strip() or "0.0"
    for slot in EXPR_SLOTS:
        name = param_str(node, f"{slot}Name", slot).strip()
        if name:
            expr = _substitute(expr, name, inputs[slot])
    return single(names, out_type, "result", expr)


# =============================================================================
# Custom function node
# =============================================================================

def custom_inputs(params: Mapping[str, Any]) -> Dict[str, DataType]:
    """Declared inputs of a customFn instance, in order, skipping unusable names."""
    result = {}
    entries = params.get("inputs")
    if not isinstance(entries, (list, tuple)):
        return result
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        name = str(entry.get("name", "")).strip()
        if _IDENTIFIER_RE.match(name) and name not in result:
            result[name] = _socket_type(entry.get("type", "float"))
    return result


def _custom_sockets(params: Mapping[str, Any]):
    inputs = {name: SocketSchema(dtype, name) for name, dtype in custom_inputs(params).items()}
    out_type = _socket_type(params.get("outputType", "float"))
    return inputs, {"result": SocketSchema(out_type, "Result")}


def _custom_helpers(node):
    source = node.params.get("glslFunctions")
    return (source,) if isinstance(source, str) else ()


def _custom_fn(node, inputs, names):
    out_type = _output_type(node)
    var = names.var("result")
    body = param_str(node, "body", "").strip() or out_type.zero_literal()
    for name in custom_inputs(node.params):
        if name in inputs:
            body = _substitute(body, name, inputs[name])

    if "\n" not in body:
        return NodeCode([f"{out_type.glsl} {var} = {body};"], {"result": var})

    # Multi-line bodies assign to `result`
    body = _substitute(body, "result", var)
    lines = [f"{out_type.glsl} {var} = {out_type.zero_literal()};", "{"]
    lines += [f"    {line.rstrip()}" for line in body.split("\n")]
    lines.append("}")
    return NodeCode(lines, {"result": var})


DEFINITIONS = (
    NodeDefinition(
        kind="makeLight", label="Make Light", category="Effects",
        description="Turn a distance into glow with exp falloff.",
        inputs=sockets(distance=(DataType.FLOAT, "Distance"), brightness=(DataType.FLOAT, "Brightness")),
        outputs=sockets(glow=(DataType.FLOAT, "Glow")),
        default_params={"brightness": 10.0},
        helpers=(MAKE_LIGHT_GLSL,),
        generate=_make_light,
    ),
    NodeDefinition(
        kind="toneMap", label="Tone Map", category="Effects",
        inputs=sockets(color=(DataType.VEC3, "Color")),
        outputs=sockets(color=(DataType.VEC3, "Color")),
        default_params={"mode": "aces"},
        helpers=(TONEMAP_GLSL,),
        generate=_tone_map,
    ),
    NodeDefinition(
        kind="grain", label="Grain", category="Effects",
        inputs=sockets(color=(DataType.VEC3, "Color"), uv=(DataType.VEC2, "UV"),
                       seed=(DataType.FLOAT, "Seed (animate)")),
        outputs=sockets(color=(DataType.VEC3, "Color"), uv=(DataType.VEC2, "UV (pass-through)")),
        default_params={"amount": 0.05, "seed": 0.0},
        helpers=(GRAIN_GLSL,),
        generate=_grain,
    ),
    NodeDefinition(
        kind="expr", label="Expr", category="Effects",
        description="One-line GLSL expression over up to four named inputs.",
        default_params={"expr": "in0", "outputType": "float",
                        "in0Name": "in0", "in1Name": "in1", "in2Name": "in2", "in3Name": "in3"},
        build_sockets=_expr_sockets,
        generate=_expr,
    ),
    NodeDefinition(
        kind="customFn", label="Custom Fn", category="Effects",
        description="User-defined GLSL with its own input sockets and helper functions.",
        default_params={"label": "Custom Fn", "inputs": [], "outputType": "float",
                        "body": "0.0", "glslFunctions": ""},
        build_sockets=_custom_sockets,
        extra_helpers=_custom_helpers,
        generate=_custom_fn,
    ),
)
