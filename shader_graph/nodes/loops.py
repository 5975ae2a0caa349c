"""
Loop boundary markers and loop body steps.

Wire ``loopStart.carry -> step -> ... -> loopEnd.carry`` and set
``iterations`` on the end node; the structural pass unrolls the chain
between them. The carry type is whatever type the wire has, so both
marker generators read their literal socket types instead of assuming one.
"""

from ..ir.types import DataType
from ..codegen.literals import format_fixed
from .base import NodeCode, NodeDefinition, param_float, single, sockets

LOOP_START = "loopStart"
LOOP_END = "loopEnd"


def carry_type(node) -> DataType:
    socket = node.outputs.get("carry") or node.outputs.get("result")
    return socket.type if socket is not None else DataType.VEC2


def _loop_start(node, inputs, names):
    return single(names, carry_type(node), "carry", inputs["carry"])


def _loop_end(node, inputs, names):
    # Single pass; unrolled chains bind `result` without calling this
    return single(names, carry_type(node), "result", inputs["carry"])


def _fixed(node, key, default, digits):
    return format_fixed(param_float(node, key, default), digits)


def _ripple_step(node, inputs, names):
    uv, s, out = inputs["uv"], names.var("s"), names.var("uv")
    speed, strength = _fixed(node, "speed", 1.0, 3), _fixed(node, "strength", 0.12, 4)
    return NodeCode([
        f"vec2 {s} = {uv} * {_fixed(node, 'scale', 3.0, 3)};",
        f"vec2 {out} = {uv} + vec2(",
        f"    sin({s}.y + u_time * {speed}) * {strength},",
        f"    cos({s}.x + u_time * {speed}) * {strength}",
        ");",
    ], {"uv": out})


def _rotate_step(node, inputs, names):
    c, s, out = names.var("c"), names.var("s"), names.var("uv")
    angle = _fixed(node, "angle", 0.3, 5)
    return NodeCode([
        f"float {c} = cos({angle}), {s} = sin({angle});",
        f"vec2 {out} = mat2({c}, -{s}, {s}, {c}) * {inputs['uv']} * {_fixed(node, 'scale', 1.02, 4)};",
    ], {"uv": out})


def _domain_fold(node, inputs, names):
    offset = f"vec2({_fixed(node, 'offsetX', 0.5, 4)}, {_fixed(node, 'offsetY', 0.3, 4)})"
    return single(names, DataType.VEC2, "uv",
                  f"abs({inputs['uv']}) * {_fixed(node, 'scale', 1.8, 4)} - {offset}")


def _float_accumulate(node, inputs, names):
    v = inputs["value"]
    expr = (f"{v} + sin({v} * {_fixed(node, 'scale', 2.0, 3)} + u_time * {_fixed(node, 'speed', 1.0, 3)})"
            f" * {_fixed(node, 'amplitude', 0.15, 4)}")
    return single(names, DataType.FLOAT, "value", expr)


def _step(kind, label, key, dtype, defaults, generate, description=""):
    return NodeDefinition(
        kind=kind, label=label, category="Loops", description=description,
        inputs=sockets(**{key: (dtype, key.upper() if key == "uv" else key.title())}),
        outputs=sockets(**{key: (dtype, "Out")}),
        default_params=defaults,
        generate=generate,
    )


DEFINITIONS = (
    NodeDefinition(
        kind=LOOP_START, label="Loop Start", category="Loops",
        inputs=sockets(carry=(DataType.VEC2, "Initial value")),
        outputs=sockets(carry=(DataType.VEC2, "Carry")),
        generate=_loop_start,
    ),
    NodeDefinition(
        kind=LOOP_END, label="Loop End", category="Loops",
        inputs=sockets(carry=(DataType.VEC2, "Carry in")),
        outputs=sockets(result=(DataType.VEC2, "Result")),
        default_params={"iterations": 4},
        generate=_loop_end,
    ),
    _step("loopRippleStep", "Ripple Step", "uv", DataType.VEC2,
          {"scale": 3.0, "speed": 1.0, "strength": 0.12}, _ripple_step,
          "Sin/cos ripple displacement of a vec2 carry."),
    _step("loopRotateStep", "Rotate Step", "uv", DataType.VEC2,
          {"angle": 0.3, "scale": 1.02}, _rotate_step,
          "Rotate and scale a vec2 carry."),
    _step("loopDomainFold", "Domain Fold", "uv", DataType.VEC2,
          {"scale": 1.8, "offsetX": 0.5, "offsetY": 0.3}, _domain_fold,
          "abs() fold plus offset, the classic IFS step."),
    _step("loopFloatAccumulate", "Float Accumulate", "value", DataType.FLOAT,
          {"scale": 2.0, "speed": 1.0, "amplitude": 0.15}, _float_accumulate),
)
