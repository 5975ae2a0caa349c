# Source nodes: coordinates, time, pointer, constants

from ..ir.types import DataType
from .base import NodeCode, NodeDefinition, f, single, sockets


def _uv(node, inputs, names):
    var = names.var("uv")
    return NodeCode([
        f"vec2 {var} = (vUv - 0.5) * 2.0;",
        f"{var}.x *= u_resolution.x / u_resolution.y;",
    ], {"uv": var})


def _pixel_uv(node, inputs, names):
    return single(names, DataType.VEC2, "uv", "gl_FragCoord.xy / u_resolution.y")


def _time(node, inputs, names):
    return single(names, DataType.FLOAT, "time", f"u_time * {f(node, 'speed', 1.0)}")


def _mouse(node, inputs, names):
    uv, x, y = names.var("uv"), names.var("x"), names.var("y")
    return NodeCode([
        f"vec2 {uv} = (u_mouse / u_resolution.y - vec2(u_resolution.x / u_resolution.y, 1.0) * 0.5) * 2.0;",
        f"float {x} = {uv}.x;",
        f"float {y} = {uv}.y;",
    ], {"uv": uv, "x": x, "y": y})


def _constant(node, inputs, names):
    return single(names, DataType.FLOAT, "value", f(node, "value", 1.0))


DEFINITIONS = (
    NodeDefinition(
        kind="uv", label="UV", category="Sources",
        description="Aspect-corrected coordinates centred on the canvas, y in [-1, 1].",
        outputs=sockets(uv=(DataType.VEC2, "UV")),
        generate=_uv,
    ),
    NodeDefinition(
        kind="pixelUV", label="Pixel UV", category="Sources",
        outputs=sockets(uv=(DataType.VEC2, "UV")),
        generate=_pixel_uv,
    ),
    NodeDefinition(
        kind="time", label="Time", category="Sources",
        outputs=sockets(time=(DataType.FLOAT, "Time")),
        default_params={"speed": 1.0},
        generate=_time,
    ),
    NodeDefinition(
        kind="mouse", label="Mouse", category="Sources",
        outputs=sockets(uv=(DataType.VEC2, "Mouse UV"), x=(DataType.FLOAT, "X"), y=(DataType.FLOAT, "Y")),
        generate=_mouse,
    ),
    NodeDefinition(
        kind="constant", label="Constant", category="Sources",
        outputs=sockets(value=(DataType.FLOAT, "Value")),
        default_params={"value": 1.0},
        generate=_constant,
    ),
)
