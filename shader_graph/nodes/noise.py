# Procedural noise nodes

from ..ir.types import DataType
from ..codegen.literals import is_zero_literal
from ..codegen.shader_lib import FBM_GLSL, NOISE_HASH_GLSL, VORONOI_GLSL
from .base import NodeCode, NodeDefinition, f, param_int, sockets


def _animated_uv(inputs, drift):
    """UV scaled by the node's scale, drifting with time when time_scale is non-zero."""
    uv, scale, time_scale = inputs["uv"], inputs["scale"], inputs["time_scale"]
    if is_zero_literal(time_scale):
        return f"{uv} * {scale}"
    return f"({uv} + {inputs['time']} * {time_scale} * {drift}) * {scale}"


def _fbm(node, inputs, names):
    octaves = max(1, min(8, param_int(node, "octaves", 4)))
    var = names.var("value")
    call = f"fbm({_animated_uv(inputs, 'vec2(0.31, 0.17)')}, {octaves}, {f(node, 'lacunarity', 2.0)}, {f(node, 'gain', 0.5)})"
    return NodeCode([f"float {var} = {call};"], {"value": var, "uv": inputs["uv"]})


def _voronoi(node, inputs, names):
    var = names.var("dist")
    call = f"voronoi({_animated_uv(inputs, 'vec2(0.13, 0.27)')}, {inputs['jitter']})"
    return NodeCode([f"float {var} = {call};"], {"dist": var, "uv": inputs["uv"]})


DEFINITIONS = (
    NodeDefinition(
        kind="fbm", label="FBM", category="Noise",
        description="Fractal Brownian motion over value noise.",
        inputs=sockets(uv=(DataType.VEC2, "UV"), time=(DataType.FLOAT, "Time"),
                       scale=(DataType.FLOAT, "Scale"), time_scale=(DataType.FLOAT, "Time Scale")),
        outputs=sockets(value=(DataType.FLOAT, "Value"), uv=(DataType.VEC2, "UV (pass-through)")),
        default_params={"octaves": 4, "lacunarity": 2.0, "gain": 0.5, "scale": 1.0, "time_scale": 0.0},
        helpers=(NOISE_HASH_GLSL, FBM_GLSL),
        generate=_fbm,
    ),
    NodeDefinition(
        kind="voronoi", label="Voronoi", category="Noise",
        description="Cell noise returning the distance to the nearest feature point.",
        inputs=sockets(uv=(DataType.VEC2, "UV"), time=(DataType.FLOAT, "Time"),
                       scale=(DataType.FLOAT, "Scale"), jitter=(DataType.FLOAT, "Jitter"),
                       time_scale=(DataType.FLOAT, "Anim Speed")),
        outputs=sockets(dist=(DataType.FLOAT, "Distance"), uv=(DataType.VEC2, "UV (pass-through)")),
        default_params={"scale": 5.0, "jitter": 1.0, "time_scale": 0.0},
        helpers=(NOISE_HASH_GLSL, VORONOI_GLSL),
        generate=_voronoi,
    ),
)
