# 2D signed distance primitives and combiners

from ..ir.types import DataType
from ..codegen.shader_lib import BOX_SDF_GLSL, CIRCLE_SDF_GLSL, RING_SDF_GLSL, SMIN_GLSL
from .base import NodeDefinition, f, single, sockets


def _offset_position(node, inputs):
    if "offset" in node.inputs and node.inputs["offset"].connection is not None:
        offset = inputs["offset"]
    else:
        offset = f"vec2({f(node, 'posX', 0.0)}, {f(node, 'posY', 0.0)})"
    return f"({inputs['position']} - {offset})"


def _circle(node, inputs, names):
    return single(names, DataType.FLOAT, "distance",
                  f"circleSDF({_offset_position(node, inputs)}, {inputs['radius']})")


def _ring(node, inputs, names):
    return single(names, DataType.FLOAT, "distance",
                  f"ringSDF({_offset_position(node, inputs)}, {inputs['radius']})")


def _box(node, inputs, names):
    size = f"vec2({f(node, 'width', 0.5)}, {f(node, 'height', 0.5)})"
    return single(names, DataType.FLOAT, "distance", f"boxSDF({_offset_position(node, inputs)}, {size})")


def _smooth_min(node, inputs, names):
    return single(names, DataType.FLOAT, "result",
                  f"smin({inputs['a']}, {inputs['b']}, {inputs['smoothness']})")


def _combiner(fn):
    def generate(node, inputs, names):
        return single(names, DataType.FLOAT, "result", fn.format(a=inputs["a"], b=inputs["b"]))
    return generate


_SHAPE_INPUTS = dict(
    position=(DataType.VEC2, "Position"),
    radius=(DataType.FLOAT, "Radius"),
    offset=(DataType.VEC2, "Offset"),
)

DEFINITIONS = (
    NodeDefinition(
        kind="circleSDF", label="Circle SDF", category="2D Primitives",
        inputs=sockets(**_SHAPE_INPUTS),
        outputs=sockets(distance=(DataType.FLOAT, "Distance")),
        default_params={"radius": 0.3, "posX": 0.0, "posY": 0.0},
        helpers=(CIRCLE_SDF_GLSL,),
        generate=_circle,
    ),
    NodeDefinition(
        kind="ringSDF", label="Ring SDF", category="2D Primitives",
        inputs=sockets(**_SHAPE_INPUTS),
        outputs=sockets(distance=(DataType.FLOAT, "Distance")),
        default_params={"radius": 0.3, "posX": 0.0, "posY": 0.0},
        helpers=(RING_SDF_GLSL,),
        generate=_ring,
    ),
    NodeDefinition(
        kind="boxSDF", label="Box SDF", category="2D Primitives",
        inputs=sockets(position=(DataType.VEC2, "Position"), offset=(DataType.VEC2, "Offset")),
        outputs=sockets(distance=(DataType.FLOAT, "Distance")),
        default_params={"width": 0.5, "height": 0.5, "posX": 0.0, "posY": 0.0},
        helpers=(BOX_SDF_GLSL,),
        generate=_box,
    ),
    NodeDefinition(
        kind="smoothMin", label="Smooth Min", category="Combiners",
        description="Rounded union of two distance fields.",
        inputs=sockets(a=(DataType.FLOAT, "A"), b=(DataType.FLOAT, "B"),
                       smoothness=(DataType.FLOAT, "Smoothness")),
        outputs=sockets(result=(DataType.FLOAT, "Result")),
        default_params={"smoothness": 0.5},
        helpers=(SMIN_GLSL,),
        generate=_smooth_min,
    ),
    NodeDefinition(
        kind="min", label="Min (Union)", category="Combiners",
        inputs=sockets(a=(DataType.FLOAT, "A"), b=(DataType.FLOAT, "B")),
        outputs=sockets(result=(DataType.FLOAT, "Result")),
        generate=_combiner("min({a}, {b})"),
    ),
    NodeDefinition(
        kind="sdfMax", label="Max (Intersect)", category="Combiners",
        inputs=sockets(a=(DataType.FLOAT, "A"), b=(DataType.FLOAT, "B")),
        outputs=sockets(result=(DataType.FLOAT, "Result")),
        generate=_combiner("max({a}, {b})"),
    ),
    NodeDefinition(
        kind="sdfSubtract", label="Subtract (Cut)", category="Combiners",
        inputs=sockets(a=(DataType.FLOAT, "A"), b=(DataType.FLOAT, "B")),
        outputs=sockets(result=(DataType.FLOAT, "Result")),
        generate=_combiner("max({a}, -({b}))"),
    ),
)
