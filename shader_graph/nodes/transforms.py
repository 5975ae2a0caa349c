# UV transforms

from ..ir.types import DataType
from ..codegen.shader_lib import ROTATE_GLSL
from .base import NodeDefinition, single, sockets


def _fract(node, inputs, names):
    return single(names, DataType.VEC2, "output", f"fract({inputs['input']} * {inputs['scale']}) - 0.5")


def _rotate2d(node, inputs, names):
    return single(names, DataType.VEC2, "output", f"rotate({inputs['input']}, {inputs['angle']})")


def _scale2d(node, inputs, names):
    return single(names, DataType.VEC2, "output", f"{inputs['input']} * {inputs['scale']}")


def _offset2d(node, inputs, names):
    return single(names, DataType.VEC2, "output", f"{inputs['input']} + {inputs['offset']}")


DEFINITIONS = (
    NodeDefinition(
        kind="fract", label="Fract", category="Transforms",
        description="Tile space: fract(input * scale) - 0.5.",
        inputs=sockets(input=(DataType.VEC2, "Input"), scale=(DataType.FLOAT, "Scale")),
        outputs=sockets(output=(DataType.VEC2, "Output")),
        default_params={"scale": 3.0},
        generate=_fract,
    ),
    NodeDefinition(
        kind="rotate2d", label="Rotate 2D", category="Transforms",
        inputs=sockets(input=(DataType.VEC2, "Input"), angle=(DataType.FLOAT, "Angle")),
        outputs=sockets(output=(DataType.VEC2, "Output")),
        default_params={"angle": 0.0},
        helpers=(ROTATE_GLSL,),
        generate=_rotate2d,
    ),
    NodeDefinition(
        kind="scale2d", label="Scale 2D", category="Transforms",
        inputs=sockets(input=(DataType.VEC2, "Input"), scale=(DataType.FLOAT, "Scale")),
        outputs=sockets(output=(DataType.VEC2, "Output")),
        default_params={"scale": 1.0},
        generate=_scale2d,
    ),
    NodeDefinition(
        kind="offset2d", label="Offset 2D", category="Transforms",
        inputs=sockets(input=(DataType.VEC2, "Input"), offset=(DataType.VEC2, "Offset")),
        outputs=sockets(output=(DataType.VEC2, "Output")),
        generate=_offset2d,
    ),
)
