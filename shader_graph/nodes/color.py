# Color nodes

from ..ir.types import DataType
from ..codegen.literals import format_fixed, format_float
from ..codegen.shader_lib import GRADIENT_GLSL, PALETTE_GLSL
from .base import NodeCode, NodeDefinition, param_int, param_str, param_vec, single, sockets, vec3_param

# name, a, b, c, d
PALETTE_PRESETS = (
    ("IQ Blue-Teal", (0.5, 0.5, 0.5), (0.5, 0.5, 0.5), (1.0, 1.0, 1.0), (0.0, 0.1, 0.2)),
    ("IQ Rainbow", (0.5, 0.5, 0.5), (0.5, 0.5, 0.5), (1.0, 1.0, 1.0), (0.0, 0.33, 0.67)),
    ("IQ Warm", (0.5, 0.5, 0.5), (0.5, 0.5, 0.5), (1.0, 1.0, 1.0), (0.3, 0.2, 0.2)),
    ("IQ Lemon", (0.5, 0.5, 0.5), (0.5, 0.5, 0.5), (1.0, 1.0, 0.5), (0.8, 0.9, 0.3)),
    ("Sunset", (0.5, 0.5, 0.5), (0.4431, 0.4235, 0.4235), (1.0, 0.7, 0.4), (0.0, 0.15, 0.2)),
    ("Fire", (0.5, 0.5, 0.5), (0.4431, 0.4235, 0.4235), (2.0, 1.0, 0.0), (0.5, 0.2, 0.25)),
    ("Forest", (0.8, 0.5, 0.4), (0.2, 0.4, 0.2), (2.0, 1.0, 1.0), (0.0, 0.25, 0.25)),
    ("Purple Haze", (0.721, 0.328, 0.542), (0.659, 0.181, 0.896), (0.612, 0.14, 0.196), (0.538, 0.978, 0.7)),
    ("Deep Purple", (0.412, 0.102, 0.491), (0.397, 0.13, 0.485), (0.612, 0.14, 0.196), (0.538, 0.978, 0.7)),
    ("Psychedelic", (0.412, 0.202, 0.491), (0.397, 0.13, 0.485), (1.147, 1.557, 1.197), (1.956, 5.039, 2.541)),
)

GRADIENT_MODES = {"linear_x": 0, "linear_y": 1, "radial": 2, "angular": 3, "diagonal": 4}

_PALETTE_DEFAULTS = {
    "a": (0.5, 0.5, 0.5),
    "b": (0.5, 0.5, 0.5),
    "c": (1.0, 1.0, 1.0),
    "d": (0.0, 0.33, 0.67),
}


def _palette(node, inputs, names):
    # Each coefficient channel can be wired individually (a_r, a_g, ...)
    coeffs = []
    for key, default in _PALETTE_DEFAULTS.items():
        values = param_vec(node, key, default)
        comps = []
        for channel, value in zip("rgb", values):
            socket = node.inputs.get(f"{key}_{channel}")
            if socket is not None and socket.connection is not None:
                comps.append(inputs[f"{key}_{channel}"])
            else:
                comps.append(format_float(value))
        coeffs.append(f"vec3({','.join(comps)})")
    return single(names, DataType.VEC3, "color", f"palette({inputs['t']}, {', '.join(coeffs)})")


def _palette_preset(node, inputs, names):
    index = param_int(node, "preset", 1)
    if not 0 <= index < len(PALETTE_PRESETS):
        index = min(max(index, 0), len(PALETTE_PRESETS) - 1)
    _, a, b, c, d = PALETTE_PRESETS[index]

    def vec(v):
        return "vec3(" + ",".join(format_fixed(x, 6) for x in v) + ")"

    var = names.var("color")
    return NodeCode([
        f"vec3 {var};",
        "{",
        f"    vec3 _pa = {vec(a)}; vec3 _pb = {vec(b)};",
        f"    vec3 _pc = {vec(c)}; vec3 _pd = {vec(d)};",
        f"    {var} = _pa + _pb * cos(6.283185 * (_pc * {inputs['t']} + _pd));",
        "}",
    ], {"color": var})


def _gradient(node, inputs, names):
    mode = GRADIENT_MODES.get(param_str(node, "mode", "linear_x"), 0)
    colors = []
    for key, default in (("color_a", (1.0, 0.2, 0.2)), ("color_b", (0.2, 0.2, 1.0))):
        socket = node.inputs.get(key)
        if socket is not None and socket.connection is not None:
            colors.append(inputs[key])
        else:
            colors.append(vec3_param(node, key, default))
    return single(names, DataType.VEC3, "color",
                  f"gradientBlend({inputs['uv']}, {colors[0]}, {colors[1]}, {mode}, {inputs['t_offset']})")


_PALETTE_CHANNELS = {
    f"{key}_{channel}": (DataType.FLOAT, f"{key}.{channel}")
    for key in _PALETTE_DEFAULTS for channel in "rgb"
}

DEFINITIONS = (
    NodeDefinition(
        kind="palette", label="Palette", category="Color",
        description="Cosine palette a + b * cos(2pi * (c * t + d)).",
        inputs=sockets(t=(DataType.FLOAT, "T"), **_PALETTE_CHANNELS),
        outputs=sockets(color=(DataType.VEC3, "Color")),
        default_params={key: list(value) for key, value in _PALETTE_DEFAULTS.items()},
        helpers=(PALETTE_GLSL,),
        generate=_palette,
    ),
    NodeDefinition(
        kind="palettePreset", label="Palette Preset", category="Color",
        inputs=sockets(t=(DataType.FLOAT, "T")),
        outputs=sockets(color=(DataType.VEC3, "Color")),
        default_params={"preset": "1"},
        generate=_palette_preset,
    ),
    NodeDefinition(
        kind="gradient", label="Gradient", category="Color",
        inputs=sockets(uv=(DataType.VEC2, "UV"), color_a=(DataType.VEC3, "Color A"),
                       color_b=(DataType.VEC3, "Color B"), t_offset=(DataType.FLOAT, "T Offset")),
        outputs=sockets(color=(DataType.VEC3, "Color")),
        default_params={"mode": "linear_x", "color_a": [1.0, 0.2, 0.2],
                        "color_b": [0.2, 0.2, 1.0], "t_offset": 0.0},
        helpers=(GRADIENT_GLSL,),
        generate=_gradient,
    ),
)
