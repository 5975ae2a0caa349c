# Physics visualizations

from ..ir.types import DataType
from ..codegen.literals import format_float
from ..codegen.shader_lib import CHLADNI_GLSL
from .base import NodeCode, NodeDefinition, f, param_float, param_str, sockets

NOISE_MODES = ("smooth", "swirl", "jump")


def _turbulence(node, inputs, names, p):
    amount = param_float(node, "turbulence", 0.0)
    if amount <= 0.0:
        return []
    time, speed, turb = inputs["time"], f(node, "turb_speed", 0.5), format_float(amount)
    nx, ny = names.var("nx"), names.var("ny")
    mode = param_str(node, "noise_mode", "smooth")
    if mode == "jump":
        qt = names.var("qt")
        return [
            f"float {qt} = floor({time} * {speed}) / {speed};",
            f"float {nx} = fract(sin(dot({p} * 4.0 + {qt}, vec2(127.1, 311.7))) * 43758.5453);",
            f"float {ny} = fract(sin(dot({p} * 4.0 + {qt} + vec2(5.2, 1.3), vec2(269.5, 183.3))) * 43758.5453);",
            f"{p} += (vec2({nx}, {ny}) * 2.0 - 1.0) * {turb};",
        ]
    lines = [
        f"float {nx} = fract(sin(dot({p} * 3.0 + {time} * {speed}, vec2(127.1, 311.7))) * 43758.5453);",
        f"float {ny} = fract(sin(dot({p} * 3.0 + {time} * {speed} + vec2(5.2, 1.3), vec2(269.5, 183.3))) * 43758.5453);",
    ]
    if mode == "swirl":
        # Perpendicular to the hash gradient
        lines.append(f"{p} += vec2({ny}, -{nx}) * {turb};")
    else:
        lines.append(f"{p} += (vec2({nx}, {ny}) * 2.0 - 1.0) * {turb};")
    return lines


def _chladni(node, inputs, names):
    p, field, density, color = names.var("p"), names.var("field"), names.var("density"), names.var("color")
    scale = format_float(min(param_float(node, "scale", 1.0), 1.5))
    width = format_float(param_float(node, "line_width", 1.5) * 0.02 * max(param_float(node, "aa", 1.0), 0.01))
    statements = [f"vec2 {p} = {inputs['uv']} * {scale};"]
    statements += _turbulence(node, inputs, names, p)
    statements += [
        f"float {field} = chladni({p}, {inputs['m']}, {inputs['n']});",
        f"float {density} = 1.0 - smoothstep(0.0, {width}, abs({field}));",
        f"vec3 {color} = vec3({density} * {f(node, 'brightness', 1.0)});",
    ]
    return NodeCode(statements, {"density": density, "field": field, "color": color})


DEFINITIONS = (
    NodeDefinition(
        kind="chladni", label="Chladni Plate", category="Physics",
        description="Nodal lines of a vibrating plate: cos(n pi x) cos(m pi y) - cos(m pi x) cos(n pi y).",
        inputs=sockets(uv=(DataType.VEC2, "UV"), time=(DataType.FLOAT, "Time"),
                       m=(DataType.FLOAT, "m"), n=(DataType.FLOAT, "n")),
        outputs=sockets(density=(DataType.FLOAT, "Density"), field=(DataType.FLOAT, "Raw Field"),
                        color=(DataType.VEC3, "Color")),
        default_params={"m": 3.0, "n": 4.0, "scale": 1.0, "line_width": 1.5, "aa": 1.0,
                        "turbulence": 0.0, "turb_speed": 0.5, "noise_mode": "smooth",
                        "brightness": 1.0},
        helpers=(CHLADNI_GLSL,),
        generate=_chladni,
    ),
)
