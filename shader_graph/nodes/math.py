# Math nodes
#
# Most math kinds are one declaration of a formula over their inputs; they
# are built from small templates below rather than one function each.

from ..ir.types import DataType
from .base import NodeDefinition, SocketSchema, f, single, sockets

FLOAT, VEC2, VEC3 = DataType.FLOAT, DataType.VEC2, DataType.VEC3


def _formula(out_key, out_type, template):
    def generate(node, inputs, names):
        return single(names, out_type, out_key, template.format(**inputs))
    return generate


def _math(kind, label, template, inputs, out_key="result", out_type=FLOAT,
          defaults=None, description=""):
    return NodeDefinition(
        kind=kind, label=label, category="Math", description=description,
        inputs=sockets(**inputs),
        outputs=sockets(**{out_key: (out_type, out_key.title())}),
        default_params=defaults or {},
        generate=_formula(out_key, out_type, template),
    )


def _wave(fn):
    def generate(node, inputs, names):
        expr = f"{f(node, 'amplitude', 1.0)} * {fn}({inputs['input']} * {f(node, 'frequency', 1.0)})"
        return single(names, FLOAT, "output", expr)
    return generate


def _length(node, inputs, names):
    return single(names, FLOAT, "output", f"length({inputs['input']}) * {f(node, 'scale', 1.0)}")


def _clamp(node, inputs, names):
    return single(names, FLOAT, "result",
                  f"clamp({inputs['input']}, {f(node, 'min', 0.0)}, {f(node, 'max', 1.0)})")


def _smoothstep(node, inputs, names):
    return single(names, FLOAT, "result",
                  f"smoothstep({f(node, 'edge0', 0.0)}, {f(node, 'edge1', 1.0)}, {inputs['value']})")


_ONE = SocketSchema(FLOAT, "A", 1.0)

DEFINITIONS = (
    _math("add", "Add", "{a} + {b}", dict(a=FLOAT, b=FLOAT), defaults={"b": 0.0}),
    _math("subtract", "Subtract", "{a} - {b}", dict(a=FLOAT, b=FLOAT), defaults={"b": 0.0}),
    _math("multiply", "Multiply", "{a} * {b}", dict(a=_ONE, b=FLOAT), defaults={"b": 1.0}),
    _math("divide", "Divide", "{a} / max({b}, 0.0001)", dict(a=FLOAT, b=FLOAT), defaults={"b": 1.0}),
    _math("pow", "Pow", "pow(max({base}, 0.0), {exponent})",
          dict(base=SocketSchema(FLOAT, "Base", 1.0), exponent=FLOAT), defaults={"exponent": 2.0}),
    _math("max", "Max", "max({a}, {b})", dict(a=FLOAT, b=FLOAT), defaults={"b": 0.0}),
    _math("mix", "Mix", "mix({a}, {b}, {t})",
          dict(a=FLOAT, b=SocketSchema(FLOAT, "B", 1.0), t=FLOAT), defaults={"t": 0.5}),
    _math("mod", "Mod", "mod({input}, {period})", dict(input=FLOAT, period=FLOAT),
          out_key="output", defaults={"period": 1.0}),
    _math("atan2", "Atan2", "atan({y}, {x})", dict(y=FLOAT, x=SocketSchema(FLOAT, "X", 1.0)),
          out_key="angle"),
    _math("negate", "Negate", "-({input})", dict(input=FLOAT), out_key="output"),
    _math("abs", "Abs", "abs({input})", dict(input=FLOAT), out_key="output"),
    _math("floor", "Floor", "floor({input})", dict(input=FLOAT), out_key="output"),
    _math("ceil", "Ceil", "ceil({input})", dict(input=FLOAT), out_key="output"),
    _math("sqrt", "Sqrt", "sqrt(max({input}, 0.0))", dict(input=FLOAT), out_key="output"),
    _math("fractRaw", "Fract (scalar)", "fract({input})", dict(input=FLOAT), out_key="output"),
    _math("exp", "Exp", "exp({input} * {scale})", dict(input=FLOAT, scale=FLOAT),
          out_key="output", defaults={"scale": 1.0}),
    _math("dot", "Dot", "dot({a}, {b})", dict(a=VEC2, b=VEC2)),
    _math("makeVec2", "Make Vec2", "vec2({x}, {y})", dict(x=FLOAT, y=FLOAT),
          out_key="xy", out_type=VEC2, defaults={"x": 0.0, "y": 0.0}),
    _math("extractX", "Extract X", "{input}.x", dict(input=VEC2), out_key="x"),
    _math("extractY", "Extract Y", "{input}.y", dict(input=VEC2), out_key="y"),
    _math("makeVec3", "Make Vec3", "vec3({r}, {g}, {b})", dict(r=FLOAT, g=FLOAT, b=FLOAT),
          out_key="rgb", out_type=VEC3, defaults={"r": 0.0, "g": 0.0, "b": 0.0}),
    _math("floatToVec3", "Float to Color", "vec3({input})", dict(input=FLOAT),
          out_key="rgb", out_type=VEC3),
    _math("multiplyVec3", "Scale Color", "{color} * {intensity}",
          dict(color=VEC3, intensity=FLOAT), out_key="color", out_type=VEC3,
          defaults={"intensity": 1.0}),
    _math("addVec3", "Add Colors", "{a} + {b}", dict(a=VEC3, b=VEC3), out_key="color", out_type=VEC3),
    _math("addVec2", "Add Vec2", "{a} + {b}", dict(a=VEC2, b=VEC2), out_key="result", out_type=VEC2),
    _math("multiplyVec2", "Scale Vec2", "{input} * {scale}", dict(input=VEC2, scale=FLOAT),
          out_key="result", out_type=VEC2, defaults={"scale": 1.0}),
    _math("normalizeVec2", "Normalize Vec2", "normalize({input} + vec2(1e-6))", dict(input=VEC2),
          out_key="result", out_type=VEC2),
    NodeDefinition(
        kind="sin", label="Sin", category="Math", description="amplitude * sin(input * frequency)",
        inputs=sockets(input=FLOAT), outputs=sockets(output=(FLOAT, "Output")),
        default_params={"amplitude": 1.0, "frequency": 1.0},
        generate=_wave("sin"),
    ),
    NodeDefinition(
        kind="cos", label="Cos", category="Math", description="amplitude * cos(input * frequency)",
        inputs=sockets(input=FLOAT), outputs=sockets(output=(FLOAT, "Output")),
        default_params={"amplitude": 1.0, "frequency": 1.0},
        generate=_wave("cos"),
    ),
    NodeDefinition(
        kind="length", label="Length", category="Math",
        inputs=sockets(input=VEC2), outputs=sockets(output=(FLOAT, "Output")),
        default_params={"scale": 1.0},
        generate=_length,
    ),
    NodeDefinition(
        kind="clamp", label="Clamp", category="Math",
        inputs=sockets(input=FLOAT), outputs=sockets(result=(FLOAT, "Result")),
        default_params={"min": 0.0, "max": 1.0},
        generate=_clamp,
    ),
    NodeDefinition(
        kind="smoothstep", label="Smoothstep", category="Math",
        inputs=sockets(value=FLOAT), outputs=sockets(result=(FLOAT, "Result")),
        default_params={"edge0": 0.0, "edge1": 1.0},
        generate=_smoothstep,
    ),
)
