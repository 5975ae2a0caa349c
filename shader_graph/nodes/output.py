# Sink nodes: the single node that writes gl_FragColor

from ..ir.types import DataType
from ..codegen.literals import cast_expr
from .base import NodeCode, NodeDefinition, sockets

OUTPUT = "output"
VEC4_OUTPUT = "vec4Output"
SINK_KINDS = (OUTPUT, VEC4_OUTPUT)


def _write(node, inputs, names):
    # Preview sinks retype `color` to whatever the previewed output is
    socket = node.inputs.get("color")
    src = socket.type if socket is not None else DataType.VEC3
    return NodeCode([f"gl_FragColor = {cast_expr(inputs['color'], src, DataType.VEC4)};"], {})


DEFINITIONS = (
    NodeDefinition(
        kind=OUTPUT, label="Output", category="Output",
        inputs=sockets(color=(DataType.VEC3, "Color")),
        generate=_write,
        is_sink=True,
    ),
    NodeDefinition(
        kind=VEC4_OUTPUT, label="Output (RGBA)", category="Output",
        inputs=sockets(color=(DataType.VEC4, "Color")),
        generate=_write,
        is_sink=True,
    ),
)
