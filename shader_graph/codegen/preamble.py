# Fixed program text the host renderer pairs with every generated shader

from ..config import CompileOptions

# External symbols generated code may reference
U_RESOLUTION = "u_resolution"
U_TIME = "u_time"
U_MOUSE = "u_mouse"
V_UV = "vUv"

HOST_SYMBOLS = (U_RESOLUTION, U_TIME, U_MOUSE, V_UV, "PI", "TAU")

VERTEX_SHADER = """attribute vec2 position;
varying vec2 vUv;

void main() {
    vUv = position * 0.5 + 0.5;
    gl_Position = vec4(position, 0.0, 1.0);
}
"""


def fragment_preamble(options: CompileOptions) -> str:
    return "\n".join([
        f"precision {options.precision} float;",
        "",
        "#define PI 3.14159265359",
        "#define TAU 6.28318530718",
        "",
        f"uniform vec2 {U_RESOLUTION};",
        f"uniform float {U_TIME};",
        f"uniform vec2 {U_MOUSE};",
        "",
        f"varying vec2 {V_UV};",
    ])
