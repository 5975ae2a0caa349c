# Signed distance and 2D transform GLSL Functions

CIRCLE_SDF_GLSL = """
float circleSDF(vec2 point, float size) {
    return length(point) - size;
}
"""

BOX_SDF_GLSL = """
float boxSDF(in vec2 position, in vec2 dimensions) {
    vec2 d = abs(position) - dimensions;
    return length(max(d, 0.0)) + min(max(d.x, d.y), 0.0);
}
"""

RING_SDF_GLSL = """
float ringSDF(vec2 point, float size) {
    return abs(length(point) - size);
}
"""

SMIN_GLSL = """
float smin(float a, float b, float k) {
    float h = max(k - abs(a - b), 0.0) / k;
    return min(a, b) - h * h * h * k * (1.0 / 6.0);
}
"""

ROTATE_GLSL = """
vec2 rotate(vec2 v, float angle) {
    return vec2(
        v.x * cos(angle) - v.y * sin(angle),
        v.x * sin(angle) + v.y * cos(angle)
    );
}
"""

CHLADNI_GLSL = """
float chladni(vec2 p, float m, float n) {
    return cos(n * 3.14159265 * p.x) * cos(m * 3.14159265 * p.y)
         - cos(m * 3.14159265 * p.x) * cos(n * 3.14159265 * p.y);
}
"""
