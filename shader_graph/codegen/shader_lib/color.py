# Color GLSL Functions

PALETTE_GLSL = """
vec3 palette(float t, vec3 a, vec3 b, vec3 c, vec3 d) {
    return a + b * cos(6.28318 * (c * t + d));
}
"""

GRADIENT_GLSL = """
vec3 gradientBlend(vec2 uv, vec3 colorA, vec3 colorB, int mode, float offset) {
    float t;
    if (mode == 0) { t = uv.x * 0.5 + 0.5; }
    else if (mode == 1) { t = uv.y * 0.5 + 0.5; }
    else if (mode == 2) { t = length(uv); }
    else if (mode == 3) { t = atan(uv.y, uv.x) / 6.28318 + 0.5; }
    else { t = (uv.x + uv.y) * 0.5 * 0.7071 + 0.5; }
    return mix(colorA, colorB, clamp(t + offset, 0.0, 1.0));
}
"""

TONEMAP_GLSL = """
vec3 toneACES(vec3 c) {
    return clamp((c * (2.51 * c + 0.03)) / (c * (2.43 * c + 0.59) + 0.14), 0.0, 1.0);
}
vec3 toneHable(vec3 x) {
    x *= 16.0;
    const float A = 0.15, B = 0.5, C = 0.1, D = 0.2, E = 0.02, F = 0.3;
    return ((x * (A * x + C * B) + D * E) / (x * (A * x + B) + D * F)) - E / F;
}
vec3 toneUnreal(vec3 c) { return c / (c + 0.155) * 1.019; }
vec3 toneTanh(vec3 c) {
    c = clamp(c, -40.0, 40.0);
    vec3 e = exp(c);
    vec3 em = exp(-c);
    return (e - em) / (e + em);
}
"""

GRAIN_GLSL = """
float grainRand(vec2 n) {
    return fract(sin(dot(n, vec2(12.9898, 4.1414))) * 43758.5453);
}
vec3 applyGrain(vec3 color, vec2 uv, float amount, float seed) {
    return clamp(color + vec3(
        mix(-amount, amount, fract(seed + grainRand(uv * 1234.5678))),
        mix(-amount, amount, fract(seed + grainRand(uv * 876.5432))),
        mix(-amount, amount, fract(seed + grainRand(uv * 3214.5678)))
    ), 0.0, 1.0);
}
"""

MAKE_LIGHT_GLSL = """
float make_light(float dist, float brightness) {
    brightness = clamp(brightness, 0.1, 100.0);
    return exp(-brightness * dist);
}
"""
