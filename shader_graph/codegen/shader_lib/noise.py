# Noise GLSL Functions
# Value noise primitives are a separate snippet so FBM and Voronoi can share
# them without redefining symbols.

NOISE_HASH_GLSL = """
vec2 noiseHash2(vec2 p) {
    p = vec2(dot(p, vec2(127.1, 311.7)), dot(p, vec2(269.5, 183.3)));
    return -1.0 + 2.0 * fract(sin(p) * 43758.5453123);
}
float noiseHash1(vec2 p) {
    return fract(sin(dot(p, vec2(127.1, 311.7))) * 43758.5453123);
}
float valueNoise(vec2 p) {
    vec2 i = floor(p);
    vec2 f = fract(p);
    vec2 u = f * f * (3.0 - 2.0 * f);
    return mix(mix(noiseHash1(i + vec2(0.0, 0.0)),
                   noiseHash1(i + vec2(1.0, 0.0)), u.x),
               mix(noiseHash1(i + vec2(0.0, 1.0)),
                   noiseHash1(i + vec2(1.0, 1.0)), u.x), u.y);
}
"""

FBM_GLSL = """
float fbm(vec2 p, int octaves, float lacunarity, float gain) {
    float value = 0.0;
    float amp = 0.5;
    float freq = 1.0;
    for (int i = 0; i < 8; i++) {
        if (i >= octaves) break;
        value += amp * valueNoise(p * freq);
        amp *= gain;
        freq *= lacunarity;
    }
    return value;
}
"""

VORONOI_GLSL = """
float voronoi(vec2 p, float jitter) {
    vec2 i = floor(p);
    vec2 f = fract(p);
    float minDist = 8.0;
    for (int y = -1; y <= 1; y++) {
        for (int x = -1; x <= 1; x++) {
            vec2 neighbor = vec2(float(x), float(y));
            vec2 point = noiseHash2(i + neighbor);
            point = 0.5 + 0.5 * sin(jitter * 6.2831853 * point);
            minDist = min(minDist, length(neighbor + point - f));
        }
    }
    return minDist;
}
"""
