# Shader GLSL Library Package
# Re-exports the shared helper sources node generators register

from .noise import NOISE_HASH_GLSL, FBM_GLSL, VORONOI_GLSL
from .color import PALETTE_GLSL, GRADIENT_GLSL, TONEMAP_GLSL, GRAIN_GLSL, MAKE_LIGHT_GLSL
from .sdf import CIRCLE_SDF_GLSL, BOX_SDF_GLSL, RING_SDF_GLSL, SMIN_GLSL, ROTATE_GLSL, CHLADNI_GLSL

__all__ = [
    'NOISE_HASH_GLSL',
    'FBM_GLSL',
    'VORONOI_GLSL',
    'PALETTE_GLSL',
    'GRADIENT_GLSL',
    'TONEMAP_GLSL',
    'GRAIN_GLSL',
    'MAKE_LIGHT_GLSL',
    'CIRCLE_SDF_GLSL',
    'BOX_SDF_GLSL',
    'RING_SDF_GLSL',
    'SMIN_GLSL',
    'ROTATE_GLSL',
    'CHLADNI_GLSL',
]
