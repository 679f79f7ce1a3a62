"""Core rendering module.

Components:
    vector: vec3 type, Ray structure and vector arithmetic
    lighting: Light accumulation with shadows and specular highlights
    tracer: Reflective ray tracing and the per-pixel render kernel
    renderer: Frame renderer with progress reporting and presentation

All compute-intensive operations use Taichi kernels.
"""

from .vector import (
    Ray,
    add,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect_ray,
    scale,
    subtract,
    vec3,
)

# Note: lighting, tracer and renderer are NOT imported here to avoid circular
# imports. Import them directly, e.g.:
#   from spheretrace.core.renderer import Renderer

__all__ = [
    "Ray",
    "make_ray",
    "ray_at",
    "vec3",
    "dot",
    "add",
    "subtract",
    "scale",
    "length",
    "length_squared",
    "normalize",
    "reflect_ray",
]
