"""Geometry module for sphere primitives.

Components:
    sphere: Sphere structure and ray-sphere intersection

Ray-sphere intersection is a Taichi function (@ti.func) returning both roots
of the quadratic, or (inf, inf) when the ray misses.
"""

from .sphere import (
    NO_SPECULAR,
    Sphere,
    intersect_ray_sphere,
    make_sphere,
    sphere_normal,
)

__all__ = [
    "Sphere",
    "NO_SPECULAR",
    "intersect_ray_sphere",
    "make_sphere",
    "sphere_normal",
]
