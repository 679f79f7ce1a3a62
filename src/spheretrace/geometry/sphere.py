"""Sphere primitive and ray-sphere intersection.

A sphere carries its own shading parameters: a colour in the 0-255 range, a
specular exponent (-1 for a purely diffuse surface) and a reflectivity in
[0, 1] that controls how much of the mirrored scene is blended in.

The intersection routine returns *both* roots of the ray-sphere quadratic
without filtering them; range selection is the caller's job so that the same
routine serves primary rays, reflection rays and shadow rays.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.geometry.sphere import Sphere, intersect_ray_sphere, vec3
    >>> @ti.kernel
    ... def roots() -> vec3:
    ...     s = Sphere(center=vec3(0, 0, 3), radius=1.0)
    ...     t1, t2 = intersect_ray_sphere(vec3(0, 0, 0), vec3(0, 0, 1), s)
    ...     return vec3(t1, t2, 0.0)
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.vector import normalize, vec3

# Specular exponent marking a non-shiny material
NO_SPECULAR = -1.0


@ti.dataclass
class Sphere:
    """A sphere with its surface properties.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
        color: Surface colour, RGB with each channel in [0, 255].
        specular: Specular exponent; -1 disables the highlight.
        reflective: Fraction of mirrored colour blended in, in [0, 1].
    """

    center: vec3
    radius: ti.f64
    color: vec3
    specular: ti.f64
    reflective: ti.f64


@ti.func
def intersect_ray_sphere(origin: vec3, direction: vec3, sphere: Sphere):
    """Solve |origin + t * direction - center|^2 = radius^2 for t.

    Expanding gives a*t^2 + b*t + c = 0 with:
        a = D . D
        b = 2 * (O - C) . D
        c = (O - C) . (O - C) - r^2

    The direction does not need to be normalized.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector of the ray.
        sphere: The sphere to test against.

    Returns:
        A tuple (t1, t2) of the two roots in no particular order, or
        (inf, inf) when the discriminant is negative (the ray misses).
    """
    co = origin - sphere.center

    a = tm.dot(direction, direction)
    b = 2.0 * tm.dot(co, direction)
    c = tm.dot(co, co) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c

    t1 = tm.inf
    t2 = tm.inf
    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t1 = (-b + sqrt_d) / (2.0 * a)
        t2 = (-b - sqrt_d) / (2.0 * a)

    return t1, t2


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Unit outward normal of the sphere at a point on its surface."""
    return normalize(point - sphere.center)


@ti.func
def make_sphere(
    center: vec3,
    radius: ti.f64,
    color: vec3,
    specular: ti.f64,
    reflective: ti.f64,
) -> Sphere:
    """Create a sphere inside a Taichi kernel."""
    return Sphere(
        center=center,
        radius=radius,
        color=color,
        specular=specular,
        reflective=reflective,
    )
