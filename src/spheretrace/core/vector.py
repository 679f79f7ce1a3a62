"""Ray data structure and Vector3 utilities.

The same ``vec3`` type is used for three different things throughout the
renderer: points in world space, directions (rays, normals, light vectors),
and RGB colours in the 0-255 range. Colour channels may exceed 255 while
shading and are only clamped when they are written to a pixel buffer.

All helpers are Taichi functions and are meant to be called from kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.core.vector import Ray, ray_at, vec3
    >>> @ti.kernel
    ... def point_along() -> vec3:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, 1.0))
    ...     return ray_at(ray, 3.0)
"""

import taichi as ti
import taichi.math as tm

# Points, directions and colours. Double precision: in f32 the roots of a
# very large sphere (radius 5000) cancel to garbage near the horizon.
vec3 = ti.types.vector(3, ti.f64)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Camera rays are
            deliberately left unnormalized; every consumer is invariant to
            the direction's length.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


# =============================================================================
# Vector3 Operations
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Componentwise sum a + b."""
    return a + b


@ti.func
def subtract(a: vec3, b: vec3) -> vec3:
    """Componentwise difference a - b."""
    return a - b


@ti.func
def scale(v: vec3, k: ti.f64) -> vec3:
    """Multiply every component of v by the scalar k."""
    return v * k


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector.

    The zero vector has length 0; callers must check before dividing by it.
    """
    return ti.sqrt(tm.dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    A zero-length input is an invariant violation (for example a sphere
    normal computed at the sphere's own center). The assert only fires when
    Taichi runs with ``debug=True``.

    Args:
        v: The input vector. Must not be zero-length.

    Returns:
        A unit vector in the same direction as v.
    """
    n = length(v)
    assert n > 0.0, "normalize() called on a zero-length vector"
    return v / n


@ti.func
def reflect_ray(v: vec3, normal: vec3) -> vec3:
    """Reflect a vector about a normal.

    Unlike the usual "incident" convention, v points *away* from the surface
    (toward a light, or back toward the viewer), and so does the result:

        R = 2 * (N . v) * N - v

    Args:
        v: The vector to mirror, pointing away from the surface.
        normal: The surface normal (unit length).

    Returns:
        The mirrored vector.
    """
    return 2.0 * tm.dot(normal, v) * normal - v
