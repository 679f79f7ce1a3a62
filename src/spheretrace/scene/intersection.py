"""Scene-level sphere storage and closest-hit queries.

Spheres are stored in Taichi fields so kernels can read them directly. The
scene is built from Python (add_sphere / clear_scene) before a render and is
only read while a kernel runs.

closest_intersection() is shared by camera rays, reflection rays and shadow
rays; callers only differ in the [t_min, t_max] range they pass.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, -1.0, 3.0), 1.0, color=(255.0, 0.0, 0.0))
    0
    >>> # Use closest_intersection within a Taichi kernel
"""

import logging

import taichi as ti
import taichi.math as tm

from spheretrace.core.vector import vec3
from spheretrace.geometry.sphere import NO_SPECULAR, Sphere, intersect_ray_sphere

logger = logging.getLogger(__name__)


@ti.dataclass
class SceneHitRecord:
    """Result of a closest-hit query against the scene.

    Attributes:
        hit: 1 if any sphere was hit within range, 0 otherwise.
        t: The ray parameter of the nearest hit. Only valid if hit == 1.
        sphere_index: Index of the nearest sphere, or -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    sphere_index: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_speculars = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_reflectives = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def validate_sphere(
    radius: float,
    color: tuple[float, float, float],
    specular: float,
    reflective: float,
) -> None:
    """Check sphere parameters before they are stored.

    Raises:
        ValueError: If the radius is not positive, a colour channel lies
            outside [0, 255], the specular exponent is neither -1 nor
            positive, or the reflectivity lies outside [0, 1].
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius = {radius} must be positive.")
    for i, component in enumerate(color):
        if component < 0.0 or component > 255.0:
            raise ValueError(f"Color component {i} = {component} is outside [0, 255].")
    if specular != NO_SPECULAR and specular <= 0.0:
        raise ValueError(f"Specular exponent = {specular} must be -1 or positive.")
    if reflective < 0.0 or reflective > 1.0:
        raise ValueError(f"Reflectivity = {reflective} is outside [0, 1].")


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. The field data is not cleared but will
    be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float] = (255.0, 255.0, 255.0),
    specular: float = NO_SPECULAR,
    reflective: float = 0.0,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        color: Surface colour as (R, G, B), each in [0, 255].
        specular: Specular exponent, or -1 for a diffuse surface.
        reflective: Reflectivity in [0, 1].

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the parameters are out of range.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    validate_sphere(radius, color, specular, reflective)

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    sphere_colors[idx] = [color[0], color[1], color[2]]
    sphere_speculars[idx] = specular
    sphere_reflectives[idx] = reflective
    num_spheres[None] = idx + 1

    logger.debug("Added sphere %d at %s (r=%s)", idx, center, radius)
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    """Assemble the stored sphere at index into a Sphere record."""
    return Sphere(
        center=sphere_centers[index],
        radius=sphere_radii[index],
        color=sphere_colors[index],
        specular=sphere_speculars[index],
        reflective=sphere_reflectives[index],
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(hit=0, t=tm.inf, sphere_index=-1)


@ti.func
def closest_intersection(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
) -> SceneHitRecord:
    """Find the nearest sphere hit with t in [t_min, t_max].

    Both roots of every sphere are considered. A root only replaces the
    current best when it is strictly smaller, so equal distances resolve to
    whichever sphere comes first in scene order.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (any length).
        t_min: Minimum t value to accept (inclusive).
        t_max: Maximum t value to accept (inclusive).

    Returns:
        A SceneHitRecord for the closest hit, or a miss record.
    """
    result = _make_miss_record()
    closest_t = tm.inf

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        t1, t2 = intersect_ray_sphere(ray_origin, ray_direction, get_sphere(i))

        if t_min <= t1 and t1 <= t_max and t1 < closest_t:
            closest_t = t1
            result = SceneHitRecord(hit=1, t=t1, sphere_index=i)
        if t_min <= t2 and t2 <= t_max and t2 < closest_t:
            closest_t = t2
            result = SceneHitRecord(hit=1, t=t2, sphere_index=i)

    return result
