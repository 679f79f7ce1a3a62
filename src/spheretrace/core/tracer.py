"""Whitted-style ray tracer and rasterization kernel.

This module turns the intersection and lighting engines into pixels:

    trace_ray()       colour seen along one ray, including mirror reflections
    render_rows()     trace every pixel in a band of canvas rows into a buffer
    render_frame()    trace the whole canvas

Reflection is defined recursively: the colour at a hit is

    local * (1 - reflective) + trace_ray(reflected ray, depth - 1) * reflective

and the recursion stops at depth 0, at a non-reflective surface, or when a
ray escapes to the background. Taichi functions are inlined and cannot
recurse, so trace_ray() walks the same chain of bounces in a bounded loop,
carrying the remaining depth and the product of reflectivities seen so far
as the weight of the next bounce. No state outlives a call.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.camera.viewport import ViewportCamera, setup_camera
    >>> from spheretrace.core.tracer import render_frame
    >>> from spheretrace.preview.buffer import allocate_pixel_buffer
    >>> from spheretrace.scene.presets import create_reflective_scene
    >>>
    >>> scene, camera = create_reflective_scene()
    >>> setup_camera(camera)
    >>> buffer = allocate_pixel_buffer(256, 256)
    >>> render_frame(buffer, max_depth=3)
"""

import logging
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from spheretrace.camera.viewport import get_primary_ray
from spheretrace.core.lighting import SHADOW_EPSILON, compute_lighting
from spheretrace.core.vector import make_ray, ray_at, reflect_ray, vec3
from spheretrace.geometry.sphere import intersect_ray_sphere, sphere_normal
from spheretrace.scene.intersection import (
    closest_intersection,
    get_sphere,
    get_sphere_count,
)

if TYPE_CHECKING:
    from spheretrace.preview.buffer import PixelBuffer

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Default number of reflection bounces
MAX_DEPTH = 3

# Camera rays start at the viewport (t = 1), so nothing between the eye and
# the projection plane is drawn
PRIMARY_T_MIN = 1.0
T_MAX = float("inf")

# Colour of rays that escape the scene (white, RGB 0-255)
DEFAULT_BACKGROUND = (255.0, 255.0, 255.0)

# Largest canvas side accepted by the renderer
MAX_CANVAS_SIZE = 4096

# =============================================================================
# Background Colour
# =============================================================================

_background_color = ti.Vector.field(3, dtype=ti.f64, shape=())


def set_background_color(color: tuple[float, float, float]) -> None:
    """Set the colour returned for rays that hit nothing.

    Args:
        color: RGB colour, each channel in [0, 255].

    Raises:
        ValueError: If a channel is outside [0, 255].
    """
    for i, component in enumerate(color):
        if component < 0.0 or component > 255.0:
            raise ValueError(f"Background component {i} = {component} is outside [0, 255].")
    _background_color[None] = [color[0], color[1], color[2]]


def reset_background_color() -> None:
    """Restore the default white background."""
    set_background_color(DEFAULT_BACKGROUND)


def get_background_color() -> tuple[float, float, float]:
    """Get the current background colour."""
    c = _background_color[None]
    return (float(c[0]), float(c[1]), float(c[2]))


reset_background_color()


# =============================================================================
# Ray Tracing Core
# =============================================================================


@ti.func
def shade_local(sphere, point: vec3, normal: vec3, view: vec3) -> vec3:
    """Surface colour at a hit lit by every light, ignoring reflections."""
    intensity = compute_lighting(point, normal, view, sphere.specular)
    return tm.max(sphere.color * intensity, vec3(0.0, 0.0, 0.0))


@ti.func
def trace_ray(
    origin: vec3,
    direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
    depth: ti.i32,
) -> vec3:
    """Compute the colour seen along a ray.

    Args:
        origin: The starting point of the ray.
        direction: The ray direction (any non-zero length).
        t_min: Nearest accepted hit along the first ray.
        t_max: Farthest accepted hit along the first ray.
        depth: Number of mirror bounces still allowed. At 0 only local
            shading of the first hit is returned.

    Returns:
        Unclamped RGB colour (0-255 scale, may exceed 255).
    """
    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0

    ray_origin = origin
    ray_direction = direction
    near = t_min
    far = t_max
    remaining = depth

    # Each pass is one level of the reflection recursion
    active = 1
    for _ in range(ti.max(depth, 0) + 1):
        if active == 1:
            rec = closest_intersection(ray_origin, ray_direction, near, far)

            if rec.hit == 0:
                color += weight * _background_color[None]
                active = 0
            else:
                sphere = get_sphere(rec.sphere_index)
                point = ray_at(make_ray(ray_origin, ray_direction), rec.t)
                normal = sphere_normal(sphere, point)
                view = -ray_direction
                local = shade_local(sphere, point, normal, view)

                reflective = sphere.reflective
                if remaining <= 0 or reflective <= 0.0:
                    color += weight * local
                    active = 0
                else:
                    color += weight * (1.0 - reflective) * local
                    weight *= reflective

                    ray_origin = point
                    ray_direction = reflect_ray(view, normal)
                    near = SHADOW_EPSILON
                    far = tm.inf
                    remaining -= 1

    return color


# =============================================================================
# Pixel Output
# =============================================================================


@ti.func
def to_pixel_channels(color: vec3) -> vec3:
    """Round and clamp a colour to displayable [0, 255] channel values."""
    c = tm.clamp(ti.floor(color + 0.5), 0.0, 255.0)

    # Replace NaN with zero so a bad sample cannot poison the byte cast
    for k in ti.static(range(3)):
        if tm.isnan(c[k]):
            c[k] = 0.0
    return c


@ti.func
def put_pixel(
    pixels: ti.template(),
    canvas_width: ti.i32,
    canvas_height: ti.i32,
    px: ti.i32,
    py: ti.i32,
    color: vec3,
):
    """Write a colour at centered canvas coordinates.

    (px, py) has its origin at the canvas center with +y up; it is converted
    to top-left device coordinates here. Coordinates that land outside the
    canvas are silently skipped.
    """
    ix = canvas_width // 2 + px
    iy = canvas_height // 2 - py - 1

    if 0 <= ix < canvas_width and 0 <= iy < canvas_height:
        c = to_pixel_channels(color)
        pixels[iy, ix, 0] = ti.cast(c.x, ti.u8)
        pixels[iy, ix, 1] = ti.cast(c.y, ti.u8)
        pixels[iy, ix, 2] = ti.cast(c.z, ti.u8)
        pixels[iy, ix, 3] = ti.cast(255, ti.u8)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    pixels: ti.types.ndarray(dtype=ti.u8, ndim=3),
    canvas_width: ti.i32,
    canvas_height: ti.i32,
    row_start: ti.i32,
    row_end: ti.i32,
    max_depth: ti.i32,
):
    """Trace every pixel in device rows [row_start, row_end).

    Every pixel writes a distinct location, so the outer loop runs in
    parallel without synchronization.
    """
    for iy, ix in ti.ndrange((row_start, row_end), canvas_width):
        # Device row/column back to centered coordinates
        px = ix - canvas_width // 2
        py = canvas_height // 2 - iy - 1

        ray = get_primary_ray(px, py, canvas_width, canvas_height)
        color = trace_ray(ray.origin, ray.direction, PRIMARY_T_MIN, T_MAX, max_depth)
        put_pixel(pixels, canvas_width, canvas_height, px, py, color)


def check_canvas_size(width: int, height: int) -> None:
    """Raise ValueError unless 1 <= width, height <= MAX_CANVAS_SIZE."""
    if not (1 <= width <= MAX_CANVAS_SIZE and 1 <= height <= MAX_CANVAS_SIZE):
        raise ValueError(
            f"Canvas dimensions ({width}x{height}) must be between 1 and "
            f"{MAX_CANVAS_SIZE} pixels"
        )


def render_rows(
    buffer: "PixelBuffer",
    row_start: int,
    row_end: int,
    max_depth: int = MAX_DEPTH,
) -> None:
    """Render a band of device rows into a pixel buffer.

    Args:
        buffer: The destination buffer; its size is the canvas size.
        row_start: First device row (0 = top) to render.
        row_end: One past the last device row to render.
        max_depth: Reflection depth bound.
    """
    check_canvas_size(buffer.width, buffer.height)
    row_start = max(0, row_start)
    row_end = min(buffer.height, row_end)
    if row_start >= row_end:
        return
    _render_rows(buffer.data, buffer.width, buffer.height, row_start, row_end, max_depth)


def render_frame(buffer: "PixelBuffer", max_depth: int = MAX_DEPTH) -> None:
    """Render the complete canvas into a pixel buffer.

    Uses the scene, lights, camera and background currently configured.

    Args:
        buffer: The destination buffer.
        max_depth: Reflection depth bound.
    """
    logger.debug(
        "Rendering %dx%d frame (%d spheres, depth %d)",
        buffer.width,
        buffer.height,
        get_sphere_count(),
        max_depth,
    )
    render_rows(buffer, 0, buffer.height, max_depth)


# =============================================================================
# Python-callable Queries
# =============================================================================

# Each query kernel wraps its work in a single-iteration outer loop so that
# the sphere/light/bounce loops inside stay serial.

_trace_result = ti.Vector.field(3, dtype=ti.f64, shape=())
_hit_result = ti.field(dtype=ti.i32, shape=())
_t_result = ti.Vector.field(2, dtype=ti.f64, shape=())
_lighting_result = ti.field(dtype=ti.f64, shape=())


def _to_vec3(values: tuple[float, float, float]) -> vec3:
    return vec3(float(values[0]), float(values[1]), float(values[2]))


@ti.kernel
def _trace_ray_kernel(origin: vec3, direction: vec3, t_min: ti.f64, t_max: ti.f64, depth: ti.i32):
    for _ in range(1):
        _trace_result[None] = trace_ray(origin, direction, t_min, t_max, depth)


@ti.kernel
def _closest_intersection_kernel(origin: vec3, direction: vec3, t_min: ti.f64, t_max: ti.f64):
    for _ in range(1):
        rec = closest_intersection(origin, direction, t_min, t_max)
        _hit_result[None] = rec.sphere_index
        _t_result[None] = ti.Vector([rec.t, 0.0])


@ti.kernel
def _intersect_ray_sphere_kernel(origin: vec3, direction: vec3, index: ti.i32):
    for _ in range(1):
        t1, t2 = intersect_ray_sphere(origin, direction, get_sphere(index))
        _t_result[None] = ti.Vector([t1, t2])


@ti.kernel
def _compute_lighting_kernel(point: vec3, normal: vec3, view: vec3, specular: ti.f64):
    for _ in range(1):
        _lighting_result[None] = compute_lighting(point, normal, view, specular)


def trace_ray_color(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    t_min: float = PRIMARY_T_MIN,
    t_max: float = T_MAX,
    depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Trace a single ray from Python and return its unclamped colour.

    Intended for tests and debugging. For images use render_frame().
    """
    _trace_ray_kernel(_to_vec3(origin), _to_vec3(direction), t_min, t_max, depth)
    c = _trace_result[None]
    return (float(c[0]), float(c[1]), float(c[2]))


def closest_intersection_py(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    t_min: float,
    t_max: float,
) -> tuple[int | None, float]:
    """Run closest_intersection() from Python.

    Returns:
        (sphere_index, t) for a hit, or (None, inf) for a miss.
    """
    _closest_intersection_kernel(_to_vec3(origin), _to_vec3(direction), t_min, t_max)
    index = int(_hit_result[None])
    if index < 0:
        return None, float("inf")
    return index, float(_t_result[None][0])


def intersect_ray_sphere_py(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    sphere_index: int,
) -> tuple[float, float]:
    """Run intersect_ray_sphere() on a stored sphere from Python."""
    if not 0 <= sphere_index < get_sphere_count():
        raise ValueError(f"Invalid sphere index: {sphere_index}")
    _intersect_ray_sphere_kernel(_to_vec3(origin), _to_vec3(direction), sphere_index)
    roots = _t_result[None]
    return float(roots[0]), float(roots[1])


def compute_lighting_py(
    point: tuple[float, float, float],
    normal: tuple[float, float, float],
    view: tuple[float, float, float],
    specular: float,
) -> float:
    """Run compute_lighting() from Python and return the intensity."""
    _compute_lighting_kernel(_to_vec3(point), _to_vec3(normal), _to_vec3(view), specular)
    return float(_lighting_result[None])
