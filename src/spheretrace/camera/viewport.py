"""Viewport camera for canvas-to-world projection.

The camera sits at a fixed origin looking down +Z. In front of it, at the
projection distance d, is a virtual viewport of size Vw x Vh. A canvas pixel
at centered coordinates (px, py), where (0, 0) is the middle of the canvas
and +y points up, maps to the viewport point

    (px * Vw / Cw, py * Vh / Ch, d)

which is used directly as the (unnormalized) primary ray direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.camera.viewport import ViewportCamera, setup_camera
    >>> setup_camera(ViewportCamera())
    >>> # Use canvas_to_viewport / get_primary_ray within a Taichi kernel
"""

from dataclasses import dataclass

import taichi as ti

from spheretrace.core.vector import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class ViewportCamera:
    """Configuration for the viewport camera.

    Attributes:
        origin: Camera position in world space (x, y, z).
        viewport_width: Width of the virtual viewport in world units.
        viewport_height: Height of the virtual viewport in world units.
        projection_distance: Distance from the camera to the viewport.
    """

    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    viewport_width: float = 1.0
    viewport_height: float = 1.0
    projection_distance: float = 1.0

    def __post_init__(self) -> None:
        if self.viewport_width <= 0.0 or self.viewport_height <= 0.0:
            raise ValueError(
                f"Viewport size ({self.viewport_width}x{self.viewport_height}) must be positive"
            )
        if self.projection_distance <= 0.0:
            raise ValueError(
                f"Projection distance = {self.projection_distance} must be positive"
            )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())

# (viewport_width, viewport_height, projection_distance)
_viewport = ti.Vector.field(3, dtype=ti.f64, shape=())


def setup_camera(camera: ViewportCamera) -> None:
    """Store the camera configuration for use in kernels.

    Must be called before rendering; the reference camera
    (ViewportCamera()) is the origin with a 1x1 viewport at distance 1.

    Args:
        camera: The camera configuration.
    """
    _camera_origin[None] = [camera.origin[0], camera.origin[1], camera.origin[2]]
    _viewport[None] = [
        camera.viewport_width,
        camera.viewport_height,
        camera.projection_distance,
    ]


# =============================================================================
# Projection (Taichi-compatible)
# =============================================================================


@ti.func
def canvas_to_viewport(px: ti.i32, py: ti.i32, canvas_width: ti.i32, canvas_height: ti.i32) -> vec3:
    """Map centered canvas coordinates to a point on the viewport.

    Args:
        px: Horizontal pixel coordinate, 0 at the canvas center.
        py: Vertical pixel coordinate, 0 at the canvas center, +y up.
        canvas_width: Canvas width in pixels.
        canvas_height: Canvas height in pixels.

    Returns:
        The viewport point, usable as an unnormalized ray direction.
    """
    viewport = _viewport[None]
    return vec3(
        ti.cast(px, ti.f64) * viewport.x / ti.cast(canvas_width, ti.f64),
        ti.cast(py, ti.f64) * viewport.y / ti.cast(canvas_height, ti.f64),
        viewport.z,
    )


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera position in world space."""
    return _camera_origin[None]


@ti.func
def get_primary_ray(px: ti.i32, py: ti.i32, canvas_width: ti.i32, canvas_height: ti.i32) -> Ray:
    """Build the camera ray through centered canvas coordinates (px, py)."""
    return make_ray(
        get_camera_origin(),
        canvas_to_viewport(px, py, canvas_width, canvas_height),
    )


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with "origin" and "viewport" (width, height, distance).
    """
    origin_vec = _camera_origin[None]
    viewport_vec = _viewport[None]
    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "viewport": (
            float(viewport_vec[0]),
            float(viewport_vec[1]),
            float(viewport_vec[2]),
        ),
    }


def get_camera() -> ViewportCamera:
    """Read the currently configured camera back as a ViewportCamera."""
    info = get_camera_info()
    width, height, distance = info["viewport"]
    return ViewportCamera(
        origin=info["origin"],
        viewport_width=width,
        viewport_height=height,
        projection_distance=distance,
    )

