"""Camera module for primary ray generation.

Components:
    viewport: Fixed viewport camera looking down +Z

A canvas pixel (px, py), centered with +y up, maps to the viewport point
(px * Vw / Cw, py * Vh / Ch, d), which is the direction of its primary ray.
"""

from .viewport import (
    ViewportCamera,
    canvas_to_viewport,
    get_camera,
    get_camera_info,
    get_camera_origin,
    get_primary_ray,
    setup_camera,
)

__all__ = [
    "ViewportCamera",
    "setup_camera",
    "canvas_to_viewport",
    "get_primary_ray",
    "get_camera_origin",
    "get_camera_info",
    "get_camera",
]
