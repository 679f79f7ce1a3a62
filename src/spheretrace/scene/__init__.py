"""Scene module for sphere and light storage.

Components:
    intersection: Sphere storage and closest-hit queries
    lights: Ambient, point and directional light storage
    manager: SceneManager for building and serializing scenes
    presets: Ready-made demonstration scenes

Scene data lives in module-level Taichi fields (Structure-of-Arrays), so
only one scene is active at a time.
"""

from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    closest_intersection,
    get_sphere_count,
)
from .lights import (
    MAX_LIGHTS,
    LightType,
    add_ambient_light,
    add_directional_light,
    add_point_light,
    clear_lights,
    get_light_count,
)

# Note: manager and presets are NOT imported here to avoid circular imports
# (they depend on core.tracer). Import them directly, e.g.:
#   from spheretrace.scene.manager import SceneManager
#   from spheretrace.scene.presets import create_reflective_scene

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "closest_intersection",
    "get_sphere_count",
    "MAX_SPHERES",
    # Lights module
    "LightType",
    "add_ambient_light",
    "add_point_light",
    "add_directional_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
]
