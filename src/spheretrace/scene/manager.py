"""High-level scene management.

SceneManager wraps the field-backed sphere and light registries with a
Python-side record of everything added, so a scene can be inspected,
exported to plain dictionaries and rebuilt from them.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere((0, -1, 3), 1.0, color=(255, 0, 0), specular=500, reflective=0.2)
    0
    >>> scene.add_ambient_light(0.2)
    0
    >>> scene.add_point_light(0.6, position=(2, 1, 0))
    1
    >>> config = scene.to_dict()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from spheretrace.core.tracer import get_background_color, set_background_color
from spheretrace.geometry.sphere import NO_SPECULAR
from spheretrace.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)
from spheretrace.scene.lights import (
    MAX_LIGHTS,
    LightType,
    add_ambient_light,
    add_directional_light,
    add_point_light,
    clear_lights,
    get_light_count,
)

logger = logging.getLogger(__name__)


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        color: Surface colour as (R, G, B) in [0, 255].
        specular: Specular exponent, -1 for none.
        reflective: Reflectivity in [0, 1].
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    color: tuple[float, float, float]
    specular: float
    reflective: float


@dataclass
class LightInfo:
    """Information about a light in the scene.

    Attributes:
        light_index: The index in the light storage arrays.
        kind: Ambient, point or directional.
        intensity: Scalar intensity.
        position: Light position (point lights only).
        direction: Light direction (directional lights only).
    """

    light_index: int
    kind: LightType
    intensity: float
    position: tuple[float, float, float] | None = None
    direction: tuple[float, float, float] | None = None


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations.
        lights: List of light configurations.
        background: Optional background colour (R, G, B).
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    background: list[float] | None = None


def _as_vec3(values: Any, name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Scene builder coordinating sphere and light storage.

    Creating a SceneManager clears any previously stored spheres and lights;
    the Taichi fields are global, so only one scene is live at a time.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene.
        lights: List of LightInfo for all lights in the scene.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_lights()
        self.spheres.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Remove every sphere and light."""
        self._clear_all()

    # =========================================================================
    # Spheres
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float] = (255.0, 255.0, 255.0),
        specular: float = NO_SPECULAR,
        reflective: float = 0.0,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (positive).
            color: Surface colour as (R, G, B), each in [0, 255].
            specular: Specular exponent, or -1 for a matte surface.
            reflective: Reflectivity in [0, 1].

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If any parameter is out of range.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        center = _as_vec3(center, "center")
        color = _as_vec3(color, "color")
        idx = add_sphere(center, radius, color, specular, reflective)

        self.spheres.append(
            SphereInfo(
                sphere_index=idx,
                center=center,
                radius=float(radius),
                color=color,
                specular=float(specular),
                reflective=float(reflective),
            )
        )
        return idx

    # =========================================================================
    # Lights
    # =========================================================================

    def add_ambient_light(self, intensity: float) -> int:
        """Add an ambient light and return its index."""
        idx = add_ambient_light(intensity)
        self.lights.append(
            LightInfo(light_index=idx, kind=LightType.AMBIENT, intensity=float(intensity))
        )
        return idx

    def add_point_light(self, intensity: float, position: tuple[float, float, float]) -> int:
        """Add a point light at position and return its index."""
        position = _as_vec3(position, "position")
        idx = add_point_light(intensity, position)
        self.lights.append(
            LightInfo(
                light_index=idx,
                kind=LightType.POINT,
                intensity=float(intensity),
                position=position,
            )
        )
        return idx

    def add_directional_light(
        self, intensity: float, direction: tuple[float, float, float]
    ) -> int:
        """Add a directional light and return its index."""
        direction = _as_vec3(direction, "direction")
        idx = add_directional_light(intensity, direction)
        self.lights.append(
            LightInfo(
                light_index=idx,
                kind=LightType.DIRECTIONAL,
                intensity=float(intensity),
                direction=direction,
            )
        )
        return idx

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    def get_sphere_info(self, sphere_index: int) -> SphereInfo | None:
        """Get information about a sphere, or None for an unknown index."""
        if 0 <= sphere_index < len(self.spheres):
            return self.spheres[sphere_index]
        return None

    def get_light_info(self, light_index: int) -> LightInfo | None:
        """Get information about a light, or None for an unknown index."""
        if 0 <= light_index < len(self.lights):
            return self.lights[light_index]
        return None

    def total_light_intensity(self) -> float:
        """Sum of all light intensities.

        A value near 1.0 means a fully lit, unshadowed matte surface facing
        every light renders at its own colour.
        """
        return sum(light.intensity for light in self.lights)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all spheres, lights and the background.
        """
        config = SceneConfig()

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "color": list(sphere.color),
                    "specular": sphere.specular,
                    "reflective": sphere.reflective,
                }
            )

        for light in self.lights:
            light_config: dict[str, Any] = {
                "type": light.kind.name.lower(),
                "intensity": light.intensity,
            }
            if light.position is not None:
                light_config["position"] = list(light.position)
            if light.direction is not None:
                light_config["direction"] = list(light.direction)
            config.lights.append(light_config)

        config.background = list(get_background_color())
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Replaces the current scene. If any entry is rejected the previous
        scene, lights and background are restored before the error is
        re-raised, so a failed load never leaves a partial scene behind.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
            RuntimeError: If the configuration exceeds scene capacity.
        """
        previous = self.to_config()
        try:
            self._load_config(config)
        except (TypeError, ValueError, RuntimeError):
            logger.debug("Scene configuration rejected, restoring previous scene")
            self._load_config(previous)
            raise

        logger.debug(
            "Loaded scene with %d spheres and %d lights",
            len(self.spheres),
            len(self.lights),
        )

    def _load_config(self, config: SceneConfig) -> None:
        self.clear()

        for sphere_config in config.spheres:
            self.add_sphere(
                center=_as_vec3(sphere_config.get("center", [0, 0, 0]), "center"),
                radius=sphere_config.get("radius", 1.0),
                color=_as_vec3(sphere_config.get("color", [255, 255, 255]), "color"),
                specular=sphere_config.get("specular", NO_SPECULAR),
                reflective=sphere_config.get("reflective", 0.0),
            )

        for light_config in config.lights:
            light_type = light_config.get("type", "").lower()
            intensity = light_config.get("intensity", 0.0)
            if light_type == "ambient":
                self.add_ambient_light(intensity)
            elif light_type == "point":
                if "position" not in light_config:
                    raise ValueError("Point light configuration requires a position")
                self.add_point_light(intensity, light_config["position"])
            elif light_type == "directional":
                if "direction" not in light_config:
                    raise ValueError("Directional light configuration requires a direction")
                self.add_directional_light(intensity, light_config["direction"])
            else:
                raise ValueError(f"Unknown light type: {light_type}")

        if config.background is not None:
            set_background_color(_as_vec3(config.background, "background"))

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "spheres": config.spheres,
            "lights": config.lights,
            "background": config.background,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'spheres', 'lights' and optionally
                'background' keys.
        """
        config = SceneConfig(
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
            background=data.get("background"),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
