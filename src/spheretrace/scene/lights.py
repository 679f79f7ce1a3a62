"""Light source registry.

Three kinds of light are supported:

- Ambient: a constant intensity added everywhere, never shadowed.
- Point: emits from a position; the light vector at a surface point is
  ``position - point``.
- Directional: a light at infinity; the light vector is the stored
  direction as-is (it does not have to be unit length).

Intensities are plain scalars. The lighting engine sums them into a single
multiplier that scales the surface colour.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.scene.lights import add_ambient_light, add_point_light
    >>> add_ambient_light(0.2)
    0
    >>> add_point_light(0.6, position=(2.0, 1.0, 0.0))
    1
"""

import logging
import math
from enum import IntEnum

import taichi as ti

from spheretrace.core.vector import vec3

logger = logging.getLogger(__name__)


class LightType(IntEnum):
    """Kinds of light source, stored as integers in the light_types field."""

    AMBIENT = 0
    POINT = 1
    DIRECTIONAL = 2


@ti.dataclass
class Light:
    """A light source as seen from a kernel.

    Attributes:
        kind: The LightType value.
        intensity: Non-negative scalar intensity.
        position: Light position (POINT only, zero otherwise).
        direction: Vector toward the light (DIRECTIONAL only, zero otherwise).
    """

    kind: ti.i32
    intensity: ti.f64
    position: vec3
    direction: vec3


# Maximum number of lights in the scene
MAX_LIGHTS = 64

# Light storage: Structure of Arrays layout
light_types = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f64, shape=MAX_LIGHTS)
light_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_directions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights.

    Resets the light count to zero. Existing field data is overwritten when
    new lights are added.
    """
    num_lights[None] = 0


def _add_light(
    kind: LightType,
    intensity: float,
    position: tuple[float, float, float] = (0.0, 0.0, 0.0),
    direction: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> int:
    if intensity < 0.0:
        raise ValueError(f"Light intensity = {intensity} is negative.")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_types[idx] = int(kind)
    light_intensities[idx] = intensity
    light_positions[idx] = [position[0], position[1], position[2]]
    light_directions[idx] = [direction[0], direction[1], direction[2]]
    num_lights[None] = idx + 1

    logger.debug("Added %s light %d (intensity=%s)", kind.name.lower(), idx, intensity)
    return idx


def add_ambient_light(intensity: float) -> int:
    """Add an ambient light.

    Args:
        intensity: Non-negative intensity added at every surface point.

    Returns:
        The index of the added light.

    Raises:
        ValueError: If the intensity is negative.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    return _add_light(LightType.AMBIENT, intensity)


def add_point_light(intensity: float, position: tuple[float, float, float]) -> int:
    """Add a point light at a world-space position.

    Args:
        intensity: Non-negative intensity.
        position: The light position as (x, y, z).

    Returns:
        The index of the added light.

    Raises:
        ValueError: If the intensity is negative.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    return _add_light(LightType.POINT, intensity, position=position)


def add_directional_light(intensity: float, direction: tuple[float, float, float]) -> int:
    """Add a directional light.

    Args:
        intensity: Non-negative intensity.
        direction: Vector pointing from the scene toward the light. Its
            length is irrelevant but must not be zero.

    Returns:
        The index of the added light.

    Raises:
        ValueError: If the intensity is negative or the direction is zero.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    if math.sqrt(sum(c * c for c in direction)) == 0.0:
        raise ValueError("Directional light direction must not be the zero vector.")
    return _add_light(LightType.DIRECTIONAL, intensity, direction=direction)


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def get_light(index: ti.i32) -> Light:
    """Assemble the stored light at index into a Light record."""
    return Light(
        kind=light_types[index],
        intensity=light_intensities[index],
        position=light_positions[index],
        direction=light_directions[index],
    )
