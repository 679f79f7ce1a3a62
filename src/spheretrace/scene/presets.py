"""Ready-made demonstration scenes.

Two scenes are provided, both viewed by the reference camera (origin, 1x1
viewport at distance 1, looking down +Z):

- Basic scene: three flat-coloured spheres under a single ambient light of
  intensity 1, so every visible point renders at exactly its sphere colour.
  Intended to be rendered with max_depth = 0.
- Reflective scene: the classic four-sphere scene (red, blue, green and a
  huge yellow "floor" sphere) with ambient, point and directional lights,
  specular highlights, shadows and mirror reflections.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.camera.viewport import setup_camera
    >>> from spheretrace.scene.presets import create_reflective_scene
    >>>
    >>> scene, camera = create_reflective_scene()
    >>> setup_camera(camera)
    >>> scene.get_sphere_count()
    4
"""

from dataclasses import dataclass

from spheretrace.camera.viewport import ViewportCamera
from spheretrace.core.tracer import reset_background_color
from spheretrace.scene.manager import SceneManager

# =============================================================================
# Scene Colours (RGB, 0-255)
# =============================================================================

RED = (255.0, 0.0, 0.0)
GREEN = (0.0, 255.0, 0.0)
BLUE = (0.0, 0.0, 255.0)
YELLOW = (255.0, 255.0, 0.0)


@dataclass
class ReflectiveSceneParams:
    """Lighting parameters for the reflective scene.

    The defaults sum to an intensity of 1.0, so a matte surface facing every
    light is drawn at its own colour.

    Attributes:
        ambient_intensity: Intensity of the ambient light.
        point_intensity: Intensity of the point light.
        point_position: Position of the point light.
        directional_intensity: Intensity of the directional light.
        directional_direction: Direction towards the directional light.

    Example:
        >>> params = ReflectiveSceneParams(point_intensity=0.8)
        >>> scene, camera = create_reflective_scene(params)
    """

    ambient_intensity: float = 0.2
    point_intensity: float = 0.6
    point_position: tuple[float, float, float] = (2.0, 1.0, 0.0)
    directional_intensity: float = 0.2
    directional_direction: tuple[float, float, float] = (1.0, 4.0, 4.0)


# =============================================================================
# Scene Factories
# =============================================================================


def create_basic_scene() -> tuple[SceneManager, ViewportCamera]:
    """Create three flat-coloured spheres lit only by ambient light.

    Spheres:
        - red, center (0, -1, 3), radius 1
        - blue, center (2, 0, 4), radius 1
        - green, center (-2, 0, 4), radius 1

    Returns:
        A tuple of (SceneManager, ViewportCamera).
    """
    scene = SceneManager()
    reset_background_color()

    scene.add_sphere(center=(0.0, -1.0, 3.0), radius=1.0, color=RED)
    scene.add_sphere(center=(2.0, 0.0, 4.0), radius=1.0, color=BLUE)
    scene.add_sphere(center=(-2.0, 0.0, 4.0), radius=1.0, color=GREEN)

    scene.add_ambient_light(1.0)

    return scene, ViewportCamera()


def create_reflective_scene(
    params: ReflectiveSceneParams | None = None,
) -> tuple[SceneManager, ViewportCamera]:
    """Create the classic reflective four-sphere scene.

    Spheres (center, radius, colour, specular, reflective):
        - (0, -1, 3), 1, red, 500, 0.2
        - (2, 0, 4), 1, blue, 500, 0.3
        - (-2, 0, 4), 1, green, 10, 0.4
        - (0, -5001, 0), 5000, yellow, 1000, 0.5

    Args:
        params: Optional lighting overrides. Defaults to
            ReflectiveSceneParams().

    Returns:
        A tuple of (SceneManager, ViewportCamera).
    """
    if params is None:
        params = ReflectiveSceneParams()

    scene = SceneManager()
    reset_background_color()

    scene.add_sphere(
        center=(0.0, -1.0, 3.0), radius=1.0, color=RED, specular=500.0, reflective=0.2
    )
    scene.add_sphere(
        center=(2.0, 0.0, 4.0), radius=1.0, color=BLUE, specular=500.0, reflective=0.3
    )
    scene.add_sphere(
        center=(-2.0, 0.0, 4.0), radius=1.0, color=GREEN, specular=10.0, reflective=0.4
    )
    # Huge sphere acting as the floor
    scene.add_sphere(
        center=(0.0, -5001.0, 0.0),
        radius=5000.0,
        color=YELLOW,
        specular=1000.0,
        reflective=0.5,
    )

    scene.add_ambient_light(params.ambient_intensity)
    scene.add_point_light(params.point_intensity, position=params.point_position)
    scene.add_directional_light(
        params.directional_intensity, direction=params.directional_direction
    )

    return scene, ViewportCamera()


SCENES = {
    "basic": create_basic_scene,
    "reflective": create_reflective_scene,
}


def create_scene(name: str) -> tuple[SceneManager, ViewportCamera]:
    """Create a preset scene by name ("basic" or "reflective").

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        factory = SCENES[name]
    except KeyError:
        raise ValueError(
            f"Unknown scene '{name}', expected one of {sorted(SCENES)}"
        ) from None
    return factory()
