"""Unit tests for the preset scenes.

Tests cover:
- Basic scene contents (three flat spheres, full ambient light)
- Reflective scene contents (four spheres, three lights)
- Lighting parameter overrides
- Lookup by name
"""

import pytest


class TestBasicScene:
    """Tests for create_basic_scene."""

    def test_contents(self):
        """Test sphere and light counts of the basic scene."""
        from spheretrace.scene.lights import LightType
        from spheretrace.scene.presets import create_basic_scene

        scene, camera = create_basic_scene()

        assert scene.get_sphere_count() == 3
        assert scene.get_light_count() == 1
        assert scene.lights[0].kind == LightType.AMBIENT
        assert scene.lights[0].intensity == 1.0
        assert all(s.reflective == 0.0 for s in scene.spheres)
        assert camera.origin == (0.0, 0.0, 0.0)

    def test_sphere_colors(self):
        """Test the basic scene has red, blue and green spheres."""
        from spheretrace.scene.presets import BLUE, GREEN, RED, create_basic_scene

        scene, _ = create_basic_scene()
        assert [s.color for s in scene.spheres] == [RED, BLUE, GREEN]


class TestReflectiveScene:
    """Tests for create_reflective_scene."""

    def test_contents(self):
        """Test sphere and light counts of the reflective scene."""
        from spheretrace.scene.lights import LightType
        from spheretrace.scene.presets import create_reflective_scene

        scene, camera = create_reflective_scene()

        assert scene.get_sphere_count() == 4
        assert scene.get_light_count() == 3
        assert [light.kind for light in scene.lights] == [
            LightType.AMBIENT,
            LightType.POINT,
            LightType.DIRECTIONAL,
        ]
        assert abs(scene.total_light_intensity() - 1.0) < 1e-9
        assert camera.projection_distance == 1.0

    def test_floor_sphere(self):
        """Test the huge yellow sphere acting as the floor."""
        from spheretrace.scene.presets import YELLOW, create_reflective_scene

        scene, _ = create_reflective_scene()
        floor = scene.spheres[3]
        assert floor.center == (0.0, -5001.0, 0.0)
        assert floor.radius == 5000.0
        assert floor.color == YELLOW
        assert floor.specular == 1000.0
        assert floor.reflective == 0.5

    def test_params_override(self):
        """Test lighting overrides are applied."""
        from spheretrace.scene.presets import ReflectiveSceneParams, create_reflective_scene

        params = ReflectiveSceneParams(point_intensity=0.9, point_position=(0.0, 5.0, 0.0))
        scene, _ = create_reflective_scene(params)
        point = scene.lights[1]
        assert point.intensity == 0.9
        assert point.position == (0.0, 5.0, 0.0)

    def test_preset_resets_background(self):
        """Test presets restore the default background."""
        from spheretrace.core.tracer import (
            DEFAULT_BACKGROUND,
            get_background_color,
            set_background_color,
        )
        from spheretrace.scene.presets import create_reflective_scene

        set_background_color((0.0, 0.0, 0.0))
        create_reflective_scene()
        assert get_background_color() == DEFAULT_BACKGROUND


class TestCreateScene:
    """Tests for create_scene."""

    @pytest.mark.parametrize("name, spheres", [("basic", 3), ("reflective", 4)])
    def test_by_name(self, name, spheres):
        """Test building presets by name."""
        from spheretrace.scene.presets import create_scene

        scene, _ = create_scene(name)
        assert scene.get_sphere_count() == spheres

    def test_unknown_name_raises(self):
        """Test that unknown preset names are rejected."""
        from spheretrace.scene.presets import create_scene

        with pytest.raises(ValueError):
            create_scene("checkerboard")
