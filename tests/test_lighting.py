"""Unit tests for compute_lighting.

Tests cover:
- Ambient light adds its intensity unconditionally
- Diffuse term with point and directional lights
- Lights behind the surface contribute nothing
- Specular highlights and the -1 "no specular" marker
- Hard shadows, including the point-light occlusion range
"""

import math

import pytest

POINT = (0.0, 0.0, 0.0)
UP = (0.0, 1.0, 0.0)


class TestAmbientAndDiffuse:
    """Tests for ambient and diffuse contributions."""

    def test_no_lights_is_dark(self):
        """Test that an unlit scene gives zero intensity."""
        from spheretrace.core.tracer import compute_lighting_py

        assert compute_lighting_py(POINT, UP, UP, -1.0) == 0.0

    def test_ambient_only(self):
        """Test that ambient-only lighting returns exactly its intensity."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import add_ambient_light

        add_ambient_light(0.3)
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - 0.3) < 1e-6
        # Independent of the normal and view
        assert abs(compute_lighting_py(POINT, (0.0, 0.0, 1.0), (1.0, 0.0, 0.0), 10.0) - 0.3) < 1e-6

    def test_ambient_is_never_shadowed(self):
        """Test that spheres do not block ambient light."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.intersection import add_sphere
        from spheretrace.scene.lights import add_ambient_light

        add_sphere((0.0, 5.0, 0.0), 1.0)
        add_ambient_light(0.4)
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - 0.4) < 1e-6

    def test_point_light_head_on(self):
        """Test a point light straight along the normal."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import add_point_light

        add_point_light(0.5, (0.0, 2.0, 0.0))
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - 0.5) < 1e-6

    def test_directional_light_at_45_degrees(self):
        """Test the cosine falloff for an oblique directional light."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import add_directional_light

        add_directional_light(1.0, (1.0, 1.0, 0.0))
        expected = 1.0 / math.sqrt(2.0)
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - expected) < 1e-5

    def test_light_behind_surface(self):
        """Test that a light below the surface contributes nothing."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import add_directional_light, add_point_light

        add_point_light(1.0, (0.0, -3.0, 0.0))
        add_directional_light(1.0, (0.0, -1.0, 0.0))
        assert compute_lighting_py(POINT, UP, UP, -1.0) == 0.0

    def test_contributions_sum(self):
        """Test that lights add up and are not clamped to 1."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import (
            add_ambient_light,
            add_directional_light,
            add_point_light,
        )

        add_ambient_light(0.5)
        add_point_light(0.6, (0.0, 4.0, 0.0))
        add_directional_light(0.7, (0.0, 1.0, 0.0))
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - 1.8) < 1e-5


class TestSpecular:
    """Tests for the specular term."""

    def test_specular_mirror_direction(self):
        """Test full specular when the viewer sits on the reflected ray."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import add_directional_light

        add_directional_light(1.0, (0.0, 1.0, 0.0))
        # Diffuse 1.0 + specular 1.0 ** s
        assert abs(compute_lighting_py(POINT, UP, UP, 10.0) - 2.0) < 1e-5

    def test_specular_exponent(self):
        """Test cos(alpha) ** s for an off-mirror view."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import add_directional_light

        add_directional_light(1.0, (-1.0, 1.0, 0.0))
        # R = (1, 1, 0); with V = (0, 1, 0), cos(alpha) = 1/sqrt(2)
        diffuse = 1.0 / math.sqrt(2.0)
        specular = (1.0 / math.sqrt(2.0)) ** 4
        result = compute_lighting_py(POINT, UP, UP, 4.0)
        assert abs(result - (diffuse + specular)) < 1e-5

    def test_no_specular_marker(self):
        """Test that specular = -1 leaves only the diffuse term."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import add_directional_light

        add_directional_light(1.0, (0.0, 1.0, 0.0))
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - 1.0) < 1e-6

    def test_specular_away_from_viewer(self):
        """Test that R . V <= 0 adds no highlight."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.lights import add_directional_light

        add_directional_light(1.0, (-1.0, 1.0, 0.0))
        # R = (1, 1, 0) and V = (-1, 0, 0) gives R . V < 0
        result = compute_lighting_py(POINT, UP, (-1.0, 0.0, 0.0), 100.0)
        assert abs(result - 1.0 / math.sqrt(2.0)) < 1e-5


class TestShadows:
    """Tests for shadow rays."""

    def test_point_light_blocked(self):
        """Test that a sphere between the point and the light blocks it."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.intersection import add_sphere
        from spheretrace.scene.lights import add_point_light

        add_sphere((0.0, 5.0, 0.0), 1.0)
        add_point_light(0.6, (0.0, 10.0, 0.0))
        assert compute_lighting_py(POINT, UP, UP, 500.0) == 0.0

    def test_sphere_beyond_point_light_does_not_block(self):
        """Test that blockers past the light position are ignored."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.intersection import add_sphere
        from spheretrace.scene.lights import add_point_light

        add_sphere((0.0, 20.0, 0.0), 1.0)
        add_point_light(0.6, (0.0, 10.0, 0.0))
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - 0.6) < 1e-6

    def test_directional_light_blocked_at_any_distance(self):
        """Test that a directional light is blocked by a far sphere."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.intersection import add_sphere
        from spheretrace.scene.lights import add_ambient_light, add_directional_light

        add_sphere((0.0, 1000.0, 0.0), 1.0)
        add_ambient_light(0.2)
        add_directional_light(0.8, (0.0, 1.0, 0.0))
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - 0.2) < 1e-6

    def test_surface_does_not_shadow_itself(self):
        """Test that the epsilon offset keeps a sphere from self-shadowing."""
        from spheretrace.core.tracer import compute_lighting_py
        from spheretrace.scene.intersection import add_sphere
        from spheretrace.scene.lights import add_point_light

        # POINT lies on top of this sphere
        add_sphere((0.0, -1.0, 0.0), 1.0)
        add_point_light(1.0, (0.0, 5.0, 0.0))
        assert abs(compute_lighting_py(POINT, UP, UP, -1.0) - 1.0) < 1e-6


class TestLightingHelpers:
    """Tests for the per-light helpers."""

    @pytest.mark.parametrize("kind, expected", [(1, 1.0), (2, math.inf)])
    def test_shadow_t_max(self, kind, expected):
        """Test the occlusion range for point and directional lights."""
        import taichi as ti

        from spheretrace.core.lighting import shadow_t_max

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(k: ti.i32):
            result[None] = shadow_t_max(k)

        test_kernel(kind)
        assert result[None] == expected
