"""Unit tests for scene-level intersection.

Tests cover:
- SceneHitRecord miss record
- Sphere storage, validation and capacity
- Closest hit selection across multiple spheres
- Inclusive [t_min, t_max] range and tie-breaking by scene order
- Double-precision roots of very large spheres
"""

import math

import pytest
import taichi as ti


class TestSceneHitRecordBasics:
    """Tests for SceneHitRecord dataclass."""

    def test_miss_record(self):
        """Test that miss records have hit=0 and sphere_index=-1."""
        from spheretrace.scene.intersection import _make_miss_record

        result_hit = ti.field(dtype=ti.i32, shape=())
        result_index = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = _make_miss_record()
            result_hit[None] = rec.hit
            result_index[None] = rec.sphere_index

        test_kernel()
        assert result_hit[None] == 0
        assert result_index[None] == -1


class TestSphereStorage:
    """Tests for sphere storage and management."""

    def test_add_sphere(self):
        """Test adding a sphere to the scene."""
        from spheretrace.scene.intersection import add_sphere, get_sphere_count

        assert get_sphere_count() == 0
        idx = add_sphere((1.0, 2.0, 3.0), 0.5, color=(10.0, 20.0, 30.0))
        assert idx == 0
        assert get_sphere_count() == 1

    def test_stored_values(self):
        """Test that sphere fields hold the added parameters."""
        from spheretrace.scene.intersection import (
            add_sphere,
            sphere_centers,
            sphere_colors,
            sphere_radii,
            sphere_reflectives,
            sphere_speculars,
        )

        idx = add_sphere((0.0, -1.0, 3.0), 1.0, (255.0, 0.0, 0.0), 500.0, 0.2)
        assert [float(x) for x in sphere_centers[idx]] == [0.0, -1.0, 3.0]
        assert sphere_radii[idx] == 1.0
        assert [float(x) for x in sphere_colors[idx]] == [255.0, 0.0, 0.0]
        assert sphere_speculars[idx] == 500.0
        assert abs(sphere_reflectives[idx] - 0.2) < 1e-6

    def test_multiple_spheres(self):
        """Test adding multiple spheres returns sequential indices."""
        from spheretrace.scene.intersection import add_sphere, get_sphere_count

        for i in range(5):
            assert add_sphere((float(i), 0.0, 0.0), 0.5) == i

        assert get_sphere_count() == 5

    def test_clear_scene(self):
        """Test clearing all spheres from the scene."""
        from spheretrace.scene.intersection import add_sphere, clear_scene, get_sphere_count

        add_sphere((0.0, 0.0, 0.0), 1.0)
        add_sphere((1.0, 0.0, 0.0), 0.5)
        assert get_sphere_count() == 2

        clear_scene()
        assert get_sphere_count() == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"radius": 0.0},
            {"radius": -1.0},
            {"color": (256.0, 0.0, 0.0)},
            {"color": (0.0, -1.0, 0.0)},
            {"specular": 0.0},
            {"specular": -0.5},
            {"reflective": 1.5},
            {"reflective": -0.1},
        ],
    )
    def test_invalid_parameters_raise(self, kwargs):
        """Test that out-of-range sphere parameters are rejected."""
        from spheretrace.scene.intersection import add_sphere, get_sphere_count

        params = {"center": (0.0, 0.0, 3.0), "radius": 1.0}
        params.update(kwargs)
        with pytest.raises(ValueError):
            add_sphere(**params)
        assert get_sphere_count() == 0

    def test_boundary_parameters_accepted(self):
        """Test that the edges of every valid range are accepted."""
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 3.0), 1e-3, (0.0, 255.0, 0.0), -1.0, 0.0)
        add_sphere((0.0, 0.0, 3.0), 1.0, (255.0, 255.0, 255.0), 1e-3, 1.0)

    def test_capacity_exceeded_raises(self):
        """Test that adding more than MAX_SPHERES raises RuntimeError."""
        from spheretrace.scene.intersection import MAX_SPHERES, add_sphere, num_spheres

        num_spheres[None] = MAX_SPHERES
        with pytest.raises(RuntimeError):
            add_sphere((0.0, 0.0, 0.0), 1.0)


class TestClosestIntersection:
    """Tests for closest_intersection."""

    def test_empty_scene_misses(self):
        """Test that an empty scene never reports a hit."""
        from spheretrace.core.tracer import closest_intersection_py

        index, t = closest_intersection_py((0, 0, 0), (0, 0, 1), 1.0, math.inf)
        assert index is None
        assert math.isinf(t)

    def test_single_sphere_hit(self):
        """Test hitting one sphere returns its near root."""
        from spheretrace.core.tracer import closest_intersection_py
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0)
        index, t = closest_intersection_py((0, 0, 0), (0, 0, 1), 1.0, math.inf)
        assert index == 0
        assert abs(t - 4.0) < 1e-5

    def test_nearer_sphere_wins_regardless_of_order(self):
        """Test that the closer of two occluding spheres is chosen."""
        from spheretrace.core.tracer import closest_intersection_py
        from spheretrace.scene.intersection import add_sphere, clear_scene

        add_sphere((0.0, 0.0, 10.0), 1.0)
        add_sphere((0.0, 0.0, 5.0), 1.0)
        index, t = closest_intersection_py((0, 0, 0), (0, 0, 1), 1.0, math.inf)
        assert index == 1
        assert abs(t - 4.0) < 1e-5

        clear_scene()
        add_sphere((0.0, 0.0, 5.0), 1.0)
        add_sphere((0.0, 0.0, 10.0), 1.0)
        index, t = closest_intersection_py((0, 0, 0), (0, 0, 1), 1.0, math.inf)
        assert index == 0
        assert abs(t - 4.0) < 1e-5

    def test_t_min_skips_near_root(self):
        """Test that roots below t_min are ignored in favour of the far root."""
        from spheretrace.core.tracer import closest_intersection_py
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 2.0)
        # Origin inside the sphere: roots at -2 and 2
        index, t = closest_intersection_py((0, 0, 0), (0, 0, 1), 0.001, math.inf)
        assert index == 0
        assert abs(t - 2.0) < 1e-5

    def test_t_max_excludes_distant_sphere(self):
        """Test that hits beyond t_max are ignored."""
        from spheretrace.core.tracer import closest_intersection_py
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0)
        index, _ = closest_intersection_py((0, 0, 0), (0, 0, 1), 0.001, 3.0)
        assert index is None

    def test_range_is_inclusive(self):
        """Test a root exactly at t_min counts as a hit."""
        from spheretrace.core.tracer import closest_intersection_py
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 3.0), 1.0)
        index, t = closest_intersection_py((0, 0, 0), (0, 0, 1), 2.0, 2.0)
        assert index == 0
        assert t == 2.0

    def test_tie_resolves_to_first_sphere(self):
        """Test identical spheres resolve to the earliest in scene order."""
        from spheretrace.core.tracer import closest_intersection_py
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0, color=(255.0, 0.0, 0.0))
        add_sphere((0.0, 0.0, 5.0), 1.0, color=(0.0, 0.0, 255.0))
        index, _ = closest_intersection_py((0, 0, 0), (0, 0, 1), 1.0, math.inf)
        assert index == 0

    def test_intersect_ray_sphere_py_invalid_index(self):
        """Test that querying an unknown sphere raises ValueError."""
        from spheretrace.core.tracer import intersect_ray_sphere_py

        with pytest.raises(ValueError):
            intersect_ray_sphere_py((0, 0, 0), (0, 0, 1), 0)

    def test_intersect_ray_sphere_py(self):
        """Test roots of a stored sphere from Python."""
        from spheretrace.core.tracer import intersect_ray_sphere_py
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 3.0), 1.0)
        t1, t2 = intersect_ray_sphere_py((0, 0, 0), (0, 0, 1), 0)
        assert abs(t1 - 4.0) < 1e-5
        assert abs(t2 - 2.0) < 1e-5

    def test_large_sphere_roots_are_precise(self):
        """Test grazing roots of a radius-5000 floor sphere keep full precision."""
        from spheretrace.core.tracer import intersect_ray_sphere_py
        from spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, -5001.0, 0.0), 5000.0)
        t1, t2 = intersect_ray_sphere_py((0, 0, 0), (0, -0.05, 1), 0)

        a = 0.05 * 0.05 + 1.0
        b = 2.0 * (5001.0 * -0.05)
        c = 5001.0 * 5001.0 - 5000.0 * 5000.0
        sqrt_d = math.sqrt(b * b - 4.0 * a * c)
        assert abs(t1 - (-b + sqrt_d) / (2.0 * a)) < 1e-6
        assert abs(t2 - (-b - sqrt_d) / (2.0 * a)) < 1e-6
