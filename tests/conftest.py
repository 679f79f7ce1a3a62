"""Pytest configuration for spheretrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset spheres, lights, background and camera around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the fields are created after Taichi is initialized
    from spheretrace.camera.viewport import ViewportCamera, setup_camera
    from spheretrace.core.tracer import reset_background_color
    from spheretrace.scene.intersection import clear_scene
    from spheretrace.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_lights()
        reset_background_color()
        setup_camera(ViewportCamera())

    _clear_all()

    yield

    _clear_all()
