"""Whitted-style sphere ray tracer built on Taichi.

This package renders scenes of coloured spheres lit by ambient, point and
directional lights, with Phong-style specular highlights, hard shadows and
mirror reflections up to a fixed depth.

Subpackages:
    core: Vector math, lighting, the ray tracer and the frame renderer
    geometry: Sphere data and ray-sphere intersection
    scene: Sphere and light storage, the scene manager and preset scenes
    camera: Viewport camera mapping canvas pixels to rays
    preview: Pixel buffer, PNG export and on-screen presentation

Taichi must be initialized with ``default_fp=ti.f64`` before any submodule
is imported; scene and camera state is stored in double precision.
"""

__version__ = "0.1.0"
