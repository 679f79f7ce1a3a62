"""Phong-style local illumination with hard shadows.

compute_lighting() returns a scalar multiplier for the surface colour at a
point by summing over every light in the scene:

    ambient                  intensity
    diffuse  (N . L > 0)     intensity * (N . L) / (|N| |L|)
    specular (R . V > 0)     intensity * ((R . V) / (|R| |V|)) ^ s

with R = 2 (N . L) N - L. Point and directional lights are tested for
occlusion first by casting a shadow ray through closest_intersection(); any
blocker removes the light's whole contribution (no penumbra).

The result is an unbounded non-negative scalar. It is deliberately not
clamped here; clamping happens once, when the final colour is written to the
pixel buffer.
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.vector import length, reflect_ray, vec3
from spheretrace.scene.intersection import closest_intersection
from spheretrace.scene.lights import LightType, get_light, num_lights

# Shadow and reflection rays start this far along the ray to avoid
# re-hitting the surface they leave from
SHADOW_EPSILON = 0.001


@ti.func
def light_vector(kind: ti.i32, position: vec3, direction: vec3, point: vec3) -> vec3:
    """Vector from a surface point toward a point or directional light."""
    result = direction
    if kind == int(LightType.POINT):
        result = position - point
    return result


@ti.func
def shadow_t_max(kind: ti.i32) -> ti.f64:
    """Occlusion range along the light vector.

    For a point light the light vector ends at the light (t = 1), so only
    blockers strictly before it count. A directional light is infinitely far.
    """
    result = tm.inf
    if kind == int(LightType.POINT):
        result = 1.0
    return result


@ti.func
def is_occluded(point: vec3, to_light: vec3, t_max: ti.f64) -> ti.i32:
    """Cast a shadow ray from point along to_light and report any blocker."""
    return closest_intersection(point, to_light, SHADOW_EPSILON, t_max).hit


@ti.func
def compute_lighting(point: vec3, normal: vec3, view: vec3, specular: ti.f64) -> ti.f64:
    """Compute the light intensity arriving at a surface point.

    Args:
        point: The surface point P.
        normal: Unit surface normal N at P.
        view: Vector V from P back toward the viewer; need not be unit.
        specular: Specular exponent, or -1 to skip the specular term.

    Returns:
        Non-negative, unclamped illumination multiplier.
    """
    intensity = 0.0
    n_length = length(normal)
    v_length = length(view)

    n_lights = num_lights[None]
    for i in range(n_lights):
        light = get_light(i)

        if light.kind == int(LightType.AMBIENT):
            intensity += light.intensity
        else:
            to_light = light_vector(light.kind, light.position, light.direction, point)

            if is_occluded(point, to_light, shadow_t_max(light.kind)) == 0:
                # Diffuse
                n_dot_l = tm.dot(normal, to_light)
                if n_dot_l > 0.0:
                    intensity += light.intensity * n_dot_l / (n_length * length(to_light))

                # Specular
                if specular > 0.0:
                    r = reflect_ray(to_light, normal)
                    r_dot_v = tm.dot(r, view)
                    if r_dot_v > 0.0:
                        cos_alpha = r_dot_v / (length(r) * v_length)
                        intensity += light.intensity * cos_alpha**specular

    return intensity
