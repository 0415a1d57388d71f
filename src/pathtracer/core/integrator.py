"""Shading integrators: recursive Monte Carlo path tracing and Phong debug.

The path tracer estimates the rendering equation by recursion. At each hit it
draws ``path_samples`` scattered rays from the hit's material and recurses on
each one:

    L(x) = Le(x) + 1/N * sum( |cos(theta)| * brdf * L(scattered) / pdf )

Recursion states are the depths 0..path_depth. Terminal states are reaching
path_depth (which returns the background, approximating the truncated tail)
and a ray escaping the scene.

Samples with a zero or non-finite pdf, or a non-finite contribution, are
dropped: they add nothing but still count toward the average.

Example:
    >>> import numpy as np
    >>> from pathtracer.core.integrator import shade
    >>> # scene built elsewhere
    >>> # color = shade(scene, ray, np.random.default_rng(0))
"""

from __future__ import annotations

import math

import numpy as np

from pathtracer.camera.thin_lens import ShadingMode
from pathtracer.core.ray import (
    Color,
    Ray,
    dot,
    length,
    length_squared,
    normalize,
    vec3,
)
from pathtracer.scene.scene import Scene

# =============================================================================
# Rendering Constants
# =============================================================================

# t_min for path-traced rays, avoids re-hitting the surface a ray left from
T_MIN = 1e-3

# Phong debug shading parameters
SHADOW_RAY_OFFSET = 0.01
SHADOW_WEIGHT = 0.3
SPECULAR_EXPONENT = 40.0
SPECULAR_COLOR = vec3(0.4, 0.4, 0.4)


def shade_path(scene: Scene, ray: Ray, depth: int, rng: np.random.Generator) -> Color:
    """Estimate the radiance arriving along a ray by path tracing.

    Args:
        scene: The scene to trace.
        ray: The ray to shade.
        depth: Current recursion depth (0 for camera rays).
        rng: Random source for material scattering.

    Returns:
        The estimated RGB radiance.
    """
    camera = scene.camera
    if depth >= camera.path_depth:
        return scene.background(ray.direction)

    hit = scene.intersect(ray, T_MIN, camera.max_trace_dist)
    if hit is None:
        return scene.background(ray.direction)

    material = hit.material
    if material is None:
        return np.zeros(3)

    # Volumetric hits report a zero normal and skip the cosine term
    has_normal = length_squared(hit.normal) > 0.0

    integral = np.zeros(3)
    for _ in range(camera.path_samples):
        scattered, brdf, pdf = material.scatter(hit, ray, rng)
        if not (pdf > 0.0 and math.isfinite(pdf)) or not np.any(brdf):
            continue
        cosine = min(abs(dot(scattered.direction, hit.normal)), 1.0) if has_normal else 1.0
        incoming = shade_path(scene, scattered, depth + 1, rng)
        contribution = cosine * brdf * incoming / pdf
        if np.all(np.isfinite(contribution)):
            integral += contribution
    integral /= camera.path_samples

    return material.emission() + integral


def shade_phong(scene: Scene, ray: Ray, rng: np.random.Generator) -> Color:
    """Single-bounce Phong shading toward the scene's point light.

    Adds a hard shadow test and a fixed ambient term. Intended for debugging
    geometry and camera setup, not for final images.
    """
    camera = scene.camera
    hit = scene.intersect(ray, 0.0, camera.max_trace_dist)
    if hit is None:
        return scene.background(ray.direction)
    if hit.material is None:
        return np.zeros(3)

    to_light_vec = scene.point_light_pos - hit.point
    light_dist = length(to_light_vec)
    to_light = normalize(to_light_vec)
    to_camera = normalize(camera.origin - hit.point)
    normal = hit.normal

    reflected = -to_light + 2.0 * dot(to_light, normal) * normal
    diffuse_weight = min(max(dot(normal, to_light), 0.0), 1.0)
    specular_weight = min(max(dot(to_camera, reflected), 0.0), 1.0) ** SPECULAR_EXPONENT

    shadow_ray = Ray(origin=hit.point + SHADOW_RAY_OFFSET * normal, direction=to_light)
    occluded = scene.intersect(shadow_ray, 0.0, light_dist) is not None
    shadow_weight = SHADOW_WEIGHT if occluded else 1.0

    _, albedo, _ = hit.material.scatter(hit, ray, rng)
    return shadow_weight * (
        scene.ambient + diffuse_weight * albedo + specular_weight * SPECULAR_COLOR
    )


def shade(scene: Scene, ray: Ray, rng: np.random.Generator) -> Color:
    """Shade a camera ray with the camera's active shading mode."""
    if scene.camera.shading_mode is ShadingMode.PHONG:
        return shade_phong(scene, ray, rng)
    return shade_path(scene, ray, 0, rng)
