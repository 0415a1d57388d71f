"""Core rendering module.

Components:
    ray: Ray and hit record value types, vector and sampling utilities
    integrator: Path tracing and Phong debug shading
    tonemap: Taichi kernel turning HDR radiance into 8-bit RGB
    renderer: Row-parallel render driver

The core module estimates the rendering equation by recursive Monte Carlo
sampling, averages anti-aliasing samples per pixel and finishes the image with
highlight desaturation and gamma correction.
"""

from .ray import (
    Color,
    HitRecord,
    Ray,
    Vec3,
    as_vec3,
    build_onb_from_normal,
    cross,
    dot,
    length,
    length_squared,
    local_to_world,
    make_ray,
    near_zero,
    normalize,
    random_cosine_direction,
    random_in_unit_disk,
    random_in_unit_sphere,
    ray_at,
    reflect,
    sample_cosine_hemisphere,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports
# (they depend on the scene and camera packages, which depend on core.ray).
# Import them directly from pathtracer.core.integrator / pathtracer.core.renderer.

__all__ = [
    "Color",
    "HitRecord",
    "Ray",
    "Vec3",
    "as_vec3",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "near_zero",
    "random_in_unit_sphere",
    "random_in_unit_disk",
    "random_cosine_direction",
    "build_onb_from_normal",
    "local_to_world",
    "sample_cosine_hemisphere",
]
