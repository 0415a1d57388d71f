"""Metal (specular reflective) material implementation.

The incident direction is mirrored about the normal and perturbed by a random
point in a sphere of radius ``roughness``. Rays perturbed below the surface
are absorbed (zero weight).

Specular reflection has no finite density, so the reported pdf is the cosine
term itself: the integrator's cos(theta) / pdf factor cancels and the
estimator weight is exactly the albedo.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pathtracer.core.ray import (
    Color,
    HitRecord,
    Ray,
    as_vec3,
    dot,
    normalize,
    random_in_unit_sphere,
    reflect,
)


class Metal:
    """Fuzzy mirror.

    Attributes:
        albedo: Reflective tint (RGB, each component in [0, 1]).
        roughness: Fuzz radius in [0, 1]. 0 is a perfect mirror.
    """

    def __init__(self, albedo: Any, roughness: float = 0.0) -> None:
        if roughness < 0.0 or roughness > 1.0:
            raise ValueError(f"Roughness {roughness} is outside [0, 1]")
        self.albedo = as_vec3(albedo)
        self.roughness = float(roughness)

    def scatter(
        self, hit: HitRecord, ray: Ray, rng: np.random.Generator
    ) -> tuple[Ray, Color, float]:
        reflected = reflect(normalize(ray.direction), hit.normal)
        if self.roughness > 0.0:
            reflected = reflected + self.roughness * random_in_unit_sphere(rng)
        direction = normalize(reflected)
        scattered = Ray(origin=hit.point, direction=direction)

        cosine = dot(direction, hit.normal)
        if cosine <= 0.0:
            # Absorbed
            return scattered, np.zeros(3), 1.0
        return scattered, self.albedo, min(cosine, 1.0)

    def emission(self) -> Color:
        return np.zeros(3)

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo.tolist()}, roughness={self.roughness})"
