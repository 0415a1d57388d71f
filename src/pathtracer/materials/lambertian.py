"""Lambertian (ideal diffuse) material implementation.

The Lambertian BRDF is:
    f_r(wi, wo) = albedo / pi

Directions are drawn by cosine-weighted hemisphere sampling, whose density is:
    pdf(wi) = cos(theta) / pi

so the estimator weight cos(theta) * f_r / pdf reduces to the albedo.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from pathtracer.core.ray import (
    Color,
    HitRecord,
    Ray,
    as_vec3,
    near_zero,
    sample_cosine_hemisphere,
)


class Lambertian:
    """Ideal diffuse material with optional emission.

    Attributes:
        albedo: Diffuse reflectance (RGB, each component in [0, 1]).
        emitted: Emitted radiance (RGB, non-negative). Emissive Lambertians
            serve as area lights.
    """

    def __init__(self, albedo: Any, emission: Any = (0.0, 0.0, 0.0)) -> None:
        albedo = as_vec3(albedo)
        for i, component in enumerate(albedo):
            if component < 0.0 or component > 1.0:
                raise ValueError(
                    f"Albedo component {i} = {component} is outside [0, 1]. "
                    "This would violate energy conservation."
                )
        emitted = as_vec3(emission)
        if np.any(emitted < 0.0):
            raise ValueError(f"Emission must be non-negative, got {emitted.tolist()}")
        self.albedo = albedo
        self.emitted = emitted

    def scatter(
        self, hit: HitRecord, ray: Ray, rng: np.random.Generator
    ) -> tuple[Ray, Color, float]:
        direction, pdf = sample_cosine_hemisphere(hit.normal, rng)
        # Guard against a degenerate sample
        if near_zero(direction):
            direction = hit.normal
            pdf = 1.0 / math.pi
        return Ray(origin=hit.point, direction=direction), self.albedo / math.pi, pdf

    def emission(self) -> Color:
        return self.emitted

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo.tolist()}, emission={self.emitted.tolist()})"
