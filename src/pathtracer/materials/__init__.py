"""Materials module: the material capability and reference implementations.

Components:
    material: The Material protocol consumed by the integrator
    lambertian: Ideal diffuse reflection with optional emission (area lights)
    metal: Specular reflection with optional roughness

Each material provides:
    - scatter(hit, ray, rng): sample an outgoing ray with its BRDF weight and pdf
    - emission(): emitted radiance
"""

from .lambertian import Lambertian
from .material import Material
from .metal import Metal

__all__ = [
    "Material",
    "Lambertian",
    "Metal",
]
