"""Material capability contract consumed by the integrator.

The integrator treats any object with ``scatter`` and ``emission`` as a
material and never inspects concrete material kinds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import numpy as np

    from pathtracer.core.ray import Color, HitRecord, Ray


@runtime_checkable
class Material(Protocol):
    """Surface scattering and emission capability."""

    def scatter(
        self, hit: HitRecord, ray: Ray, rng: np.random.Generator
    ) -> tuple[Ray, Color, float]:
        """Sample an outgoing ray at a hit.

        Args:
            hit: The hit record, with the normal facing the incoming ray.
            ray: The incoming ray.
            rng: Random source for the sample.

        Returns:
            A tuple of (scattered_ray, brdf_weight, pdf). The integrator
            accumulates cos(theta) * brdf_weight * incoming / pdf.
        """
        ...

    def emission(self) -> Color:
        """Radiance emitted by the surface."""
        ...
