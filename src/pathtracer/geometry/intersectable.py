"""Capability contract shared by every intersectable object."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathtracer.core.ray import HitRecord, Ray
    from pathtracer.geometry.aabb import AABB


@runtime_checkable
class Intersectable(Protocol):
    """Anything a ray can be tested against.

    Primitives, meshes, BVHs and the scene itself all satisfy this protocol,
    so they can be nested freely.
    """

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Return the closest hit with t in [t_min, t_max], or None."""
        ...

    def bounding_box(self) -> AABB | None:
        """Return the world-space bounds, or None for unbounded objects."""
        ...
