"""Sphere primitive with ray-sphere intersection.

The ray-sphere intersection is found by solving:
    |ray_origin + t * ray_direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + 2*h*t + c = 0 with
    a = dot(direction, direction)
    h = dot(direction, oc)  (half of the traditional b)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Only the smaller root is considered. A ray starting inside the sphere sees a
negative smaller root and therefore reports no hit.

Example:
    >>> from pathtracer.core.ray import make_ray
    >>> from pathtracer.geometry.sphere import Sphere
    >>> sphere = Sphere(center=(0.0, 0.0, 0.0), radius=1.0)
    >>> hit = sphere.intersect(make_ray((0, 0, 5), (0, 0, -1)), 0.0, 100.0)
    >>> hit.t
    4.0
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

import numpy as np

from pathtracer.core.ray import HitRecord, Ray, as_vec3, dot
from pathtracer.geometry.aabb import AABB

if TYPE_CHECKING:
    from pathtracer.materials.material import Material


class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        material: Material reported on hits.
    """

    def __init__(self, center: Any, radius: float, material: Material | None = None) -> None:
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = as_vec3(center)
        self.radius = float(radius)
        self.material = material

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Test for ray-sphere intersection.

        Args:
            ray: The ray to test.
            t_min: Minimum t value for a valid hit.
            t_max: Maximum t value for a valid hit.

        Returns:
            The hit at the smaller root, or None if the discriminant is
            negative or that root lies outside [t_min, t_max].
        """
        oc = ray.origin - self.center
        a = dot(ray.direction, ray.direction)
        h = dot(ray.direction, oc)
        c = dot(oc, oc) - self.radius * self.radius

        discriminant = h * h - a * c
        if discriminant < 0.0:
            return None

        t = (-h - math.sqrt(discriminant)) / a
        if t < t_min or t > t_max:
            return None

        point = ray.origin + t * ray.direction
        outward_normal = (point - self.center) / self.radius
        return HitRecord.from_ray(t, outward_normal, self.material, ray)

    def bounding_box(self) -> AABB:
        """Return the cube of half-width radius around the center."""
        r = np.full(3, self.radius)
        return AABB(minimum=self.center - r, maximum=self.center + r)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center.tolist()}, radius={self.radius})"
