"""Infinite plane primitive.

Planes have no bounding box, so they live at the top level of a scene and are
never placed inside a BVH.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from pathtracer.core.ray import HitRecord, Ray, as_vec3, dot, normalize

if TYPE_CHECKING:
    from pathtracer.materials.material import Material


class Plane:
    """A plane through a point with a given normal.

    Attributes:
        point: Any point on the plane.
        normal: Unit plane normal. Either side may be hit.
        material: Material reported on hits.
    """

    def __init__(self, point: Any, normal: Any, material: Material | None = None) -> None:
        n = as_vec3(normal)
        if not n.any():
            raise ValueError("Plane normal must be non-zero")
        self.point = as_vec3(point)
        self.normal = normalize(n)
        self.material = material

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Signed-distance ray-plane test.

        The plane normal is first flipped toward the side holding the ray
        origin. Rays parallel to the plane or moving away from it miss.
        """
        origin_dist = dot(ray.origin - self.point, self.normal)
        facing = math.copysign(1.0, origin_dist) * self.normal
        d = dot(ray.direction, facing)
        if d >= 0.0:
            return None

        t = abs(origin_dist) / abs(d)
        if t < t_min or t > t_max:
            return None
        return HitRecord.from_ray(t, facing, self.material, ray)

    def bounding_box(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Plane(point={self.point.tolist()}, normal={self.normal.tolist()})"
