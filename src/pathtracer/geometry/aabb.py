"""Axis-aligned bounding boxes.

Boxes are only ever used as traversal gates inside the BVH: a box test answers
"could this subtree be hit in [t_min, t_max]?" and never produces a hit record.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np

from pathtracer.core.ray import Ray, Vec3, as_vec3

# Zero-thickness slabs (axis-aligned triangles) are widened to this width for
# the ray test so that flat boxes stay hittable.
MIN_SLAB_WIDTH = 1e-4


@dataclass(frozen=True, eq=False)
class AABB:
    """Axis-aligned bounding box.

    Attributes:
        minimum: Per-axis lower corner.
        maximum: Per-axis upper corner. minimum[i] <= maximum[i] for boxes
            built from real geometry.
    """

    minimum: Vec3
    maximum: Vec3

    @classmethod
    def from_points(cls, points: Iterable[Any]) -> AABB:
        """Build the tight box around a set of points.

        Raises:
            ValueError: If no points are given.
        """
        stacked = np.array([as_vec3(p) for p in points])
        if stacked.size == 0:
            raise ValueError("Cannot bound an empty point set")
        return cls(minimum=stacked.min(axis=0), maximum=stacked.max(axis=0))

    @classmethod
    def empty(cls) -> AABB:
        """Degenerate box at the origin."""
        return cls(minimum=np.zeros(3), maximum=np.zeros(3))

    @staticmethod
    def surrounding(a: AABB, b: AABB) -> AABB:
        """Return the smallest box containing both a and b."""
        return AABB(
            minimum=np.minimum(a.minimum, b.minimum),
            maximum=np.maximum(a.maximum, b.maximum),
        )

    def contains(self, other: AABB) -> bool:
        """Check whether other lies entirely inside this box."""
        return bool(
            np.all(self.minimum <= other.minimum) and np.all(other.maximum <= self.maximum)
        )

    def ray_intersects(self, ray: Ray, t_min: float, t_max: float) -> bool:
        """Slab test against the ray over the interval [t_min, t_max].

        Each axis narrows the interval to the parametric range spent inside
        that axis's slab; the test fails as soon as the interval is empty.
        """
        for axis in range(3):
            origin = float(ray.origin[axis])
            direction = float(ray.direction[axis])
            lo = float(self.minimum[axis])
            hi = float(self.maximum[axis])
            if hi - lo < MIN_SLAB_WIDTH:
                pad = 0.5 * (MIN_SLAB_WIDTH - (hi - lo))
                lo -= pad
                hi += pad
            if direction == 0.0:
                # Parallel to this slab: inside for every t or never
                if origin < lo or origin > hi:
                    return False
                continue
            inv_d = 1.0 / direction
            t0 = (lo - origin) * inv_d
            t1 = (hi - origin) * inv_d
            if inv_d < 0.0:
                t0, t1 = t1, t0
            t_min = max(t0, t_min)
            t_max = min(t1, t_max)
            if t_max <= t_min:
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return bool(
            np.array_equal(self.minimum, other.minimum)
            and np.array_equal(self.maximum, other.maximum)
        )

    def __hash__(self) -> int:
        return hash((tuple(self.minimum.tolist()), tuple(self.maximum.tolist())))

    def __repr__(self) -> str:
        return f"AABB(minimum={self.minimum.tolist()}, maximum={self.maximum.tolist()})"
