"""Scene container: camera, top-level objects and debug lighting.

A Scene is assembled once before rendering and never mutated while a render is
running, which is what lets the render driver share it between worker threads
without locks.

Top-level look-up is a linear scan over ``objects``; acceleration happens
inside compound objects such as meshes, which carry their own BVH.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from pathtracer.camera.thin_lens import Camera
from pathtracer.core.ray import Color, HitRecord, Ray, Vec3, as_vec3, normalize, vec3
from pathtracer.geometry.intersectable import Intersectable

# Radiance seen along rays that leave the scene, as a function of direction
Background = Callable[[Vec3], Color]


def black_background(direction: Vec3) -> Color:
    """Zero-radiance void."""
    return np.zeros(3)


def sky_background(direction: Vec3) -> Color:
    """White-to-blue vertical gradient."""
    t = 0.5 * (normalize(direction)[1] + 1.0)
    return (1.0 - t) * vec3(1.0, 1.0, 1.0) + t * vec3(0.5, 0.7, 1.0)


class Scene:
    """A renderable scene.

    Attributes:
        camera: Camera and render settings.
        objects: Ordered top-level intersectables.
        point_light_pos: Point light used only by Phong debug shading.
        ambient: Ambient term used only by Phong debug shading.
        background: Radiance for rays that miss every object.
    """

    def __init__(
        self,
        camera: Camera,
        objects: Sequence[Intersectable],
        point_light_pos: Any = (0.0, 1.0, 5.0),
        ambient: Any = (0.1, 0.1, 0.1),
        background: Background = black_background,
    ) -> None:
        self.camera = camera
        self.objects = tuple(objects)
        self.point_light_pos = as_vec3(point_light_pos)
        self.ambient = as_vec3(ambient)
        self.background = background

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Return the closest hit over all objects.

        Ties keep the object that appears first in ``objects``.
        """
        best: HitRecord | None = None
        closest = t_max
        for obj in self.objects:
            hit = obj.intersect(ray, t_min, closest)
            if hit is not None and (best is None or hit.t < best.t):
                best = hit
                closest = hit.t
        return best

    def bounding_box(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Scene(objects={len(self.objects)}, camera={self.camera!r})"
