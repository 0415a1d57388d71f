"""Triangle primitives using the Moller-Trumbore intersection algorithm.

Two flavours are provided:
- Triangle: owns its three vertices.
- IndexedTriangle: a lightweight (buffer, index) handle into a shared
  MeshBuffer. Many indexed triangles share one read-only buffer and vertex
  data is never copied per triangle.

Both report the one-sided geometric normal normalize(cross(b - a, c - a));
front/back orientation is resolved by HitRecord.from_ray.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

import numpy as np

from pathtracer.core.ray import HitRecord, Ray, Vec3, as_vec3, cross, dot, normalize
from pathtracer.geometry.aabb import AABB

if TYPE_CHECKING:
    from pathtracer.geometry.mesh import MeshBuffer
    from pathtracer.materials.material import Material

# Rays whose determinant falls below this are treated as parallel to the triangle
EPSILON = 1e-4


def moller_trumbore(ray: Ray, a: Vec3, b: Vec3, c: Vec3) -> tuple[float, float, float] | None:
    """Intersect a ray with the triangle (a, b, c).

    Args:
        ray: The ray to test.
        a: First vertex.
        b: Second vertex.
        c: Third vertex.

    Returns:
        (t, u, v) where the hit point is a + u*(b - a) + v*(c - a), or None if
        the ray is (nearly) parallel to the triangle plane or the barycentric
        coordinates fall outside the triangle. t is not range-checked.
    """
    e1 = b - a
    e2 = c - a
    q = cross(ray.direction, e2)
    det = dot(e1, q)
    if abs(det) < EPSILON:
        return None
    f = 1.0 / det
    s = ray.origin - a
    u = f * dot(s, q)
    if u < 0.0:
        return None
    r = cross(s, e1)
    v = f * dot(ray.direction, r)
    if v < 0.0 or u + v > 1.0:
        return None
    t = f * dot(e2, r)
    return t, u, v


def _triangle_box(a: Vec3, b: Vec3, c: Vec3) -> AABB:
    return AABB(
        minimum=np.minimum(a, np.minimum(b, c)),
        maximum=np.maximum(a, np.maximum(b, c)),
    )


def _hit_triangle(
    ray: Ray,
    a: Vec3,
    b: Vec3,
    c: Vec3,
    material: Material | None,
    t_min: float,
    t_max: float,
) -> tuple[HitRecord, float, float] | None:
    result = moller_trumbore(ray, a, b, c)
    if result is None:
        return None
    t, u, v = result
    if t < t_min or t > t_max:
        return None
    normal = normalize(cross(b - a, c - a))
    return HitRecord.from_ray(t, normal, material, ray), u, v


class Triangle:
    """A free-standing triangle.

    Attributes:
        a: First vertex.
        b: Second vertex.
        c: Third vertex.
        material: Material reported on hits.
    """

    def __init__(self, a: Any, b: Any, c: Any, material: Material | None = None) -> None:
        self.a = as_vec3(a)
        self.b = as_vec3(b)
        self.c = as_vec3(c)
        self.material = material

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        found = _hit_triangle(ray, self.a, self.b, self.c, self.material, t_min, t_max)
        return None if found is None else found[0]

    def bounding_box(self) -> AABB:
        return _triangle_box(self.a, self.b, self.c)

    def __repr__(self) -> str:
        return f"Triangle(a={self.a.tolist()}, b={self.b.tolist()}, c={self.c.tolist()})"


class IndexedTriangle:
    """Triangle number ``index`` of a shared MeshBuffer.

    Hits carry no material; the owning Mesh stamps its own. When the buffer
    has texture coordinates, hits also carry the interpolated UV and the
    tangent frame derived from the UV parameterisation.
    """

    __slots__ = ("buffer", "index")

    def __init__(self, buffer: MeshBuffer, index: int) -> None:
        if not 0 <= index < buffer.triangle_count:
            raise IndexError(
                f"Triangle index {index} out of range for {buffer.triangle_count} triangles"
            )
        self.buffer = buffer
        self.index = index

    def vertices(self) -> tuple[Vec3, Vec3, Vec3]:
        """Resolve the three vertex positions from the shared buffer."""
        return self.buffer.triangle(self.index)

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        a, b, c = self.vertices()
        found = _hit_triangle(ray, a, b, c, None, t_min, t_max)
        if found is None:
            return None
        hit, u, v = found
        if self.buffer.texcoords is None:
            return hit
        return self._with_surface_frame(hit, a, b, c, u, v)

    def _with_surface_frame(
        self, hit: HitRecord, a: Vec3, b: Vec3, c: Vec3, u: float, v: float
    ) -> HitRecord:
        uv_a, uv_b, uv_c = self.buffer.triangle_texcoords(self.index)
        tex_coords = (1.0 - u - v) * uv_a + u * uv_b + v * uv_c

        e1 = b - a
        e2 = c - a
        duv1 = uv_b - uv_a
        duv2 = uv_c - uv_a
        det = duv1[0] * duv2[1] - duv2[0] * duv1[1]
        if abs(det) < 1e-12:
            # Degenerate UV mapping: no usable tangent frame
            return replace(hit, tex_coords=tex_coords)
        r = 1.0 / det
        tangent = normalize((e1 * duv2[1] - e2 * duv1[1]) * r)
        bitangent = normalize((e2 * duv1[0] - e1 * duv2[0]) * r)
        return replace(hit, tex_coords=tex_coords, tangent=tangent, bitangent=bitangent)

    def bounding_box(self) -> AABB:
        return _triangle_box(*self.vertices())

    def __repr__(self) -> str:
        return f"IndexedTriangle(index={self.index})"
