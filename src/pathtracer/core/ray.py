"""Ray and hit record data structures with vector utilities.

This module provides the Ray and HitRecord value types threaded through every
intersection query, together with small vector helpers and the random
sampling routines used by the camera and materials. Vectors are NumPy float64
arrays of shape (3,). Every sampling routine takes an explicit
``numpy.random.Generator`` so renders can be made reproducible.

Example:
    >>> from pathtracer.core.ray import Ray, ray_at, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> ray_at(ray, 5.0)
    array([ 0.,  0., -5.])
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from pathtracer.materials.material import Material

# Type aliases for 3D vectors and RGB radiance
Vec3 = npt.NDArray[np.float64]
Color = Vec3


def vec3(x: float, y: float, z: float) -> Vec3:
    """Build a 3-vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value: Any) -> Vec3:
    """Convert a sequence of three numbers into a float64 vector.

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    v = np.asarray(value, dtype=np.float64).reshape(-1)
    if v.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {v.shape}")
    return v


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray. It need not be normalized,
            but must be non-zero.
    """

    origin: Vec3
    direction: Vec3


def ray_at(ray: Ray, t: float) -> Vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


def make_ray(origin: Any, direction: Any) -> Ray:
    """Create a ray from any pair of 3-component sequences."""
    return Ray(origin=as_vec3(origin), direction=as_vec3(direction))


@dataclass(frozen=True, eq=False)
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        t: Distance along the ray (in units of the ray direction).
        point: World-space hit point.
        normal: Surface normal, always oriented against the incoming ray.
        material: The material capability active at the hit. Triangles that
            belong to a mesh report None and the mesh fills it in.
        front_face: True if the ray hit the side the geometric normal points to.
        tex_coords: Texture coordinate, when the primitive supplies one.
        tangent: Surface tangent, when the primitive supplies one.
        bitangent: Surface bitangent, when the primitive supplies one.
    """

    t: float
    point: Vec3
    normal: Vec3
    material: Material | None
    front_face: bool
    tex_coords: npt.NDArray[np.float64] | None = None
    tangent: Vec3 | None = None
    bitangent: Vec3 | None = None

    @classmethod
    def from_ray(
        cls,
        t: float,
        outward_normal: Vec3,
        material: Material | None,
        ray: Ray,
    ) -> HitRecord:
        """Build a hit record, re-orienting the normal to face the ray.

        Args:
            t: Distance along the ray.
            outward_normal: Geometric normal of the surface.
            material: Material at the hit.
            ray: The incoming ray.

        Returns:
            A HitRecord whose normal satisfies dot(normal, ray.direction) <= 0.
        """
        front_face = dot(outward_normal, ray.direction) < 0.0
        return cls(
            t=t,
            point=ray_at(ray, t),
            normal=outward_normal if front_face else -outward_normal,
            material=material,
            front_face=front_face,
        )


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product a x b."""
    return np.array(
        (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ),
        dtype=np.float64,
    )


def length_squared(v: Vec3) -> float:
    """Compute the squared length of a vector."""
    return dot(v, v)


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(length_squared(v))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Returns:
        A unit vector in the same direction as v. A zero-length input is
        returned unchanged.
    """
    n = length(v)
    if n == 0.0:
        return v
    return v / n


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a unit normal."""
    return incident - 2.0 * dot(incident, normal) * normal


def near_zero(v: Vec3) -> bool:
    """Check if a vector is near zero in all components."""
    s = 1e-8
    return abs(v[0]) < s and abs(v[1]) < s and abs(v[2]) < s


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
    """Generate a random point inside the unit sphere by rejection sampling."""
    while True:
        p = rng.uniform(-1.0, 1.0, size=3)
        if length_squared(p) <= 1.0:
            return p


def random_in_unit_disk(rng: np.random.Generator) -> Vec3:
    """Generate a random point (x, y, 0) inside the unit disk.

    Used by the thin-lens camera to sample the aperture.
    """
    while True:
        x, y = rng.uniform(-1.0, 1.0, size=2)
        if x * x + y * y <= 1.0:
            return vec3(x, y, 0.0)


def random_cosine_direction(rng: np.random.Generator) -> Vec3:
    """Generate a cosine-distributed direction in a z-up local frame.

    The distribution has PDF = cos(theta) / pi.
    """
    r1, r2 = rng.random(2)
    phi = 2.0 * math.pi * r1
    sqrt_r2 = math.sqrt(r2)
    return vec3(math.cos(phi) * sqrt_r2, math.sin(phi) * sqrt_r2, math.sqrt(1.0 - r2))


def build_onb_from_normal(normal: Vec3) -> tuple[Vec3, Vec3, Vec3]:
    """Build an orthonormal basis (tangent, bitangent, normal) around a unit normal."""
    a = vec3(0.0, 1.0, 0.0) if abs(normal[0]) > 0.9 else vec3(1.0, 0.0, 0.0)
    tangent = normalize(cross(a, normal))
    bitangent = cross(normal, tangent)
    return tangent, bitangent, normal


def local_to_world(local_dir: Vec3, tangent: Vec3, bitangent: Vec3, normal: Vec3) -> Vec3:
    """Transform a direction from a local z-up frame to world coordinates."""
    return local_dir[0] * tangent + local_dir[1] * bitangent + local_dir[2] * normal


def sample_cosine_hemisphere(normal: Vec3, rng: np.random.Generator) -> tuple[Vec3, float]:
    """Cosine-weighted hemisphere sampling around a unit normal.

    Returns:
        A tuple of (direction, pdf) where pdf = cos(theta) / pi.
    """
    local_dir = random_cosine_direction(rng)
    tangent, bitangent, n = build_onb_from_normal(normal)
    world_dir = local_to_world(local_dir, tangent, bitangent, n)
    return world_dir, max(dot(world_dir, normal), 0.0) / math.pi
