"""Geometry module for shape primitives and spatial acceleration.

Components:
    intersectable: The Intersectable capability contract
    aabb: Axis-aligned bounding boxes and the ray slab test
    sphere: Sphere primitive
    plane: Infinite plane primitive (unbounded)
    triangle: Free-standing and mesh-indexed triangles (Moller-Trumbore)
    bvh: Bounding volume hierarchy stored as a node arena
    mesh: Shared mesh buffers and BVH-backed meshes

Ray-object intersection follows the pattern:
    hit = shape.intersect(ray, t_min, t_max)  # HitRecord or None
"""

from .aabb import AABB
from .bvh import BVH, BVHNode
from .intersectable import Intersectable
from .mesh import Mesh, MeshBuffer
from .plane import Plane
from .sphere import Sphere
from .triangle import IndexedTriangle, Triangle, moller_trumbore

__all__ = [
    "AABB",
    "BVH",
    "BVHNode",
    "Intersectable",
    "Mesh",
    "MeshBuffer",
    "Plane",
    "Sphere",
    "Triangle",
    "IndexedTriangle",
    "moller_trumbore",
]
