"""Indexed triangle meshes.

A MeshBuffer holds the flat, read-only vertex and index arrays produced by an
external loader. A Mesh wraps one buffer with a material and a BVH built over
lightweight IndexedTriangle handles into that buffer.

Example:
    >>> from pathtracer.geometry.mesh import Mesh, MeshBuffer
    >>> buffer = MeshBuffer(
    ...     positions=[0, 0, 0, 1, 0, 0, 0, 1, 0],
    ...     indices=[0, 1, 2],
    ... )
    >>> buffer.triangle_count
    1
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt

from pathtracer.core.ray import HitRecord, Ray, Vec3
from pathtracer.geometry.aabb import AABB
from pathtracer.geometry.bvh import BVH
from pathtracer.geometry.triangle import IndexedTriangle

if TYPE_CHECKING:
    from pathtracer.materials.material import Material

logger = logging.getLogger(__name__)


def _frozen(array: npt.NDArray[Any]) -> npt.NDArray[Any]:
    array.setflags(write=False)
    return array


class MeshBuffer:
    """Shared, immutable vertex/index storage for a triangle mesh.

    Attributes:
        positions: Flat float array, 3 floats per vertex.
        indices: Flat integer array, 3 vertex indices per triangle.
        texcoords: Optional flat float array, 2 floats per vertex.
    """

    def __init__(self, positions: Any, indices: Any, texcoords: Any | None = None) -> None:
        positions = np.array(positions, dtype=np.float64).reshape(-1)
        indices = np.array(indices, dtype=np.int64).reshape(-1)
        if positions.size % 3 != 0:
            raise ValueError(f"Position count {positions.size} is not a multiple of 3")
        if indices.size % 3 != 0:
            raise ValueError(f"Index count {indices.size} is not a multiple of 3")
        vertex_count = positions.size // 3
        if indices.size and (indices.min() < 0 or indices.max() >= vertex_count):
            raise ValueError(f"Mesh indices out of range for {vertex_count} vertices")

        self.positions = _frozen(positions)
        self.indices = _frozen(indices)
        self._vertices = _frozen(positions.reshape(-1, 3))

        self.texcoords: npt.NDArray[np.float64] | None = None
        self._uvs: npt.NDArray[np.float64] | None = None
        if texcoords is not None:
            uv = np.array(texcoords, dtype=np.float64).reshape(-1)
            if uv.size != 2 * vertex_count:
                raise ValueError(
                    f"Expected {2 * vertex_count} texture coordinates, got {uv.size}"
                )
            self.texcoords = _frozen(uv)
            self._uvs = _frozen(uv.reshape(-1, 2))

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def triangle_count(self) -> int:
        return self.indices.size // 3

    def triangle(self, index: int) -> tuple[Vec3, Vec3, Vec3]:
        """Return the three vertex positions of triangle ``index``."""
        i = 3 * index
        return (
            self._vertices[self.indices[i]],
            self._vertices[self.indices[i + 1]],
            self._vertices[self.indices[i + 2]],
        )

    def triangle_texcoords(
        self, index: int
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Return the three texture coordinates of triangle ``index``.

        Raises:
            ValueError: If the buffer has no texture coordinates.
        """
        if self._uvs is None:
            raise ValueError("Mesh buffer has no texture coordinates")
        i = 3 * index
        return (
            self._uvs[self.indices[i]],
            self._uvs[self.indices[i + 1]],
            self._uvs[self.indices[i + 2]],
        )

    def transformed(self, matrix: Any) -> MeshBuffer:
        """Return a new buffer with a 4x4 affine transform applied to positions.

        Indices and texture coordinates are shared with this buffer.
        """
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {m.shape}")
        homogeneous = np.hstack([self._vertices, np.ones((self.vertex_count, 1))])
        moved = homogeneous @ m.T
        return MeshBuffer(moved[:, :3], self.indices, self.texcoords)


class Mesh:
    """A triangle mesh with a single material, accelerated by a BVH."""

    def __init__(
        self,
        buffer: MeshBuffer,
        material: Material | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.buffer = buffer
        self.material = material
        triangles = [IndexedTriangle(buffer, i) for i in range(buffer.triangle_count)]
        self.bvh = BVH.build(triangles, rng=rng)
        logger.info("Built mesh BVH over %d triangles", buffer.triangle_count)

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        hit = self.bvh.intersect(ray, t_min, t_max)
        if hit is None:
            return None
        return replace(hit, material=self.material)

    def bounding_box(self) -> AABB:
        return self.bvh.bounding_box()

    def __repr__(self) -> str:
        return f"Mesh(triangles={self.buffer.triangle_count})"
