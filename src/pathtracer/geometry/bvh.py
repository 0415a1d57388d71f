"""Bounding volume hierarchy over bounded primitives.

The tree is stored as an arena: a flat tuple of BVHNode records addressed by
index. Leaves hold exactly one primitive and no children; interior nodes hold
exactly two children and no primitive. An interior node's box is the union of
its children's boxes and a leaf's box is its primitive's box.

Construction is top-down: each split picks one of the three axes at random,
sorts the range by box minimum on that axis and cuts it at the midpoint. This
gives balanced O(log n) depth without a surface-area cost model; build time is
amortised over the many rays traced against each mesh.

Example:
    >>> import numpy as np
    >>> from pathtracer.geometry.bvh import BVH
    >>> from pathtracer.geometry.sphere import Sphere
    >>> spheres = [Sphere((x, 0.0, 0.0), 0.4) for x in range(8)]
    >>> bvh = BVH.build(spheres, rng=np.random.default_rng(0))
    >>> bvh.leaf_count
    8
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np

from pathtracer.core.ray import HitRecord, Ray
from pathtracer.geometry.aabb import AABB
from pathtracer.geometry.intersectable import Intersectable

logger = logging.getLogger(__name__)

# Sentinel for "no child" / "no primitive"
NONE = -1


class BVHNode(NamedTuple):
    """One arena slot of the hierarchy.

    Attributes:
        box: Bounds of everything below this node.
        left: Arena index of the left child, or NONE for leaves.
        right: Arena index of the right child, or NONE for leaves.
        primitive: Index into BVH.primitives for leaves, NONE otherwise.
    """

    box: AABB
    left: int
    right: int
    primitive: int

    @property
    def is_leaf(self) -> bool:
        return self.primitive != NONE


class BVH:
    """Immutable binary hierarchy of bounding boxes over primitives.

    Use BVH.build() to construct one. The BVH is itself an Intersectable, so it
    can be placed directly in a scene or wrapped by a Mesh.
    """

    def __init__(
        self,
        primitives: Sequence[Intersectable],
        nodes: Sequence[BVHNode],
        root: int,
    ) -> None:
        self._primitives = tuple(primitives)
        self._nodes = tuple(nodes)
        self._root = root

    @classmethod
    def build(
        cls,
        primitives: Sequence[Intersectable],
        rng: np.random.Generator | None = None,
    ) -> BVH:
        """Build a hierarchy over the given primitives.

        Args:
            primitives: Bounded primitives. Order is not significant.
            rng: Random source for split-axis selection. A fresh unseeded
                generator is used when omitted.

        Returns:
            The constructed BVH.

        Raises:
            ValueError: If primitives is empty or any primitive is unbounded.
        """
        prims = list(primitives)
        if not prims:
            raise ValueError("Cannot build a BVH over zero primitives")

        boxes: list[AABB] = []
        for prim in prims:
            box = prim.bounding_box()
            if box is None:
                raise ValueError(f"Unbounded primitive {prim!r} cannot be placed in a BVH")
            boxes.append(box)

        if rng is None:
            rng = np.random.default_rng()

        order = list(range(len(prims)))
        nodes: list[BVHNode] = []

        def build_range(start: int, end: int) -> int:
            if end - start == 1:
                prim_index = order[start]
                nodes.append(BVHNode(boxes[prim_index], NONE, NONE, prim_index))
                return len(nodes) - 1

            axis = int(rng.integers(3))
            order[start:end] = sorted(order[start:end], key=lambda i: boxes[i].minimum[axis])
            mid = start + (end - start) // 2
            left = build_range(start, mid)
            right = build_range(mid, end)
            box = AABB.surrounding(nodes[left].box, nodes[right].box)
            nodes.append(BVHNode(box, left, right, NONE))
            return len(nodes) - 1

        root = build_range(0, len(prims))
        bvh = cls(prims, nodes, root)
        logger.debug(
            "Built BVH over %d primitives (%d nodes, depth %d)",
            len(prims),
            len(nodes),
            bvh.depth,
        )
        return bvh

    @property
    def primitives(self) -> tuple[Intersectable, ...]:
        return self._primitives

    @property
    def nodes(self) -> tuple[BVHNode, ...]:
        return self._nodes

    @property
    def root(self) -> int:
        return self._root

    @property
    def leaf_count(self) -> int:
        return sum(1 for node in self._nodes if node.is_leaf)

    @property
    def depth(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        deepest = 0
        stack = [(self._root, 1)]
        while stack:
            index, level = stack.pop()
            node = self._nodes[index]
            if node.is_leaf:
                deepest = max(deepest, level)
            else:
                stack.append((node.left, level + 1))
                stack.append((node.right, level + 1))
        return deepest

    def __len__(self) -> int:
        return len(self._primitives)

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> HitRecord | None:
        """Find the closest primitive hit in [t_min, t_max]."""
        return self._intersect_node(self._root, ray, t_min, t_max)

    def _intersect_node(
        self, index: int, ray: Ray, t_min: float, t_max: float
    ) -> HitRecord | None:
        node = self._nodes[index]
        if node.is_leaf:
            return self._primitives[node.primitive].intersect(ray, t_min, t_max)

        if not node.box.ray_intersects(ray, t_min, t_max):
            return None

        left_hit = self._intersect_node(node.left, ray, t_min, t_max)
        # The right subtree only needs to beat the closest hit found so far
        right_t_max = t_max if left_hit is None else left_hit.t
        right_hit = self._intersect_node(node.right, ray, t_min, right_t_max)

        if right_hit is not None and (left_hit is None or right_hit.t < left_hit.t):
            return right_hit
        return left_hit

    def bounding_box(self) -> AABB:
        return self._nodes[self._root].box

    def __repr__(self) -> str:
        return f"BVH(primitives={len(self._primitives)}, nodes={len(self._nodes)})"
