"""
Octree implementation for Barnes-Hut repulsion estimates in 3D.

Unlike a fixed-grid octree, each node here is centred on the running
center of mass of the vertices it has clustered. A vertex close enough
to that center joins the node's inner cluster; any other vertex is routed
to one of eight lazily created children chosen by its octant relative
to the center. Queries then treat a whole inner cluster as a single mass
unless the queried vertex is itself one of its members.

The center moves as vertices join and earlier members are never
re-examined, so the clustering depends on insertion order.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, Iterator, Optional

import numpy as np

from ..types import ForceFunction, Vector, Vertex, zero_vector
from ..validation import DuplicateVertexError, InternalInvariantViolation


class Octant(str, Enum):
    """
    Octant of a point relative to a node center.

    Labels combine {l, r} x {d, u} x {o, i}: left/right on x, down/up on
    y, out/in on z. A coordinate strictly greater than the center's maps
    to r/u/i.
    """

    LDO = "ldo"
    LDI = "ldi"
    LUO = "luo"
    LUI = "lui"
    RDO = "rdo"
    RDI = "rdi"
    RUO = "ruo"
    RUI = "rui"

    @classmethod
    def of(cls, center: Vector, position: Vector) -> Octant:
        """Return the octant of position relative to center."""
        x = "r" if position[0] > center[0] else "l"
        y = "u" if position[1] > center[1] else "d"
        z = "i" if position[2] > center[2] else "o"
        return cls(x + y + z)


class OctreeNode:
    """
    A node in the octree.

    Attributes:
        inner_distance: Clustering radius around the center of mass
        inners: Ids of vertices clustered into this node, mapped to the
            position they had when inserted
        center_sum: Sum of inner member positions
        outers: Child nodes keyed by octant, created on first use
    """

    def __init__(self, inner_distance: float = 0.36) -> None:
        self.inner_distance = float(inner_distance)
        self.inners: dict[int, Vector] = {}
        self.center_sum: Vector = zero_vector()
        self.outers: dict[Octant, OctreeNode] = {}

    def __len__(self) -> int:
        return len(self.inners)

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self.inners

    def __repr__(self) -> str:
        return f"OctreeNode(inners={len(self.inners)}, outers={len(self.outers)})"

    def is_empty(self) -> bool:
        """True if this node has received no vertex."""
        return not self.inners

    def center(self) -> Vector:
        """
        Center of mass of the inner cluster.

        Raises:
            InternalInvariantViolation: If the node has no inner members
        """
        if not self.inners:
            raise InternalInvariantViolation("center() called on an octree node with no inner members")
        return self.center_sum / len(self.inners)

    def get_octant(self, position: Vector) -> Octant:
        """Octant of position relative to this node's current center."""
        return Octant.of(self.center(), position)

    def insert(self, vertex: Vertex) -> None:
        """
        Insert a vertex into the subtree rooted at this node.

        Descends through outer children until the vertex either starts an
        empty node or falls within inner_distance of a node's center.
        """
        position = np.array(vertex.position, dtype=np.float64)
        node = self
        while True:
            if not node.inners:
                node._place_inner(vertex.id, position)
                return

            offset = position - node.center()
            if math.sqrt(float(offset @ offset)) <= node.inner_distance:
                node._place_inner(vertex.id, position)
                return

            octant = node.get_octant(position)
            child = node.outers.get(octant)
            if child is None:
                child = OctreeNode(node.inner_distance)
                node.outers[octant] = child
            node = child

    def _place_inner(self, vertex_id: int, position: Vector) -> None:
        self.inners[vertex_id] = position
        self.center_sum += position

    def estimate(
        self,
        vertex: Vertex,
        accumulator: Vector,
        force_fn: ForceFunction,
    ) -> Vector:
        """
        Accumulate the approximate force the subtree exerts on a vertex.

        For each node: if the vertex is one of its inner members, the
        force from every other member is summed exactly; otherwise the
        cluster acts as one mass of size len(inners) at its center.

        Args:
            vertex: Vertex the force acts on (its current position is used)
            accumulator: Vector updated in place
            force_fn: Pairwise force law, force_fn(x_on, x_from)

        Returns:
            accumulator
        """
        position = vertex.position
        stack: list[OctreeNode] = [self]
        while stack:
            node = stack.pop()
            if vertex.id in node.inners:
                for other_id, other_position in node.inners.items():
                    if other_id != vertex.id:
                        accumulator += force_fn(position, other_position)
            elif node.inners:
                accumulator += force_fn(position, node.center()) * len(node.inners)
            stack.extend(node.outers.values())
        return accumulator

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def iter_nodes(self) -> Iterator[OctreeNode]:
        """Yield this node and every descendant (pre-order)."""
        stack: list[OctreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.outers.values())))

    def members(self) -> list[int]:
        """Ids of all vertices in the subtree."""
        return [vertex_id for node in self.iter_nodes() for vertex_id in node.inners]

    def count(self) -> int:
        """Number of vertices in the subtree."""
        return sum(len(node.inners) for node in self.iter_nodes())

    def depth(self) -> int:
        """Number of levels in the subtree (1 for a node without children)."""
        deepest = 0
        stack: list[tuple[OctreeNode, int]] = [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.outers.values())
        return deepest

    def find(self, vertex_id: int) -> Optional[OctreeNode]:
        """Return the node whose inner cluster holds vertex_id, if any."""
        for node in self.iter_nodes():
            if vertex_id in node.inners:
                return node
        return None


def build_octree(vertices: Iterable[Vertex], inner_distance: float = 0.36) -> OctreeNode:
    """
    Build an octree from vertices in iteration order.

    Args:
        vertices: Vertices with id and position
        inner_distance: Clustering radius of every node

    Returns:
        Root node

    Raises:
        DuplicateVertexError: If the same id appears twice
    """
    root = OctreeNode(inner_distance)
    seen: set[int] = set()
    for vertex in vertices:
        if vertex.id in seen:
            raise DuplicateVertexError(f"Vertex {vertex.id} inserted twice into the same octree")
        seen.add(vertex.id)
        root.insert(vertex)
    return root


__all__ = ["Octant", "OctreeNode", "build_octree"]
