"""
Random placement of vertices.

New vertices start at uniformly random positions inside a small cube so
that no two coincide; the force simulation then spreads them out.
random_layout() re-scatters an existing graph, which is useful as a
restart when a layout has settled into a poor configuration.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Optional

import numpy as np

from ..types import Vector, VectorLike
from ..validation import validate_positive, validate_vector

if TYPE_CHECKING:
    from ..graph import Graph


def random_position(
    rng: random.Random,
    extent: float = 1.0,
    origin: Optional[VectorLike] = None,
) -> Vector:
    """
    Draw a position uniformly from the cube [origin, origin + extent)^3.

    Args:
        rng: Random number generator
        extent: Cube edge length
        origin: Lowest corner of the cube (default: (0, 0, 0))
    """
    corner = np.zeros(3) if origin is None else validate_vector(origin, "origin")
    return corner + np.array([rng.random(), rng.random(), rng.random()]) * extent


def random_layout(
    graph: Graph,
    extent: Optional[float] = None,
    random_seed: Optional[int] = None,
    origin: Optional[VectorLike] = None,
    reset_velocity: bool = True,
) -> Graph:
    """
    Place every vertex of a graph at a random position.

    Args:
        graph: Graph to re-scatter
        extent: Cube edge length (default: graph.config.initial_extent)
        random_seed: Seed for reproducible placement. If None, the graph's
            own generator is used.
        origin: Lowest corner of the cube (default: (0, 0, 0))
        reset_velocity: Zero velocities and accelerations as well

    Returns:
        graph
    """
    size = graph.config.initial_extent if extent is None else validate_positive(extent, "extent")
    rng = graph.rng if random_seed is None else random.Random(random_seed)

    for vertex in graph.vertices:
        vertex.position = random_position(rng, size, origin)
        if reset_velocity:
            vertex.velocity.fill(0.0)
            vertex.acceleration.fill(0.0)

    return graph


__all__ = ["random_position", "random_layout"]
