"""
Pairwise force laws used by the layout tick.

Two forces act on vertices:
- Repulsion between every pair, a softened inverse-square law
  F = repulsion / (epsilon + r)^2 along the separation
- Attraction along edges, a zero rest-length spring (Hooke's law)
  F = -attraction * (x_source - x_target)

Both are plain functions of positions and constants so the spatial tree
and the graph can share them.
"""

from __future__ import annotations

import math
from functools import partial

import numpy as np

from ..config import LayoutConfig
from ..types import ForceFunction, Vector
from ..validation import DegenerateSeparationError


def pairwise_repulsion(
    epsilon: float,
    repulsion: float,
    x1: Vector,
    x2: Vector,
    min_separation: float = 1e-9,
) -> Vector:
    """
    Repulsive force exerted by a point at x2 on a point at x1.

    The result points from x2 toward x1 with magnitude
    ``repulsion / (epsilon + r)**2`` where ``r = |x1 - x2|``.

    Separation is clamped to min_separation, so coincident points yield
    the zero vector (their direction is undefined). With min_separation
    of 0 coincident points raise instead.

    Args:
        epsilon: Softening term
        repulsion: Repulsion strength
        x1: Position the force acts on
        x2: Position of the repelling point
        min_separation: Lower clamp for r

    Returns:
        New force vector

    Raises:
        DegenerateSeparationError: If r == 0 and min_separation == 0
    """
    difference = np.subtract(x1, x2, dtype=np.float64)
    distance = math.sqrt(float(difference @ difference))

    if distance < min_separation:
        distance = min_separation
    if distance == 0.0:
        raise DegenerateSeparationError(
            f"Repulsion between coincident points {tuple(np.asarray(x1).tolist())} "
            "is undefined; use a positive min_separation"
        )

    magnitude = repulsion / ((epsilon + distance) ** 2)
    return difference * (magnitude / distance)


def pairwise_attraction(attraction: float, source: Vector, target: Vector) -> tuple[Vector, Vector]:
    """
    Spring force between the two endpoints of an edge.

    Args:
        attraction: Spring constant
        source: Source position
        target: Target position

    Returns:
        (force on source, force on target); the two sum to zero
    """
    on_source = np.subtract(source, target, dtype=np.float64) * -attraction
    return on_source, -on_source


def repulsion_from_config(config: LayoutConfig) -> ForceFunction:
    """Bind the repulsion law to a configuration, giving a ``force_fn(x1, x2)``."""
    return partial(
        _bound_repulsion,
        config.epsilon,
        config.repulsion,
        config.min_separation,
    )


def _bound_repulsion(
    epsilon: float,
    repulsion: float,
    min_separation: float,
    x1: Vector,
    x2: Vector,
) -> Vector:
    return pairwise_repulsion(epsilon, repulsion, x1, x2, min_separation)


__all__ = [
    "pairwise_repulsion",
    "pairwise_attraction",
    "repulsion_from_config",
]
