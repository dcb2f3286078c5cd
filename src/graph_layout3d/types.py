"""
Common types for the 3D layout engine.

This module provides the fundamental records shared by every component:
- Vertex: Graph vertex with physical state (position, velocity, ...)
- Edge: Spring between two vertices
- LayoutSummary: Per-tick result of Graph.layout()
- EventType: Layout lifecycle events
- Event: Event payload for callbacks

Vertices and edges carry no rendering state. A rendering layer keys its
own geometry by the integer ``id`` of each record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Optional, Sequence, TypedDict, Union

import numpy as np

Vector = np.ndarray
"""A float64 numpy array of shape (3,)."""

VectorLike = Union[Sequence[float], np.ndarray]
"""Input type for positions and velocities: (x, y, z) tuple, list or array."""

ForceFunction = Callable[[Vector, Vector], Vector]
"""Pairwise force from the point in the second argument on the first."""


def zero_vector() -> Vector:
    """Return a new zero 3-vector."""
    return np.zeros(3, dtype=np.float64)


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Graph.run() has begun
    - tick: Fired once per layout() call (for redraws)
    - end: Graph.run() has converged or exhausted its budget
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    tick: int
    summary: Optional[LayoutSummary]


class Vertex:
    """
    Graph vertex with physical state.

    Attributes:
        id: Identity, unique within the owning graph and never reused
        position: Current position (x, y, z)
        velocity: Current velocity
        acceleration: Acceleration applied during the last tick
        edges: Ids of incident edges (maintained by the graph)
        repulsion_forces: Per-tick repulsion accumulator
        attraction_forces: Per-tick attraction accumulator
    """

    def __init__(
        self,
        id: int,
        position: VectorLike,
        velocity: Optional[VectorLike] = None,
        /,
        **kwargs: Any,
    ) -> None:
        """
        Initialize vertex; extra keyword properties are copied as attributes.

        Built-in fields are positional-only, so a property named like one
        of them (e.g. a host's own ``id``) lands in kwargs and is skipped.
        """
        self.id: int = id
        self.position: Vector = np.array(position, dtype=np.float64)
        self.velocity: Vector = (
            zero_vector() if velocity is None else np.array(velocity, dtype=np.float64)
        )
        self.acceleration: Vector = zero_vector()
        self.edges: set[int] = set()

        # Scratch accumulators, reset at the start of every tick
        self.repulsion_forces: Vector = zero_vector()
        self.attraction_forces: Vector = zero_vector()

        # Copy any additional custom properties
        for key, value in kwargs.items():
            if not hasattr(self, key):
                setattr(self, key, value)

    def reset_forces(self) -> None:
        """Zero acceleration and both force accumulators."""
        self.acceleration.fill(0.0)
        self.repulsion_forces.fill(0.0)
        self.attraction_forces.fill(0.0)

    @property
    def degree(self) -> int:
        """Number of incident edges."""
        return len(self.edges)

    def __repr__(self) -> str:
        x, y, z = self.position
        return f"Vertex(id={self.id}, x={x:.2f}, y={y:.2f}, z={z:.2f})"


class Edge:
    """
    Spring connecting two vertices.

    Attributes:
        id: Identity, unique within the owning graph and never reused
        source: Source vertex id
        target: Target vertex id
        attraction: Spring constant of this edge
    """

    def __init__(
        self,
        id: int,
        source: int,
        target: int,
        attraction: float,
        /,
        **kwargs: Any,
    ) -> None:
        self.id: int = id
        self.source: int = source
        self.target: int = target
        self.attraction: float = float(attraction)

        # Copy any additional custom properties
        for key, value in kwargs.items():
            if not hasattr(self, key):
                setattr(self, key, value)

    def other(self, vertex_id: int) -> int:
        """Return the endpoint opposite to vertex_id."""
        return self.target if vertex_id == self.source else self.source

    def __repr__(self) -> str:
        return f"Edge(id={self.id}, {self.source} -> {self.target})"


@dataclass(frozen=True)
class LayoutSummary:
    """
    Result of one layout tick.

    Attributes:
        tick: Number of ticks the graph has run, including this one
        max_displacement: Largest position change of any vertex this tick
        kinetic_energy: Sum of 0.5 * |velocity|^2 after the tick
        unstable: Ids of vertices rolled back because their state went non-finite
    """

    tick: int
    max_displacement: float = 0.0
    kinetic_energy: float = 0.0
    unstable: tuple[int, ...] = field(default_factory=tuple)

    @property
    def stable(self) -> bool:
        """True if no vertex had to be rolled back."""
        return not self.unstable


VertexRef = Union[Vertex, int]
"""A vertex given by record or id."""

EdgeRef = Union[Edge, int]
"""An edge given by record or id."""


__all__ = [
    "Vector",
    "VectorLike",
    "ForceFunction",
    "zero_vector",
    "EventType",
    "Event",
    "Vertex",
    "Edge",
    "LayoutSummary",
    "VertexRef",
    "EdgeRef",
]
