"""
Mutable graph with a 3D force-directed layout tick.

The Graph owns its vertices and edges in id-keyed arenas and advances a
physical simulation one tick per layout() call:

1. Every vertex is reset and inserted into a fresh clustering octree
2. Repulsion on every vertex is estimated from the octree (Barnes-Hut)
3. Every edge pulls its endpoints together with a zero-length spring
4. Velocity and position are integrated with linear friction
   (semi-implicit Euler)

Structure (which vertices and edges exist) only changes through the
add_*/remove_* methods; layout() only moves vertices.
"""

from __future__ import annotations

import math
import random
import warnings
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Optional, Union

import numpy as np

from .base import EventCallback, IterativeLayout
from .basic.random import random_position
from .config import LayoutConfig
from .force.model import pairwise_attraction, repulsion_from_config
from .spatial.octree import OctreeNode
from .types import (
    Edge,
    EdgeRef,
    EventType,
    LayoutSummary,
    Vertex,
    VertexRef,
    VectorLike,
)
from .validation import (
    EdgeNotFoundError,
    NumericalInstabilityWarning,
    UnknownVertexError,
    VertexNotFoundError,
    validate_non_negative,
    validate_vector,
)

if TYPE_CHECKING:
    from typing_extensions import Self


class Graph(IterativeLayout):
    """
    Graph of vertices and edges laid out by a 3D force simulation.

    Vertices repel each other (softened inverse-square law, estimated
    with an octree), edges attract their endpoints (Hooke's law with zero
    rest length) and friction damps velocity.

    Example:
        graph = Graph(repulsion=50.0, random_seed=1)
        a = graph.add_vertex()
        b = graph.add_vertex(position=(1, 0, 0))
        graph.add_edge(a, b)

        for _ in range(100):
            graph.layout()

        print(graph.get_position(a))
    """

    def __init__(
        self,
        config: Optional[Union[LayoutConfig, Mapping[str, Any]]] = None,
        *,
        on_start: Optional[EventCallback] = None,
        on_tick: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
        **overrides: Any,
    ) -> None:
        """
        Initialize an empty graph.

        Args:
            config: LayoutConfig or mapping of configuration values
            on_start: Callback for start event (run())
            on_tick: Callback for tick event (every layout())
            on_end: Callback for end event (run())
            **overrides: Configuration fields overriding config, e.g. friction=0.8

        Raises:
            InvalidConfigError: On unknown keys or out-of-range values
        """
        super().__init__(on_start=on_start, on_tick=on_tick, on_end=on_end)

        if isinstance(config, LayoutConfig):
            self._config = config.replace(**overrides) if overrides else config
        else:
            self._config = LayoutConfig.from_mapping(config, **overrides)

        self._vertices: dict[int, Vertex] = {}
        self._edges: dict[int, Edge] = {}
        self._next_vertex_id: int = 0
        self._next_edge_id: int = 0
        self._rng = random.Random(self._config.random_seed)
        self._force_fn = repulsion_from_config(self._config)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> LayoutConfig:
        """Current layout configuration."""
        return self._config

    @property
    def rng(self) -> random.Random:
        """Random generator used for initial positions."""
        return self._rng

    @property
    def vertices(self) -> list[Vertex]:
        """Vertices in insertion order."""
        return list(self._vertices.values())

    @property
    def edges(self) -> list[Edge]:
        """Edges in insertion order."""
        return list(self._edges.values())

    @property
    def tolerance(self) -> float:
        return self._config.tolerance

    @property
    def iterations(self) -> int:
        return self._config.iterations

    def reconfigure(self, **changes: Any) -> Self:
        """
        Replace the configuration with a copy that has changes applied.

        Existing edges keep their own attraction constants; only edges
        created afterwards pick up a new default. Changing random_seed
        does not reseed the generator of an existing graph.

        Raises:
            InvalidConfigError: On unknown keys or out-of-range values
        """
        self._config = self._config.replace(**changes)
        self._force_fn = repulsion_from_config(self._config)
        return self

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, item: object) -> bool:
        return self._lookup_vertex(item) is not None  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Vertex]:
        return iter(list(self._vertices.values()))

    def __repr__(self) -> str:
        return f"Graph(vertices={len(self._vertices)}, edges={len(self._edges)}, ticks={self._ticks})"

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def number_of_vertices(self) -> int:
        return len(self._vertices)

    def number_of_edges(self) -> int:
        return len(self._edges)

    def has_vertex(self, vertex: VertexRef) -> bool:
        return self._lookup_vertex(vertex) is not None

    def has_edge(self, edge: EdgeRef) -> bool:
        return self._lookup_edge(edge) is not None

    def vertex(self, vertex: VertexRef) -> Vertex:
        """
        Return the vertex record for an id.

        Raises:
            VertexNotFoundError: If the vertex is not in the graph
        """
        found = self._lookup_vertex(vertex)
        if found is None:
            raise VertexNotFoundError(f"Vertex {_ref_id(vertex)!r} is not in the graph")
        return found

    def edge(self, edge: EdgeRef) -> Edge:
        """
        Return the edge record for an id.

        Raises:
            EdgeNotFoundError: If the edge is not in the graph
        """
        found = self._lookup_edge(edge)
        if found is None:
            raise EdgeNotFoundError(f"Edge {_ref_id(edge)!r} is not in the graph")
        return found

    def neighbors(self, vertex: VertexRef) -> list[int]:
        """Ids of vertices sharing an edge with vertex (one entry per edge)."""
        v = self.vertex(vertex)
        return [self._edges[edge_id].other(v.id) for edge_id in sorted(v.edges)]

    def degree(self, vertex: VertexRef) -> int:
        return self.vertex(vertex).degree

    def get_position(self, vertex: VertexRef) -> tuple[float, float, float]:
        """Current position of a vertex as an (x, y, z) tuple."""
        x, y, z = self.vertex(vertex).position.tolist()
        return (x, y, z)

    def get_velocity(self, vertex: VertexRef) -> tuple[float, float, float]:
        """Current velocity of a vertex as an (x, y, z) tuple."""
        x, y, z = self.vertex(vertex).velocity.tolist()
        return (x, y, z)

    def positions(self) -> np.ndarray:
        """Positions of all vertices as an (n, 3) array in insertion order."""
        if not self._vertices:
            return np.zeros((0, 3))
        return np.array([v.position for v in self._vertices.values()])

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_vertex(
        self,
        position: Optional[VectorLike] = None,
        velocity: Optional[VectorLike] = None,
        **properties: Any,
    ) -> Vertex:
        """
        Create and register a vertex.

        Args:
            position: Initial position. If None, drawn uniformly from the
                cube [0, initial_extent)^3.
            velocity: Initial velocity (default: zero)
            **properties: Custom attributes copied onto the vertex (names of
                built-in fields are skipped)

        Returns:
            The new vertex

        Raises:
            InvalidVectorError: If position or velocity is not a finite 3-vector
        """
        pos = (
            random_position(self._rng, self._config.initial_extent)
            if position is None
            else validate_vector(position, "position")
        )
        vel = None if velocity is None else validate_vector(velocity, "velocity")

        vertex = Vertex(self._next_vertex_id, pos, vel, **properties)
        self._next_vertex_id += 1
        self._vertices[vertex.id] = vertex
        return vertex

    def add_edge(
        self,
        source: VertexRef,
        target: VertexRef,
        /,
        attraction: Optional[float] = None,
        **properties: Any,
    ) -> Edge:
        """
        Create an edge and register it with both endpoints.

        Args:
            source: Source vertex (record or id)
            target: Target vertex (record or id)
            attraction: Spring constant (default: config.attraction)
            **properties: Custom attributes copied onto the edge (names of
                built-in fields are skipped)

        Returns:
            The new edge

        Raises:
            UnknownVertexError: If either endpoint is not in the graph
            InvalidConfigError: If attraction is negative or not finite
        """
        src = self._lookup_vertex(source)
        if src is None:
            raise UnknownVertexError(f"Edge source {_ref_id(source)!r} is not in the graph")
        tgt = self._lookup_vertex(target)
        if tgt is None:
            raise UnknownVertexError(f"Edge target {_ref_id(target)!r} is not in the graph")

        strength = (
            self._config.attraction
            if attraction is None
            else validate_non_negative(attraction, "attraction")
        )

        edge = Edge(self._next_edge_id, src.id, tgt.id, strength, **properties)
        self._next_edge_id += 1
        self._edges[edge.id] = edge
        src.edges.add(edge.id)
        tgt.edges.add(edge.id)
        return edge

    def remove_edge(self, edge: EdgeRef) -> None:
        """
        Unregister an edge from both endpoints and the graph.

        Raises:
            EdgeNotFoundError: If the edge is not in the graph
        """
        found = self.edge(edge)
        self._vertices[found.source].edges.discard(found.id)
        self._vertices[found.target].edges.discard(found.id)
        del self._edges[found.id]

    def remove_vertex(self, vertex: VertexRef) -> None:
        """
        Remove a vertex and every edge incident to it.

        Raises:
            VertexNotFoundError: If the vertex is not in the graph
        """
        found = self.vertex(vertex)
        for edge_id in list(found.edges):
            self.remove_edge(edge_id)
        del self._vertices[found.id]

    def clear(self) -> Self:
        """Remove all vertices and edges. Ids are not reused afterwards."""
        self._vertices.clear()
        self._edges.clear()
        return self

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def build_tree(self) -> OctreeNode:
        """Build the clustering octree from current positions (insertion order)."""
        tree = OctreeNode(self._config.inner_distance)
        for vertex in self._vertices.values():
            tree.insert(vertex)
        return tree

    def layout(self) -> LayoutSummary:
        """
        Advance the simulation by one tick.

        Moves vertices in place and fires the tick event. Vertices whose
        new state would be non-finite are rolled back to their previous
        position with zero velocity and reported in the summary.

        Returns:
            LayoutSummary for this tick
        """
        vertices = list(self._vertices.values())
        friction = self._config.friction

        max_displacement = 0.0
        kinetic_energy = 0.0
        unstable: list[int] = []

        # non-finite values are detected per vertex below
        with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
            for vertex in vertices:
                vertex.reset_forces()
            tree = self.build_tree()

            for vertex in vertices:
                tree.estimate(vertex, vertex.repulsion_forces, self._force_fn)

            for edge in self._edges.values():
                source = self._vertices[edge.source]
                target = self._vertices[edge.target]
                on_source, on_target = pairwise_attraction(
                    edge.attraction, source.position, target.position
                )
                # accumulators hold the negated spring force
                source.attraction_forces -= on_source
                target.attraction_forces -= on_target

            for vertex in vertices:
                friction_term = vertex.velocity * friction
                vertex.acceleration += vertex.repulsion_forces - vertex.attraction_forces - friction_term
                velocity = vertex.velocity + vertex.acceleration
                position = vertex.position + velocity

                if not (np.all(np.isfinite(velocity)) and np.all(np.isfinite(position))):
                    unstable.append(vertex.id)
                    vertex.velocity.fill(0.0)
                    vertex.acceleration.fill(0.0)
                    continue

                vertex.velocity[:] = velocity
                vertex.position[:] = position

                speed_sq = float(velocity @ velocity)
                max_displacement = max(max_displacement, math.sqrt(speed_sq))
                kinetic_energy += 0.5 * speed_sq

        if unstable:
            warnings.warn(
                f"{len(unstable)} vertex state(s) became non-finite and were rolled back: "
                f"{unstable}. Consider raising friction or epsilon.",
                NumericalInstabilityWarning,
                stacklevel=2,
            )

        self._ticks += 1
        summary = LayoutSummary(
            tick=self._ticks,
            max_displacement=max_displacement,
            kinetic_energy=kinetic_energy,
            unstable=tuple(unstable),
        )

        self.trigger({"type": EventType.tick, "tick": self._ticks, "summary": summary})
        return summary

    def step(self) -> LayoutSummary:
        return self.layout()

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _lookup_vertex(self, ref: VertexRef) -> Optional[Vertex]:
        if isinstance(ref, Vertex):
            found = self._vertices.get(ref.id)
            return found if found is ref else None
        if isinstance(ref, bool) or not isinstance(ref, (int, np.integer)):
            return None
        return self._vertices.get(int(ref))

    def _lookup_edge(self, ref: EdgeRef) -> Optional[Edge]:
        if isinstance(ref, Edge):
            found = self._edges.get(ref.id)
            return found if found is ref else None
        if isinstance(ref, bool) or not isinstance(ref, (int, np.integer)):
            return None
        return self._edges.get(int(ref))


def _ref_id(ref: Any) -> Any:
    return getattr(ref, "id", ref)


__all__ = ["Graph"]
