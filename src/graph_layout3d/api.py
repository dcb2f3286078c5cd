"""
Functional interface for host applications.

A thin, id-based surface over Graph for collaborators (renderers, input
handlers, services) that prefer plain functions and integer handles to
the object API:

    graph = create_graph(friction=0.7)
    a = add_vertex(graph)
    b = add_vertex(graph, {"position": (1, 0, 0)})
    add_edge(graph, a, b)
    layout(graph)
    x, y, z = get_position(graph, a)
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from .config import LayoutConfig
from .graph import Graph
from .types import LayoutSummary

Config = Optional[Mapping[str, Any]]


def create_graph(config: Optional[Union[LayoutConfig, Mapping[str, Any]]] = None, **overrides: Any) -> Graph:
    """
    Create an empty graph.

    Args:
        config: LayoutConfig or mapping with epsilon, attraction, friction,
            repulsion, inner_distance, ... (missing keys take defaults)
        **overrides: Individual configuration values

    Raises:
        InvalidConfigError: On unknown keys or out-of-range values
    """
    return Graph(config, **overrides)


def add_vertex(graph: Graph, config: Config = None) -> int:
    """
    Add a vertex and return its id.

    Args:
        graph: Target graph
        config: Optional mapping with position, velocity and custom properties
    """
    return graph.add_vertex(**dict(config or {})).id


def add_edge(graph: Graph, source: int, target: int, config: Config = None) -> int:
    """
    Add an edge between two existing vertices and return its id.

    Args:
        graph: Target graph
        source: Source vertex id
        target: Target vertex id
        config: Optional mapping with attraction and custom properties

    Raises:
        UnknownVertexError: If either endpoint is not in the graph
    """
    return graph.add_edge(source, target, **dict(config or {})).id


def remove_vertex(graph: Graph, vertex_id: int) -> None:
    """
    Remove a vertex and its incident edges.

    Raises:
        VertexNotFoundError: If the vertex is not in the graph
    """
    graph.remove_vertex(vertex_id)


def remove_edge(graph: Graph, edge_id: int) -> None:
    """
    Remove an edge.

    Raises:
        EdgeNotFoundError: If the edge is not in the graph
    """
    graph.remove_edge(edge_id)


def layout(graph: Graph) -> LayoutSummary:
    """Advance the simulation by one tick."""
    return graph.layout()


def get_position(graph: Graph, vertex_id: int) -> tuple[float, float, float]:
    """
    Current position of a vertex.

    Raises:
        VertexNotFoundError: If the vertex is not in the graph
    """
    return graph.get_position(vertex_id)


def get_velocity(graph: Graph, vertex_id: int) -> tuple[float, float, float]:
    """
    Current velocity of a vertex.

    Raises:
        VertexNotFoundError: If the vertex is not in the graph
    """
    return graph.get_velocity(vertex_id)


__all__ = [
    "create_graph",
    "add_vertex",
    "add_edge",
    "remove_vertex",
    "remove_edge",
    "layout",
    "get_position",
    "get_velocity",
]
