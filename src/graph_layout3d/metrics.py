"""
Layout quality and convergence metrics.

Provides quantitative measures of a 3D layout:
- Stress: How well distances match hop-count distances
- Edge length variance / uniformity: Uniformity of edge lengths
- Kinetic energy and max speed: Convergence of the simulation
- Centroid and bounding box: Extent of the layout

All metrics read the current vertex state of a Graph and never modify it.
"""

from __future__ import annotations

import math
from collections import deque
from typing import Any

import numpy as np

from .graph import Graph


def edge_lengths(graph: Graph) -> list[float]:
    """Euclidean length of every edge, in edge insertion order."""
    lengths = []
    for edge in graph.edges:
        source = graph.vertex(edge.source).position
        target = graph.vertex(edge.target).position
        lengths.append(float(np.linalg.norm(source - target)))
    return lengths


def edge_length_variance(graph: Graph) -> float:
    """
    Compute the variance of edge lengths.

    Lower variance indicates more uniform edge lengths.
    """
    lengths = edge_lengths(graph)
    if not lengths:
        return 0.0

    mean = sum(lengths) / len(lengths)
    return sum((length - mean) ** 2 for length in lengths) / len(lengths)


def edge_length_uniformity(graph: Graph) -> float:
    """
    Compute edge length uniformity (0-1, higher is better).

    Returns:
        1 - (std_dev / mean), clamped to [0, 1]
    """
    lengths = edge_lengths(graph)
    if not lengths:
        return 1.0

    mean = sum(lengths) / len(lengths)
    if mean == 0:
        return 0.0

    variance = sum((length - mean) ** 2 for length in lengths) / len(lengths)
    return max(0.0, min(1.0, 1.0 - math.sqrt(variance) / mean))


def stress(graph: Graph, edge_length: float = 1.0) -> float:
    """
    Compute the normalized stress of the layout.

    stress = sum_ij (w_ij * (d_ij - D_ij)^2) / sum_ij (w_ij * D_ij^2)

    where d_ij is the actual distance, D_ij = hops(i, j) * edge_length and
    w_ij = 1/D_ij^2. Pairs in different components are skipped.

    Args:
        graph: Graph with positioned vertices
        edge_length: Ideal length of a single edge

    Returns:
        Normalized stress value (0 = perfect, higher = worse)
    """
    vertices = graph.vertices
    n = len(vertices)
    if n < 2:
        return 0.0

    hops = _hop_distances(graph)

    numerator = 0.0
    denominator = 0.0
    for i in range(n):
        for j in range(i + 1, n):
            h = hops[i].get(vertices[j].id)
            if not h:
                continue

            ideal_d = h * edge_length
            actual_d = float(np.linalg.norm(vertices[i].position - vertices[j].position))
            w_ij = 1.0 / (ideal_d * ideal_d)

            diff = actual_d - ideal_d
            numerator += w_ij * diff * diff
            denominator += w_ij * ideal_d * ideal_d

    if denominator == 0:
        return 0.0

    return numerator / denominator


def _hop_distances(graph: Graph) -> list[dict[int, int]]:
    """Hop counts from every vertex (insertion order) to reachable vertex ids."""
    result = []
    for start in graph.vertices:
        dist = {start.id: 0}
        queue: deque[int] = deque([start.id])
        while queue:
            curr = queue.popleft()
            for neighbor in graph.neighbors(curr):
                if neighbor not in dist:
                    dist[neighbor] = dist[curr] + 1
                    queue.append(neighbor)
        result.append(dist)
    return result


def kinetic_energy(graph: Graph) -> float:
    """Sum of 0.5 * |velocity|^2 over all vertices (unit mass)."""
    return sum(0.5 * float(v.velocity @ v.velocity) for v in graph.vertices)


def max_speed(graph: Graph) -> float:
    """Largest vertex speed; equals next tick's displacement without new forces."""
    return max((float(np.linalg.norm(v.velocity)) for v in graph.vertices), default=0.0)


def centroid(graph: Graph) -> tuple[float, float, float]:
    """Mean vertex position, (0, 0, 0) for an empty graph."""
    positions = graph.positions()
    if len(positions) == 0:
        return (0.0, 0.0, 0.0)
    x, y, z = positions.mean(axis=0).tolist()
    return (x, y, z)


def bounding_box(graph: Graph) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """
    Axis-aligned bounds of the layout.

    Returns:
        ((min_x, min_y, min_z), (max_x, max_y, max_z)); both corners are
        the origin for an empty graph
    """
    positions = graph.positions()
    if len(positions) == 0:
        return ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    lo = positions.min(axis=0).tolist()
    hi = positions.max(axis=0).tolist()
    return ((lo[0], lo[1], lo[2]), (hi[0], hi[1], hi[2]))


def layout_quality_summary(graph: Graph, edge_length: float = 1.0) -> dict[str, Any]:
    """
    Compute a summary of layout quality metrics.

    Args:
        graph: Graph with positioned vertices
        edge_length: Ideal edge length for stress calculation

    Returns:
        Dictionary with stress, edge_length_variance,
        edge_length_uniformity, kinetic_energy, max_speed, centroid and
        bounding_box
    """
    return {
        "stress": stress(graph, edge_length=edge_length),
        "edge_length_variance": edge_length_variance(graph),
        "edge_length_uniformity": edge_length_uniformity(graph),
        "kinetic_energy": kinetic_energy(graph),
        "max_speed": max_speed(graph),
        "centroid": centroid(graph),
        "bounding_box": bounding_box(graph),
    }


__all__ = [
    "edge_lengths",
    "edge_length_variance",
    "edge_length_uniformity",
    "stress",
    "kinetic_energy",
    "max_speed",
    "centroid",
    "bounding_box",
    "layout_quality_summary",
]
