#!/usr/bin/env python3
"""
Benchmark the layout tick on generated graphs of increasing size.

Usage:
    python scripts/benchmark_layout.py [--sizes N,...] [--ticks T] [--kind KIND]

Examples:
    python scripts/benchmark_layout.py
    python scripts/benchmark_layout.py --sizes 100,1000,5000 --ticks 5
    python scripts/benchmark_layout.py --kind tree --output results.json
"""

from __future__ import annotations

import argparse
import json
import random
import time
from typing import Any, Callable

from graph_layout3d import Graph


def ring_graph(n: int, seed: int) -> Graph:
    """Cycle of n vertices."""
    graph = Graph(random_seed=seed, initial_extent=max(1.0, n ** (1 / 3)))
    vertices = [graph.add_vertex() for _ in range(n)]
    for i in range(n):
        graph.add_edge(vertices[i], vertices[(i + 1) % n])
    return graph


def tree_graph(n: int, seed: int) -> Graph:
    """Random recursive tree of n vertices."""
    rng = random.Random(seed)
    graph = Graph(random_seed=seed, initial_extent=max(1.0, n ** (1 / 3)))
    vertices = [graph.add_vertex()]
    for _ in range(1, n):
        child = graph.add_vertex()
        graph.add_edge(rng.choice(vertices), child)
        vertices.append(child)
    return graph


def random_graph(n: int, seed: int, degree: float = 3.0) -> Graph:
    """Erdos-Renyi style graph with about n * degree / 2 edges."""
    rng = random.Random(seed)
    graph = Graph(random_seed=seed, initial_extent=max(1.0, n ** (1 / 3)))
    vertices = [graph.add_vertex() for _ in range(n)]
    for _ in range(int(n * degree / 2)):
        a, b = rng.sample(vertices, 2)
        graph.add_edge(a, b)
    return graph


GENERATORS: dict[str, Callable[[int, int], Graph]] = {
    "ring": ring_graph,
    "tree": tree_graph,
    "random": random_graph,
}


def benchmark_graph(graph: Graph, ticks: int) -> dict[str, Any]:
    """
    Time a fixed number of ticks.

    Returns:
        Dict with timing and tree shape info
    """
    start = time.perf_counter()
    summary = None
    for _ in range(ticks):
        summary = graph.layout()
    elapsed = time.perf_counter() - start

    tree = graph.build_tree()
    clusters = sum(1 for _ in tree.iter_nodes())
    return {
        "num_vertices": graph.number_of_vertices(),
        "num_edges": graph.number_of_edges(),
        "time_seconds": elapsed,
        "seconds_per_tick": elapsed / ticks if ticks else 0.0,
        "tree_nodes": clusters,
        "tree_depth": tree.depth(),
        "max_displacement": summary.max_displacement if summary else 0.0,
    }


def run_benchmarks(sizes: list[int], ticks: int, kind: str, seed: int) -> list[dict[str, Any]]:
    """Run benchmarks for every size."""
    generator = GENERATORS[kind]
    results = []

    print(f"\nBenchmarking {kind} graphs, {ticks} tick(s) each")
    print("=" * 72)
    print(f"{'Vertices':>10s}{'Edges':>10s}{'s/tick':>12s}{'Tree nodes':>12s}{'Depth':>8s}{'Max disp':>12s}")
    print("-" * 72)

    for n in sizes:
        graph = generator(n, seed)
        result = benchmark_graph(graph, ticks)
        results.append({"kind": kind, **result})
        print(
            f"{result['num_vertices']:>10d}{result['num_edges']:>10d}"
            f"{result['seconds_per_tick']:>12.4f}{result['tree_nodes']:>12d}"
            f"{result['tree_depth']:>8d}{result['max_displacement']:>12.4f}"
        )

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark the 3D layout tick")
    parser.add_argument("--sizes", default="100,500,1000,2000", help="Comma-separated vertex counts")
    parser.add_argument("--ticks", type=int, default=3, help="Ticks timed per graph")
    parser.add_argument("--kind", choices=sorted(GENERATORS), default="random", help="Graph family")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--output", help="Output JSON file for results")

    args = parser.parse_args()

    sizes = [int(s) for s in args.sizes.split(",") if s]
    results = run_benchmarks(sizes, args.ticks, args.kind, args.seed)

    if args.output and results:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
