"""
graph-layout3d: Headless 3D force-directed graph layout.

Vertices repel each other, edges pull their endpoints together and
friction damps motion. Repulsion is estimated with a clustering octree
(Barnes-Hut), so each tick costs close to O(n log n).

Available components:
- Graph: mutable graph with the per-tick layout() step
- LayoutConfig: immutable physical parameters
- OctreeNode: spatial tree used for repulsion estimates
- force: pairwise repulsion and attraction laws
- metrics: layout quality and convergence measures
- api: id-based functional interface for host applications
"""

__version__ = "0.1.0"

from .api import (
    add_edge,
    add_vertex,
    create_graph,
    get_position,
    get_velocity,
    layout,
    remove_edge,
    remove_vertex,
)
from .base import IterativeLayout
from .basic import random_layout, random_position
from .config import DEFAULT_CONFIG, LayoutConfig
from .force import pairwise_attraction, pairwise_repulsion, repulsion_from_config
from .graph import Graph

# Metrics for layout quality evaluation
from .metrics import (
    bounding_box,
    centroid,
    edge_length_uniformity,
    edge_length_variance,
    kinetic_energy,
    layout_quality_summary,
    max_speed,
    stress,
)

# Spatial data structures
from .spatial import Octant, OctreeNode, build_octree
from .types import Edge, Event, EventType, LayoutSummary, Vertex

# Errors and validation
from .validation import (
    DegenerateSeparationError,
    DuplicateVertexError,
    EdgeNotFoundError,
    GraphError,
    InternalInvariantViolation,
    InvalidConfigError,
    InvalidVectorError,
    NotFoundError,
    NumericalInstabilityWarning,
    UnknownVertexError,
    ValidationError,
    VertexNotFoundError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "Vertex",
    "Edge",
    "LayoutSummary",
    "EventType",
    "Event",
    # Configuration
    "LayoutConfig",
    "DEFAULT_CONFIG",
    # Graph and base class
    "Graph",
    "IterativeLayout",
    # Functional interface
    "create_graph",
    "add_vertex",
    "add_edge",
    "remove_vertex",
    "remove_edge",
    "layout",
    "get_position",
    "get_velocity",
    # Forces
    "pairwise_repulsion",
    "pairwise_attraction",
    "repulsion_from_config",
    # Spatial data structures
    "Octant",
    "OctreeNode",
    "build_octree",
    # Placement
    "random_position",
    "random_layout",
    # Metrics
    "stress",
    "edge_length_variance",
    "edge_length_uniformity",
    "kinetic_energy",
    "max_speed",
    "centroid",
    "bounding_box",
    "layout_quality_summary",
    # Errors
    "ValidationError",
    "InvalidConfigError",
    "InvalidVectorError",
    "GraphError",
    "UnknownVertexError",
    "NotFoundError",
    "VertexNotFoundError",
    "EdgeNotFoundError",
    "DegenerateSeparationError",
    "InternalInvariantViolation",
    "DuplicateVertexError",
    "NumericalInstabilityWarning",
]
