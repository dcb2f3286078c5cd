"""
Spatial data structures for efficient force calculations.

Provides the clustering octree used for Barnes-Hut repulsion estimates.
"""

from .octree import Octant, OctreeNode, build_octree

__all__ = ["Octant", "OctreeNode", "build_octree"]
