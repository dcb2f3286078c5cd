"""
Force laws for the 3D layout.

- pairwise_repulsion: Softened inverse-square repulsion between two points
- pairwise_attraction: Zero rest-length spring along an edge
"""

from .model import pairwise_attraction, pairwise_repulsion, repulsion_from_config

__all__ = [
    "pairwise_repulsion",
    "pairwise_attraction",
    "repulsion_from_config",
]
