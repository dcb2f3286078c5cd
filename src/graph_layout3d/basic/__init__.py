"""
Basic placement helpers.

- random_position: Uniform position in a cube
- random_layout: Re-scatter all vertices of a graph
"""

from .random import random_layout, random_position

__all__ = ["random_position", "random_layout"]
