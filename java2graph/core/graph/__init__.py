"""
Type graph data structures and algorithms.

This module provides the in-memory graph and the algorithms that fill and
filter it:

Data Structures:
    - TypeGraph: Nodes keyed by type, links keyed by ordered node pair

Algorithms:
    - traversal: Breadth-first discovery from seed types (Traverser)
    - visibility: Distance bound applied when rendering (VisibilityPolicy)
"""

from java2graph.core.graph.base import TypeGraph
from java2graph.core.graph.traversal import TraversalOptions, Traverser
from java2graph.core.graph.visibility import UNLIMITED, VisibilityPolicy

__all__ = [
    "TypeGraph",
    "TraversalOptions",
    "Traverser",
    "UNLIMITED",
    "VisibilityPolicy",
]
