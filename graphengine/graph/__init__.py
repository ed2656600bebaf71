"""Graph primitives and helpers.

This package provides the immutable `Graph` model with its `Edge` and
`NodeMap` helpers, and NetworkX conversion (`convert`).
"""

from graphengine.graph.convert import from_networkx, to_networkx
from graphengine.graph.model import Edge, EdgeKey, Graph, NodeID, NodeMap, Weight

__all__ = [
    "Edge",
    "EdgeKey",
    "Graph",
    "NodeID",
    "NodeMap",
    "Weight",
    "from_networkx",
    "to_networkx",
]
