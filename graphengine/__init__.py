"""graphengine: classical graph algorithms over one shared graph model.

A `Graph` is built once from an adjacency mapping (or an edge list) and is
read-only afterwards. Algorithm families consume it as pure functions.

Primary API:
    Graph, Edge - Graph model
    algorithms - Traversal, shortest paths, spanning trees, max-flow,
        connectivity, covering walks, coloring, transitive closure
    from_networkx() - Convert NetworkX graph to internal format
    to_networkx() - Convert internal format back to NetworkX

Example:
    from graphengine import Graph
    from graphengine.algorithms import dijkstra, calc_max_flow

    g = Graph({"A": [("B", 1), ("C", 4)], "B": [("C", 2), ("D", 5)], "C": [("D", 1)]})
    dijkstra(g, "A").distances   # {'A': 0, 'B': 1, 'C': 3, 'D': 4}
    calc_max_flow(g, "A", "D")   # 2.0
"""

from __future__ import annotations

from graphengine import algorithms, logging
from graphengine._version import __version__
from graphengine.config import ENGINE_CONFIG, EngineConfig
from graphengine.errors import (
    CyclicGraph,
    Disconnected,
    GraphError,
    InvalidInput,
    NegativeCycle,
    NegativeWeight,
    NodeNotFound,
)
from graphengine.graph import Edge, Graph, NodeMap, from_networkx, to_networkx

__all__ = [
    # Version
    "__version__",
    # Model
    "Edge",
    "Graph",
    "NodeMap",
    # Errors
    "GraphError",
    "NodeNotFound",
    "NegativeWeight",
    "NegativeCycle",
    "CyclicGraph",
    "Disconnected",
    "InvalidInput",
    # Configuration
    "EngineConfig",
    "ENGINE_CONFIG",
    # Library integrations (NetworkX)
    "from_networkx",
    "to_networkx",
    # Subpackages
    "algorithms",
    "logging",
]
