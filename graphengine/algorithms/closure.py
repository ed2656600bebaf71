"""Transitive closure as a boolean reachability matrix."""

from __future__ import annotations

import numpy as np

from graphengine.algorithms.types import ReachabilityMatrix
from graphengine.graph.model import Graph, NodeMap


def transitive_closure(graph: Graph, *, reflexive: bool = False) -> ReachabilityMatrix:
    """Compute which nodes reach which, by Warshall's algorithm.

    Row ``k`` is ORed into every row that already reaches ``k``, one
    intermediate node at a time, over a NumPy boolean matrix.

    Args:
        graph: Directed or undirected graph; weights are ignored.
        reflexive: If True every node reaches itself. Otherwise a node
            reaches itself only through a cycle or self-loop.

    Returns:
        A `ReachabilityMatrix` with nodes in graph order.

    Example:
        >>> closure = transitive_closure(Graph({1: [2], 2: [3], 3: []}))
        >>> closure.reachable(1, 3), closure.reachable(3, 1)
        (True, False)
    """
    node_map = NodeMap.from_names(graph)
    to_index = node_map.to_index
    size = len(node_map)
    reach = np.zeros((size, size), dtype=bool)
    for node in graph:
        for nbr in graph.neighbors(node):
            reach[to_index[node], to_index[nbr]] = True

    for k in range(size):
        reach |= reach[:, k : k + 1] & reach[k : k + 1, :]

    if reflexive:
        np.fill_diagonal(reach, True)
    return ReachabilityMatrix(nodes=tuple(graph), matrix=reach, index=to_index)
