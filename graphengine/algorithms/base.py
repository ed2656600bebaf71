from __future__ import annotations

from enum import IntEnum
from typing import Union

#: Represents numeric cost in the graph (distance, weight, capacity, etc.).
Cost = Union[int, float]

#: Distance of an unreachable node.
INF = float("inf")


class MaxFlowAlg(IntEnum):
    """
    Max-flow algorithm selector for ``calc_max_flow``.
    """

    #: Shortest augmenting paths found by BFS, O(VE^2).
    EDMONDS_KARP = 1
    #: Level graphs with blocking flows, O(V^2 E).
    DINIC = 2


class APSPAlg(IntEnum):
    """
    All-pairs shortest path algorithm selector.
    """

    FLOYD_WARSHALL = 1
    JOHNSON = 2


class ColoringStrategy(IntEnum):
    """
    Node ordering used by greedy coloring.
    """

    #: Nodes in the graph's insertion order.
    INSERTION_ORDER = 1
    #: Nodes by non-increasing degree (Welsh-Powell).
    LARGEST_FIRST = 2
    #: Next node is the one with the most distinct neighbor colors (Brelaz).
    DSATUR = 3
