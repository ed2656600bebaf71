"""Vertex coloring: greedy heuristics and an exact backtracking search.

Edge direction is ignored; colors are consecutive integers starting at 0.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Set

from graphengine.algorithms.base import ColoringStrategy
from graphengine.errors import InvalidInput
from graphengine.graph.model import Graph, NodeID
from graphengine.logging import get_logger

logger = get_logger(__name__)


def _color_adjacency(graph: Graph) -> Dict[NodeID, Set[NodeID]]:
    adjacency: Dict[NodeID, Set[NodeID]] = {node: set() for node in graph}
    for edge in graph.edges():
        if edge.source == edge.target:
            raise InvalidInput(f"Node '{edge.source}' has a self-loop and cannot be colored.")
        adjacency[edge.source].add(edge.target)
        adjacency[edge.target].add(edge.source)
    return adjacency


def _smallest_free(taken: Set[int]) -> int:
    color = 0
    while color in taken:
        color += 1
    return color


def _dsatur(adjacency: Dict[NodeID, Set[NodeID]]) -> Dict[NodeID, int]:
    """Brelaz's DSATUR: always color the most constrained node next.

    Ties on saturation go to the higher degree, then to graph order.
    """
    colors: Dict[NodeID, int] = {}
    seen: Dict[NodeID, Set[int]] = {node: set() for node in adjacency}
    position = {node: i for i, node in enumerate(adjacency)}
    while len(colors) < len(adjacency):
        node = max(
            (n for n in adjacency if n not in colors),
            key=lambda n: (len(seen[n]), len(adjacency[n]), -position[n]),
        )
        color = _smallest_free(seen[node])
        colors[node] = color
        for nbr in adjacency[node]:
            seen[nbr].add(color)
    return colors


def greedy_coloring(
    graph: Graph, strategy: ColoringStrategy = ColoringStrategy.LARGEST_FIRST
) -> Dict[NodeID, int]:
    """Color nodes one at a time with the smallest color free among neighbors.

    This is a heuristic: the number of colors is an upper bound on the
    chromatic number, not necessarily equal to it.

    Args:
        graph: Graph to color.
        strategy: Node ordering. ``INSERTION_ORDER`` follows the graph,
            ``LARGEST_FIRST`` sorts by descending degree (stable),
            ``DSATUR`` picks the node seeing the most distinct colors.

    Raises:
        InvalidInput: If the graph has a self-loop or the strategy is unknown.
    """
    adjacency = _color_adjacency(graph)
    if strategy == ColoringStrategy.DSATUR:
        return _dsatur(adjacency)
    if strategy == ColoringStrategy.INSERTION_ORDER:
        order = list(adjacency)
    elif strategy == ColoringStrategy.LARGEST_FIRST:
        order = sorted(adjacency, key=lambda n: len(adjacency[n]), reverse=True)
    else:
        raise InvalidInput(f"Unknown coloring strategy: {strategy!r}")

    colors: Dict[NodeID, int] = {}
    for node in order:
        colors[node] = _smallest_free({colors[n] for n in adjacency[node] if n in colors})
    return colors


def _k_coloring(
    order: List[NodeID], adjacency: Dict[NodeID, Set[NodeID]], k: int
) -> Optional[Dict[NodeID, int]]:
    """Try to color ``order`` with at most ``k`` colors by backtracking.

    A node may open at most one new color beyond those already in use,
    which removes color-permutation symmetry from the search.
    """
    total = len(order)
    colors: Dict[NodeID, int] = {}
    next_try = [0] * (total + 1)
    i = 0
    while 0 <= i < total:
        node = order[i]
        colors.pop(node, None)
        limit = min(k, max(colors.values(), default=-1) + 2)
        taken = {colors[n] for n in adjacency[node] if n in colors}
        color = next_try[i]
        while color < limit and color in taken:
            color += 1
        if color < limit:
            colors[node] = color
            next_try[i] = color + 1
            i += 1
            next_try[i] = 0
        else:
            next_try[i] = 0
            i -= 1
    return colors if i == total else None


def exact_coloring(graph: Graph) -> Dict[NodeID, int]:
    """Return a coloring with the minimum possible number of colors.

    DSATUR gives an upper bound; backtracking over the DSATUR order then
    tries each smaller color count from the lower bound up. Exponential in
    the worst case, practical for graphs of a few dozen nodes.

    Raises:
        InvalidInput: If the graph has a self-loop.
    """
    adjacency = _color_adjacency(graph)
    best = _dsatur(adjacency)
    if not best:
        return best
    upper = max(best.values()) + 1
    lower = 2 if any(adjacency.values()) else 1
    order = list(best)
    for k in range(lower, upper):
        found = _k_coloring(order, adjacency, k)
        if found is not None:
            logger.debug("Exact coloring: %d colors (DSATUR used %d)", k, upper)
            return found
    return best


def chromatic_number(graph: Graph) -> int:
    """Smallest number of colors needed; 0 for an empty graph."""
    return len(set(exact_coloring(graph).values()))


def is_valid_coloring(graph: Graph, colors: Mapping[NodeID, int]) -> bool:
    """Return True if every node is colored and no edge joins equal colors."""
    if any(node not in colors for node in graph):
        return False
    return all(colors[e.source] != colors[e.target] for e in graph.edges())
