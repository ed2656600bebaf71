"""Global minimum cut of an undirected graph (Stoer-Wagner)."""

from __future__ import annotations

from heapq import heappop, heappush
from itertools import count
from typing import Dict, FrozenSet, List, Set, Tuple

from graphengine.algorithms.base import INF, Cost
from graphengine.algorithms.spf import check_non_negative
from graphengine.algorithms.traversal import is_connected
from graphengine.algorithms.types import MinCutResult
from graphengine.algorithms.union_find import UnionFind
from graphengine.errors import Disconnected, InvalidInput
from graphengine.graph.model import Graph, NodeID
from graphengine.logging import get_logger

logger = get_logger(__name__)


def _maximum_adjacency_order(
    weights: Dict[NodeID, Dict[NodeID, Cost]], start: NodeID
) -> Tuple[List[NodeID], Dict[NodeID, Cost]]:
    """Add nodes one by one, always the one most tightly connected to the set so far."""
    tie = count()
    attached: Dict[NodeID, Cost] = {start: 0}
    in_set: Set[NodeID] = set()
    order: List[NodeID] = []
    heap: List[Tuple[Cost, int, NodeID]] = [(0, next(tie), start)]
    while heap:
        neg_key, _, node = heappop(heap)
        if node in in_set or -neg_key != attached[node]:
            continue
        in_set.add(node)
        order.append(node)
        for nbr, weight in weights[node].items():
            if nbr not in in_set:
                attached[nbr] = attached.get(nbr, 0) + weight
                heappush(heap, (-attached[nbr], next(tie), nbr))
    return order, attached


def stoer_wagner(graph: Graph) -> MinCutResult:
    """Minimum weight cut splitting an undirected graph in two.

    Runs |V|-1 phases. Each phase orders the current super-nodes by maximum
    adjacency search; the weight attaching the last node ``t`` is the
    cut-of-the-phase, after which ``t`` is merged into the previous node
    ``s``. A union-find records which original nodes each super-node holds.
    Parallel edges add up and self-loops are ignored.

    Returns:
        The cut value, the two sides, and the edges crossing the cut.

    Raises:
        InvalidInput: If the graph is directed or has fewer than two nodes.
        NegativeWeight: If any edge weight is negative.
        Disconnected: If the graph is not connected.
    """
    if graph.is_directed:
        raise InvalidInput("Stoer-Wagner needs an undirected graph.")
    if len(graph) < 2:
        raise InvalidInput("A cut needs at least two nodes.")
    check_non_negative(graph)
    if not is_connected(graph):
        raise Disconnected("Stoer-Wagner needs a connected graph.")

    weights: Dict[NodeID, Dict[NodeID, Cost]] = {node: {} for node in graph}
    for edge in graph.edges():
        u, v = edge.source, edge.target
        if u == v:
            continue
        weights[u][v] = weights[u].get(v, 0) + edge.weight
        weights[v][u] = weights[v].get(u, 0) + edge.weight

    groups: UnionFind = UnionFind(graph.nodes())
    remaining = dict.fromkeys(graph)
    best_value: Cost = INF
    # Set by the first phase: every phase cut is finite.
    best_side: FrozenSet[NodeID] = frozenset()

    while len(remaining) > 1:
        order, attached = _maximum_adjacency_order(weights, next(iter(remaining)))
        s, t = order[-2], order[-1]
        cut_of_phase = attached[t]
        if cut_of_phase < best_value:
            best_value = cut_of_phase
            t_root = groups.find(t)
            best_side = frozenset(n for n in graph if groups.find(n) == t_root)

        groups.union(s, t)
        for nbr, weight in weights.pop(t).items():
            del weights[nbr][t]
            if nbr != s:
                weights[s][nbr] = weights[s].get(nbr, 0) + weight
                weights[nbr][s] = weights[nbr].get(s, 0) + weight
        del remaining[t]

    other_side = frozenset(n for n in graph if n not in best_side)
    cut_edges = [
        edge
        for edge in graph.edges()
        if (edge.source in best_side) != (edge.target in best_side)
    ]
    logger.debug("Stoer-Wagner: min cut %s splitting off %d nodes", best_value, len(best_side))
    return MinCutResult(
        cut_value=best_value, partition=(other_side, best_side), cut_edges=cut_edges
    )
