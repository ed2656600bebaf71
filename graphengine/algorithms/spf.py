"""Shortest-path-first (SPF) algorithms.

Single-source: Dijkstra (non-negative weights), Bellman-Ford and SPFA (any
weights, negative cycles detected). All-pairs: Floyd-Warshall on NumPy
matrices and Johnson's reweighting scheme.

Notes:
    Undirected edges are relaxed in both directions, so a negative undirected
    edge is itself a negative cycle.

    When Dijkstra is given a destination it stops as soon as the destination
    is settled. In that mode only the destination and nodes settled before it
    carry final distances; other entries are upper bounds or ``inf``.
"""

from __future__ import annotations

from collections import deque
from heapq import heappop, heappush
from itertools import count
from typing import Dict, List, Optional, Set, Tuple

import numpy as np

from graphengine.algorithms.base import INF, Cost
from graphengine.algorithms.types import AllPairsResult, ShortestPathResult
from graphengine.config import ENGINE_CONFIG
from graphengine.errors import NegativeCycle, NegativeWeight, NodeNotFound
from graphengine.graph.model import EdgeKey, Graph, NodeID, NodeMap, Weight
from graphengine.logging import get_logger

logger = get_logger(__name__)

Arc = Tuple[NodeID, NodeID, Weight]


class _VirtualSource:
    """Johnson's extra source node; compares equal only to itself."""

    def __repr__(self) -> str:
        return "<virtual-source>"


def _arcs(graph: Graph) -> List[Arc]:
    """All traversable (u, v, w) arcs; undirected edges contribute both ways."""
    adjacency = graph._succ  # type: ignore[attr-defined]
    return [
        (edge.source, edge.target, edge.weight)
        for node in adjacency
        for edge in adjacency[node]
    ]


def _check_source(graph: Graph, source: NodeID) -> None:
    if not graph.has_node(source):
        raise NodeNotFound(source, f"Source node '{source}' is not in the graph.")


def check_non_negative(graph: Graph) -> None:
    """Raise `NegativeWeight` for the first negative edge in key order."""
    for edge in graph._edges:  # type: ignore[attr-defined]
        if edge.weight < 0:
            raise NegativeWeight(
                edge,
                f"Edge {edge.source}->{edge.target} has negative weight "
                f"{edge.weight}; non-negative weights are required.",
            )


def _dijkstra(
    graph: Graph,
    src_node: NodeID,
    dst_node: Optional[NodeID],
    excluded_nodes: Set[NodeID],
    excluded_edges: Set[EdgeKey],
) -> Tuple[
    Dict[NodeID, Cost], Dict[NodeID, Optional[NodeID]], Dict[NodeID, Optional[EdgeKey]]
]:
    """Heap-based Dijkstra without input validation.

    Returns distances, predecessor nodes and the key of the edge used to
    reach each node.
    """
    adjacency = graph._succ  # type: ignore[attr-defined]
    costs: Dict[NodeID, Cost] = {node: INF for node in adjacency}
    pred: Dict[NodeID, Optional[NodeID]] = {node: None for node in adjacency}
    pred_edge: Dict[NodeID, Optional[EdgeKey]] = {node: None for node in adjacency}
    costs[src_node] = 0

    # The counter breaks ties between equal costs without comparing nodes,
    # which need not be orderable.
    tie = count()
    min_pq: List[Tuple[Cost, int, NodeID]] = [(0, next(tie), src_node)]
    settled: Set[NodeID] = set()

    while min_pq:
        current_cost, _, node_id = heappop(min_pq)
        if node_id in settled:
            continue
        settled.add(node_id)
        if node_id == dst_node:
            break

        for edge in adjacency[node_id]:
            neighbor_id = edge.target
            if edge.key in excluded_edges or neighbor_id in excluded_nodes:
                continue
            new_cost = current_cost + edge.weight
            if new_cost < costs[neighbor_id]:
                costs[neighbor_id] = new_cost
                pred[neighbor_id] = node_id
                pred_edge[neighbor_id] = edge.key
                heappush(min_pq, (new_cost, next(tie), neighbor_id))

    return costs, pred, pred_edge


def dijkstra(
    graph: Graph,
    source: NodeID,
    target: Optional[NodeID] = None,
    *,
    excluded_nodes: Optional[Set[NodeID]] = None,
    excluded_edges: Optional[Set[EdgeKey]] = None,
) -> ShortestPathResult:
    """Compute shortest paths from a source node with Dijkstra's algorithm.

    Args:
        graph: Graph with non-negative edge weights.
        source: The source node.
        target: Optional destination. If given, the search stops once the
            destination's distance is final.
        excluded_nodes: Nodes to treat as removed.
        excluded_edges: Edge keys to treat as removed.

    Returns:
        Distances to every node (``inf`` if unreachable) and predecessors.

    Raises:
        NodeNotFound: If ``source`` (or ``target``) is not in the graph.
        NegativeWeight: If any edge weight is negative.
    """
    _check_source(graph, source)
    if target is not None and not graph.has_node(target):
        raise NodeNotFound(target, f"Target node '{target}' is not in the graph.")
    check_non_negative(graph)

    costs, pred, _ = _dijkstra(
        graph, source, target, excluded_nodes or set(), excluded_edges or set()
    )
    return ShortestPathResult(source=source, distances=costs, predecessors=pred)


def _trace_cycle(
    pred: Dict[NodeID, Optional[NodeID]], start: NodeID, num_nodes: int
) -> List[NodeID]:
    """Recover a cycle from a predecessor map that is known to contain one.

    Walking back ``num_nodes`` steps from ``start`` is guaranteed to land on
    the cycle; the cycle is then read off and returned in forward order,
    closed (first node repeated last).
    """
    node: Optional[NodeID] = start
    for _ in range(num_nodes):
        if node is None:
            return []
        node = pred[node]
    if node is None:
        return []
    cycle = [node]
    current = pred[node]
    while current is not None and current != node and len(cycle) <= num_nodes:
        cycle.append(current)
        current = pred[current]
    if current is None:
        return []
    cycle.append(node)
    cycle.reverse()
    return cycle


def bellman_ford(graph: Graph, source: NodeID) -> ShortestPathResult:
    """Single-source shortest paths with the Bellman-Ford algorithm.

    Relaxes every arc up to |V|-1 times (stopping early once a pass changes
    nothing), then makes one more pass: any arc that still relaxes proves a
    negative cycle reachable from the source.

    Args:
        graph: Graph with arbitrary real weights.
        source: The source node.

    Returns:
        Distances to every node (``inf`` if unreachable) and predecessors.

    Raises:
        NodeNotFound: If ``source`` is not in the graph.
        NegativeCycle: If a negative cycle is reachable from ``source``.
    """
    _check_source(graph, source)
    arcs = _arcs(graph)
    costs: Dict[NodeID, Cost] = {node: INF for node in graph}
    pred: Dict[NodeID, Optional[NodeID]] = {node: None for node in graph}
    costs[source] = 0

    for _ in range(len(costs) - 1):
        changed = False
        for u, v, w in arcs:
            cost_u = costs[u]
            if cost_u != INF and cost_u + w < costs[v]:
                costs[v] = cost_u + w
                pred[v] = u
                changed = True
        if not changed:
            break

    for u, v, w in arcs:
        cost_u = costs[u]
        if cost_u != INF and cost_u + w < costs[v]:
            pred[v] = u
            cycle = _trace_cycle(pred, v, len(costs))
            logger.debug("Bellman-Ford found negative cycle from %r: %s", source, cycle)
            raise NegativeCycle(cycle)

    return ShortestPathResult(source=source, distances=costs, predecessors=pred)


def bellman_ford_edges(
    nodes: List[NodeID], edges: List[Tuple[NodeID, NodeID, Weight]], source: NodeID
) -> ShortestPathResult:
    """Bellman-Ford over a plain node list and directed ``(u, v, w)`` edge list."""
    return bellman_ford(Graph.from_edges(edges, nodes=nodes), source)


def spfa(graph: Graph, source: NodeID) -> ShortestPathResult:
    """Shortest Path Faster Algorithm: queue-driven Bellman-Ford.

    Only nodes whose distance just improved are re-examined. The number of
    edges on each node's current shortest path is tracked; once it reaches
    |V| the path must repeat a node, which proves a negative cycle.

    Raises:
        NodeNotFound: If ``source`` is not in the graph.
        NegativeCycle: If a negative cycle is reachable from ``source``.
    """
    _check_source(graph, source)
    adjacency = graph._succ  # type: ignore[attr-defined]
    num_nodes = len(adjacency)
    costs: Dict[NodeID, Cost] = {node: INF for node in adjacency}
    pred: Dict[NodeID, Optional[NodeID]] = {node: None for node in adjacency}
    hops: Dict[NodeID, int] = {source: 0}
    costs[source] = 0

    queue = deque([source])
    in_queue = {source}
    while queue:
        node_id = queue.popleft()
        in_queue.discard(node_id)
        base = costs[node_id]
        for edge in adjacency[node_id]:
            neighbor_id = edge.target
            new_cost = base + edge.weight
            if new_cost < costs[neighbor_id]:
                costs[neighbor_id] = new_cost
                pred[neighbor_id] = node_id
                hops[neighbor_id] = hops[node_id] + 1
                if hops[neighbor_id] >= num_nodes:
                    cycle = _trace_cycle(pred, neighbor_id, num_nodes)
                    logger.debug("SPFA found negative cycle from %r: %s", source, cycle)
                    raise NegativeCycle(cycle)
                if neighbor_id not in in_queue:
                    in_queue.add(neighbor_id)
                    queue.append(neighbor_id)

    return ShortestPathResult(source=source, distances=costs, predecessors=pred)


def floyd_warshall(graph: Graph) -> AllPairsResult:
    """All-pairs shortest paths by dynamic programming over intermediate nodes.

    Distances live in a dense ``float64`` matrix; each round ``k`` relaxes
    every pair through node ``k`` in one vectorized step. Parallel edges keep
    the lightest weight.

    Returns:
        Distances and predecessors for every ordered pair.

    Raises:
        NegativeCycle: If some node's distance to itself becomes negative.
    """
    node_map = NodeMap.from_names(graph)
    n = len(node_map)
    dist = np.full((n, n), np.inf)
    np.fill_diagonal(dist, 0.0)
    pred = np.full((n, n), -1, dtype=np.int64)

    for u, v, w in _arcs(graph):
        i, j = node_map.to_index[u], node_map.to_index[v]
        if w < dist[i, j]:
            dist[i, j] = w
            pred[i, j] = i

    for k in range(n):
        via = dist[:, k : k + 1] + dist[k : k + 1, :]
        better = via < dist
        if better.any():
            dist = np.where(better, via, dist)
            pred = np.where(better, pred[k : k + 1, :], pred)

    negative = np.flatnonzero(np.diag(dist) < 0)
    if negative.size:
        i = int(negative[0])
        cycle_idx = [i]
        current = int(pred[i, i])
        while current not in (-1, i) and len(cycle_idx) <= n:
            cycle_idx.append(current)
            current = int(pred[i, current])
        cycle = [node_map.to_name[c] for c in reversed(cycle_idx)]
        cycle.append(cycle[0])
        logger.debug("Floyd-Warshall found negative cycle: %s", cycle)
        raise NegativeCycle(cycle)

    distances: Dict[NodeID, Dict[NodeID, Cost]] = {}
    predecessors: Dict[NodeID, Dict[NodeID, Optional[NodeID]]] = {}
    for i in range(n):
        u = node_map.to_name[i]
        distances[u] = {node_map.to_name[j]: float(dist[i, j]) for j in range(n)}
        predecessors[u] = {
            node_map.to_name[j]: (
                node_map.to_name[int(pred[i, j])] if pred[i, j] >= 0 and i != j else None
            )
            for j in range(n)
        }
    return AllPairsResult(distances=distances, predecessors=predecessors)


def johnson(graph: Graph) -> AllPairsResult:
    """All-pairs shortest paths with Johnson's algorithm.

    1. Add a virtual source with zero-weight edges to every node and run
       Bellman-Ford from it to get potentials ``h``.
    2. Reweight each arc to ``w + h(u) - h(v)``, which is non-negative.
    3. Run Dijkstra from every node and undo the reweighting.

    Raises:
        NegativeCycle: If the graph contains a negative cycle.
    """
    arcs = _arcs(graph)
    virtual = _VirtualSource()
    augmented = Graph.from_edges(
        arcs + [(virtual, node, 0) for node in graph], nodes=[*graph, virtual]
    )
    potentials = bellman_ford(augmented, virtual).distances
    logger.debug("Johnson potentials computed for %d nodes", len(graph))

    tolerance = ENGINE_CONFIG.reweight_tolerance
    reweighted_arcs = []
    for u, v, w in arcs:
        adjusted = w + potentials[u] - potentials[v]
        if -tolerance < adjusted < 0:
            adjusted = 0
        reweighted_arcs.append((u, v, adjusted))
    reweighted = Graph.from_edges(reweighted_arcs, nodes=graph)

    distances: Dict[NodeID, Dict[NodeID, Cost]] = {}
    predecessors: Dict[NodeID, Dict[NodeID, Optional[NodeID]]] = {}
    for u in graph:
        costs, pred, _ = _dijkstra(reweighted, u, None, set(), set())
        distances[u] = {
            v: (cost - potentials[u] + potentials[v] if cost != INF else INF)
            for v, cost in costs.items()
        }
        predecessors[u] = pred
    return AllPairsResult(distances=distances, predecessors=predecessors)
