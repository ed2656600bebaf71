"""Yen's K shortest loopless paths.

The first path is a plain Dijkstra shortest path. Every later path is found
by deviating from the most recently accepted path: for each spur node on it,
the root prefix is kept, the root's nodes and every edge that an accepted
path with the same root takes next are removed, and Dijkstra finds the best
spur from the spur node to the destination. Candidates wait in a heap and the
cheapest one becomes the next path.
"""

from __future__ import annotations

from heapq import heappop, heappush
from typing import Iterator, List, Optional, Set, Tuple

from graphengine.algorithms.base import INF, Cost
from graphengine.algorithms.spf import _dijkstra, check_non_negative
from graphengine.algorithms.types import Path
from graphengine.errors import NodeNotFound
from graphengine.graph.model import EdgeKey, Graph, NodeID
from graphengine.logging import get_logger

logger = get_logger(__name__)


def _shortest_path(
    graph: Graph,
    src_node: NodeID,
    dst_node: NodeID,
    excluded_nodes: Set[NodeID],
    excluded_edges: Set[EdgeKey],
) -> Optional[Path]:
    costs, pred, pred_edge = _dijkstra(
        graph, src_node, dst_node, excluded_nodes, excluded_edges
    )
    if costs[dst_node] == INF:
        return None
    nodes = [dst_node]
    edges: List[EdgeKey] = []
    node = dst_node
    while node != src_node:
        edges.append(pred_edge[node])  # type: ignore[arg-type]
        node = pred[node]
        nodes.append(node)
    nodes.reverse()
    edges.reverse()
    return Path(nodes=tuple(nodes), edges=tuple(edges), cost=costs[dst_node])


def ksp(
    graph: Graph,
    source: NodeID,
    target: NodeID,
    *,
    max_k: Optional[int] = None,
    max_path_cost: Cost = INF,
    max_path_cost_factor: Optional[float] = None,
) -> Iterator[Path]:
    """Yield loopless source->target paths in non-decreasing cost order.

    Args:
        graph: Graph with non-negative weights.
        source: The source node.
        target: The destination node.
        max_k: If set, yield at most this many paths.
        max_path_cost: Do not yield any path costing more than this.
        max_path_cost_factor: If set, tighten ``max_path_cost`` to
            ``min(max_path_cost, best_path_cost * max_path_cost_factor)``.

    Yields:
        `Path` objects. Parallel edges produce distinct paths.

    Raises:
        NodeNotFound: If ``source`` or ``target`` is not in the graph.
        NegativeWeight: If any edge weight is negative.
    """
    for node in (source, target):
        if not graph.has_node(node):
            raise NodeNotFound(node)
    check_non_negative(graph)
    if max_k is not None and max_k <= 0:
        return

    weights = {edge.key: edge.weight for edge in graph.edges()}

    best = _shortest_path(graph, source, target, set(), set())
    if best is None:
        return
    if max_path_cost_factor:
        max_path_cost = min(max_path_cost, best.cost * max_path_cost_factor)
    if best.cost > max_path_cost:
        return

    accepted: List[Path] = [best]
    yield best

    candidates: List[Tuple[Cost, int, Path]] = []
    seen = {best.edges}
    candidate_id = 0

    while max_k is None or len(accepted) < max_k:
        last = accepted[-1]
        for idx in range(len(last.edges)):
            spur_node = last.nodes[idx]
            root_nodes = last.nodes[:idx]
            root_edges = last.edges[:idx]

            # Force a deviation: drop the next edge of every accepted path
            # that shares this root.
            excl_e = {
                path.edges[idx]
                for path in accepted
                if len(path.edges) > idx and path.edges[:idx] == root_edges
            }
            excl_n = set(root_nodes)

            spur = _shortest_path(graph, spur_node, target, excl_n, excl_e)
            if spur is None:
                continue

            edges = root_edges + spur.edges
            if edges in seen:
                continue
            cost = sum(weights[key] for key in edges)
            if cost > max_path_cost:
                continue
            seen.add(edges)
            heappush(
                candidates,
                (
                    cost,
                    candidate_id,
                    Path(nodes=root_nodes + spur.nodes, edges=edges, cost=cost),
                ),
            )
            candidate_id += 1

        if not candidates:
            break

        _, _, path = heappop(candidates)
        accepted.append(path)
        yield path

    logger.debug(
        "KSP %r->%r produced %d paths (%d candidates left)",
        source,
        target,
        len(accepted),
        len(candidates),
    )


def yen_k_shortest_paths(
    graph: Graph, source: NodeID, target: NodeID, k: int
) -> List[Path]:
    """Return up to ``k`` loopless shortest paths, cheapest first.

    Fewer than ``k`` paths are returned when fewer exist; ``k <= 0`` gives [].
    """
    if k <= 0:
        for node in (source, target):
            if not graph.has_node(node):
                raise NodeNotFound(node)
        return []
    return list(ksp(graph, source, target, max_k=k))
