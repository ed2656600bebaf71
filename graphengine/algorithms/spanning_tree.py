"""Minimum spanning trees: Kruskal and Prim.

Both operate on undirected graphs. Kruskal naturally returns a minimum
spanning forest on disconnected input; Prim covers the start node's
component unless asked to restart for every component.
"""

from __future__ import annotations

from heapq import heappop, heappush
from itertools import count
from typing import List, Optional, Set, Tuple

from graphengine.algorithms.base import Cost
from graphengine.algorithms.types import SpanningTree
from graphengine.algorithms.union_find import UnionFind
from graphengine.errors import InvalidInput, NodeNotFound
from graphengine.graph.model import Edge, Graph, NodeID


def _require_undirected(graph: Graph, name: str) -> None:
    if graph.is_directed:
        raise InvalidInput(
            f"{name} needs an undirected graph; convert with graph.to_undirected()."
        )


def kruskal(graph: Graph) -> SpanningTree:
    """Kruskal's minimum spanning tree (forest on disconnected graphs).

    Edges are sorted by weight with a stable sort, so equal weights keep
    their input order, and each edge joining two different union-find sets
    is taken until |V|-1 edges are chosen or edges run out.

    Raises:
        InvalidInput: If the graph is directed.
    """
    _require_undirected(graph, "Kruskal")
    uf: UnionFind = UnionFind(graph.nodes())
    needed = max(len(graph) - 1, 0)
    chosen: List[Edge] = []
    total: Cost = 0
    for edge in sorted(graph.edges(), key=lambda e: e.weight):
        if len(chosen) == needed:
            break
        if uf.union(edge.source, edge.target):
            chosen.append(edge)
            total += edge.weight
    return SpanningTree(edges=chosen, total_weight=total)


def _prim_component(
    graph: Graph, start: NodeID, visited: Set[NodeID], chosen: List[Edge]
) -> Cost:
    adjacency = graph._succ  # type: ignore[attr-defined]
    tie = count()
    frontier: List[Tuple[Cost, int, Edge]] = []
    total: Cost = 0

    visited.add(start)
    for edge in adjacency[start]:
        heappush(frontier, (edge.weight, next(tie), edge))

    while frontier:
        weight, _, edge = heappop(frontier)
        if edge.target in visited:
            continue
        visited.add(edge.target)
        chosen.append(edge)
        total += weight
        for nxt in adjacency[edge.target]:
            if nxt.target not in visited:
                heappush(frontier, (nxt.weight, next(tie), nxt))
    return total


def prim(
    graph: Graph, start: Optional[NodeID] = None, *, span_forest: bool = False
) -> SpanningTree:
    """Prim's minimum spanning tree grown from ``start``.

    Args:
        graph: Undirected weighted graph.
        start: Root node; defaults to the first node of the graph.
        span_forest: If True, restart from every node not yet covered so the
            result is a spanning forest of the whole graph.

    Returns:
        Tree edges oriented away from the root, and their total weight. Without
        ``span_forest`` only the start node's component is covered.

    Raises:
        InvalidInput: If the graph is directed.
        NodeNotFound: If ``start`` is given and not in the graph.
    """
    _require_undirected(graph, "Prim")
    if start is not None and not graph.has_node(start):
        raise NodeNotFound(start, f"Start node '{start}' is not in the graph.")
    chosen: List[Edge] = []
    if len(graph) == 0:
        return SpanningTree(edges=chosen, total_weight=0)
    if start is None:
        start = next(iter(graph))

    visited: Set[NodeID] = set()
    total = _prim_component(graph, start, visited, chosen)
    if span_forest:
        for node in graph:
            if node not in visited:
                total += _prim_component(graph, node, visited, chosen)
    return SpanningTree(edges=chosen, total_weight=total)
