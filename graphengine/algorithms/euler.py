"""Edge- and node-covering walks: Eulerian, Hamiltonian, Chinese Postman.

Eulerian walks use Hierholzer's algorithm over edge keys, so parallel edges
and self-loops are each traversed exactly once. Hamiltonian search is exact
backtracking and exponential in the worst case; it is meant for small graphs.
"""

from __future__ import annotations

from itertools import combinations
from typing import Dict, Iterator, List, Optional, Set, Tuple

import networkx as nx

from graphengine.algorithms.base import APSPAlg, Cost
from graphengine.algorithms.spf import check_non_negative, floyd_warshall, johnson
from graphengine.algorithms.traversal import connected_components
from graphengine.algorithms.types import AllPairsResult, PostmanTour
from graphengine.errors import Disconnected, InvalidInput
from graphengine.graph.model import Edge, EdgeKey, Graph, NodeID
from graphengine.logging import get_logger

logger = get_logger(__name__)


#
# Eulerian paths and circuits
#
def _edges_connected(graph: Graph) -> bool:
    """True if all nodes with at least one edge sit in one weak component."""
    touched = 0
    for component in connected_components(graph):
        if any(graph.degree(node) for node in component):
            touched += 1
    return touched <= 1


def _imbalance(graph: Graph) -> Tuple[List[NodeID], List[NodeID], bool]:
    """Classify nodes by degree parity or out/in balance.

    Returns:
        ``(starts, ends, ok)``. For directed graphs ``starts`` have one more
        out-edge than in-edges and ``ends`` the reverse; ``ok`` is False when
        any node is off by more than one. For undirected graphs ``starts``
        holds the odd-degree nodes and ``ends`` is empty.
    """
    if not graph.is_directed:
        odd = [node for node in graph if graph.degree(node) % 2]
        return odd, [], True
    starts: List[NodeID] = []
    ends: List[NodeID] = []
    ok = True
    for node in graph:
        diff = graph.out_degree(node) - graph.in_degree(node)
        if diff == 1:
            starts.append(node)
        elif diff == -1:
            ends.append(node)
        elif diff:
            ok = False
    return starts, ends, ok


def _path_start(graph: Graph) -> Optional[NodeID]:
    """Start node of an Eulerian path, or None if the degree rules fail."""
    starts, ends, ok = _imbalance(graph)
    if not ok:
        return None
    if graph.is_directed:
        if len(starts) == len(ends) == 1:
            return starts[0]
        if starts or ends:
            return None
    elif len(starts) == 2:
        return starts[0]
    elif starts:
        return None
    return next(node for node in graph if graph.out_degree(node))


def _hierholzer(graph: Graph, start: NodeID) -> List[NodeID]:
    """Walk every edge once starting at ``start``; returns the node sequence.

    Each node keeps a pointer into its edge list; an undirected edge is
    marked used by key so its mirrored entry is skipped.
    """
    adjacency = graph._succ  # type: ignore[attr-defined]
    used: Set[EdgeKey] = set()
    cursor: Dict[NodeID, int] = dict.fromkeys(adjacency, 0)
    stack = [start]
    walk: List[NodeID] = []
    while stack:
        node = stack[-1]
        edges = adjacency[node]
        i = cursor[node]
        while i < len(edges) and edges[i].key in used:
            i += 1
        if i == len(edges):
            cursor[node] = i
            walk.append(stack.pop())
        else:
            cursor[node] = i + 1
            used.add(edges[i].key)
            stack.append(edges[i].target)
    walk.reverse()
    return walk


def has_eulerian_path(graph: Graph) -> bool:
    """Return True if some walk uses every edge exactly once.

    Directed: at most one node with out-in = 1, a matching one with
    out-in = -1, the rest balanced. Undirected: zero or two odd-degree
    nodes. In both cases the nodes that have edges must be weakly connected.
    A graph without edges trivially qualifies.
    """
    if graph.number_of_edges() == 0:
        return True
    return _path_start(graph) is not None and _edges_connected(graph)


def has_eulerian_circuit(graph: Graph) -> bool:
    """Return True if some closed walk uses every edge exactly once."""
    if graph.number_of_edges() == 0:
        return True
    starts, ends, ok = _imbalance(graph)
    return ok and not starts and not ends and _edges_connected(graph)


def eulerian_path(graph: Graph) -> List[NodeID]:
    """Build a walk that uses every edge exactly once.

    When the graph also has a circuit the walk is closed. An edgeless
    graph gives an empty walk.

    Raises:
        Disconnected: If the edges span more than one component.
        InvalidInput: If the degree conditions do not hold.
    """
    if graph.number_of_edges() == 0:
        return []
    if not _edges_connected(graph):
        raise Disconnected("Edges lie in more than one component; no Eulerian path.")
    start = _path_start(graph)
    if start is None:
        raise InvalidInput("Degree conditions for an Eulerian path do not hold.")
    return _hierholzer(graph, start)


def eulerian_circuit(graph: Graph) -> List[NodeID]:
    """Build a closed walk that uses every edge exactly once.

    Raises:
        Disconnected: If the edges span more than one component.
        InvalidInput: If some node is unbalanced (directed) or has odd
            degree (undirected).
    """
    if graph.number_of_edges() == 0:
        return []
    if not _edges_connected(graph):
        raise Disconnected("Edges lie in more than one component; no Eulerian circuit.")
    starts, ends, ok = _imbalance(graph)
    if not ok or starts or ends:
        raise InvalidInput("Degree conditions for an Eulerian circuit do not hold.")
    start = next(node for node in graph if graph.out_degree(node))
    return _hierholzer(graph, start)


#
# Hamiltonian paths and cycles
#
def _simple_neighbors(graph: Graph) -> Dict[NodeID, List[NodeID]]:
    """Distinct out-neighbors per node, self-loops dropped, order preserved."""
    return {
        node: list(dict.fromkeys(n for n in graph.neighbors(node) if n != node))
        for node in graph
    }


def _hamiltonian(
    graph: Graph, neighbors: Dict[NodeID, List[NodeID]], start: NodeID, closed: bool
) -> Optional[List[NodeID]]:
    """Backtracking search for a path through every node from ``start``.

    ``path[i]`` and ``stack[i]`` move together: the iterator yields the
    candidates still to try after ``path[i]``.
    """
    total = len(graph)
    path = [start]
    on_path = {start}
    stack: List[Iterator[NodeID]] = [iter(neighbors[start])]
    while stack:
        if len(path) == total:
            if not closed or start in neighbors[path[-1]]:
                return path
            stack.pop()
            on_path.discard(path.pop())
            continue
        for nxt in stack[-1]:
            if nxt not in on_path:
                path.append(nxt)
                on_path.add(nxt)
                stack.append(iter(neighbors[nxt]))
                break
        else:
            stack.pop()
            on_path.discard(path.pop())
    return None


def hamiltonian_path(graph: Graph) -> Optional[List[NodeID]]:
    """Return a path visiting every node exactly once, or None.

    Every node is tried as the start, in graph order. Worst case is
    exponential in the number of nodes.
    """
    if len(graph) == 0:
        return None
    neighbors = _simple_neighbors(graph)
    for start in graph:
        path = _hamiltonian(graph, neighbors, start, closed=False)
        if path is not None:
            return path
    return None


def hamiltonian_cycle(graph: Graph) -> Optional[List[NodeID]]:
    """Return a closed walk visiting every node once, or None.

    The first node is repeated at the end. On undirected graphs a cycle
    needs at least three nodes; a single directed node needs a self-loop.
    """
    total = len(graph)
    if total == 0:
        return None
    first = next(iter(graph))
    if total == 1:
        return [first, first] if graph.is_directed and first in graph.neighbors(first) else None
    if not graph.is_directed and total < 3:
        return None
    path = _hamiltonian(graph, _simple_neighbors(graph), first, closed=True)
    return None if path is None else path + [first]


def has_hamiltonian_path(graph: Graph) -> bool:
    return hamiltonian_path(graph) is not None


def has_hamiltonian_cycle(graph: Graph) -> bool:
    return hamiltonian_cycle(graph) is not None


#
# Chinese Postman
#
def _all_pairs(graph: Graph, apsp: APSPAlg) -> AllPairsResult:
    if apsp == APSPAlg.FLOYD_WARSHALL:
        return floyd_warshall(graph)
    if apsp == APSPAlg.JOHNSON:
        return johnson(graph)
    raise InvalidInput(f"Unknown all-pairs algorithm: {apsp!r}")


def _match_odd_nodes(
    odd: List[NodeID], all_pairs: AllPairsResult
) -> List[Tuple[NodeID, NodeID]]:
    """Minimum-weight perfect matching of ``odd`` under shortest distances."""
    complete = nx.Graph()
    complete.add_nodes_from(range(len(odd)))
    for i, j in combinations(range(len(odd)), 2):
        complete.add_edge(i, j, weight=all_pairs.distance(odd[i], odd[j]))
    matching = nx.min_weight_matching(complete)
    pairs = sorted((min(i, j), max(i, j)) for i, j in matching)
    return [(odd[i], odd[j]) for i, j in pairs]


def _lightest_edge(graph: Graph, u: NodeID, v: NodeID) -> Edge:
    return min(
        (edge for edge in graph.out_edges(u) if edge.target == v),
        key=lambda edge: edge.weight,
    )


def chinese_postman(
    graph: Graph, *, apsp: APSPAlg = APSPAlg.FLOYD_WARSHALL
) -> PostmanTour:
    """Shortest closed walk traversing every edge at least once.

    Odd-degree nodes are paired by a minimum-weight perfect matching on
    their shortest-path distances (NetworkX blossom matching). The edges on
    each matched pair's shortest path are duplicated, which makes every
    degree even, and Hierholzer's algorithm walks the augmented multigraph.

    Args:
        graph: Undirected graph with non-negative weights.
        apsp: All-pairs algorithm for the odd-node distances.

    Returns:
        The walk (starting and ending at the same node), its total cost, and
        the duplicated edges. An edgeless graph gives an empty walk.

    Raises:
        InvalidInput: If the graph is directed.
        NegativeWeight: If any edge weight is negative.
        Disconnected: If the edges span more than one component.
    """
    if graph.is_directed:
        raise InvalidInput("Chinese Postman is implemented for undirected graphs only.")
    check_non_negative(graph)
    if graph.number_of_edges() == 0:
        return PostmanTour(walk=[], total_cost=0, added_edges=[])
    if not _edges_connected(graph):
        raise Disconnected("Edges lie in more than one component; no postman tour.")

    odd = [node for node in graph if graph.degree(node) % 2]
    added: List[Edge] = []
    if odd:
        all_pairs = _all_pairs(graph, apsp)
        for u, v in _match_odd_nodes(odd, all_pairs):
            hops = all_pairs.path(u, v)
            added.extend(_lightest_edge(graph, a, b) for a, b in zip(hops, hops[1:]))

    original = graph.edges()
    augmented = Graph.from_edges(
        original + added, directed=False, nodes=graph.nodes(), weighted=True
    )
    start = next(node for node in graph if graph.out_degree(node))
    walk = _hierholzer(augmented, start)
    total: Cost = sum(edge.weight for edge in original) + sum(e.weight for e in added)
    logger.debug(
        "Chinese postman: %d odd nodes, %d duplicated edges, cost %s",
        len(odd),
        len(added),
        total,
    )
    return PostmanTour(walk=walk, total_cost=total, added_edges=added)
