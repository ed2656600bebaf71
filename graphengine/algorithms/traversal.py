"""Traversal layer: BFS, DFS, components, bipartiteness, cycles, topological order.

All depth-first routines keep an explicit stack of adjacency iterators, so
they visit nodes in exactly the order a recursive DFS would while never
growing the Python call stack.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterator, List, Optional, Set, Tuple

from graphengine.algorithms.union_find import UnionFind
from graphengine.errors import CyclicGraph, InvalidInput
from graphengine.graph.model import Edge, Graph, NodeID
from graphengine.logging import get_logger

logger = get_logger(__name__)

_WHITE, _GRAY, _BLACK = 0, 1, 2


def _undirected_neighbors(graph: Graph, node: NodeID) -> Iterator[NodeID]:
    """Neighbors of ``node`` ignoring edge direction."""
    for edge in graph._succ[node]:  # type: ignore[attr-defined]
        yield edge.target
    if graph.is_directed:
        for edge in graph._pred[node]:  # type: ignore[attr-defined]
            yield edge.source


def _preorder(
    adjacency: Dict[NodeID, List[Edge]], root: NodeID, visited: Set[NodeID]
) -> List[NodeID]:
    """Pre-order DFS from ``root`` over unvisited nodes; marks them visited."""
    order = [root]
    visited.add(root)
    stack: List[Iterator[Edge]] = [iter(adjacency[root])]
    while stack:
        for edge in stack[-1]:
            nbr = edge.target
            if nbr not in visited:
                visited.add(nbr)
                order.append(nbr)
                stack.append(iter(adjacency[nbr]))
                break
        else:
            stack.pop()
    return order


def _postorder(
    adjacency: Dict[NodeID, List[Edge]], root: NodeID, visited: Set[NodeID]
) -> List[NodeID]:
    """Finish-order DFS from ``root`` over unvisited nodes; marks them visited."""
    order: List[NodeID] = []
    visited.add(root)
    stack: List[Tuple[NodeID, Iterator[Edge]]] = [(root, iter(adjacency[root]))]
    while stack:
        node, edges = stack[-1]
        for edge in edges:
            nbr = edge.target
            if nbr not in visited:
                visited.add(nbr)
                stack.append((nbr, iter(adjacency[nbr])))
                break
        else:
            stack.pop()
            order.append(node)
    return order


def bfs(graph: Graph, source: NodeID) -> List[NodeID]:
    """Breadth-first search.

    Nodes come out in non-decreasing hop distance from ``source``; nodes at
    equal distance keep their discovery order.

    Args:
        graph: Graph to traverse.
        source: Start node.

    Returns:
        Visited nodes in BFS order, or an empty list if ``source`` is absent.
    """
    if not graph.has_node(source):
        return []
    adjacency = graph._succ  # type: ignore[attr-defined]
    order = [source]
    visited = {source}
    queue = deque([source])
    while queue:
        node = queue.popleft()
        for edge in adjacency[node]:
            nbr = edge.target
            if nbr not in visited:
                visited.add(nbr)
                order.append(nbr)
                queue.append(nbr)
    return order


def bfs_distances(graph: Graph, source: NodeID) -> Dict[NodeID, int]:
    """Hop count from ``source`` to every reachable node ({} if source is absent)."""
    if not graph.has_node(source):
        return {}
    adjacency = graph._succ  # type: ignore[attr-defined]
    hops = {source: 0}
    queue = deque([source])
    while queue:
        node = queue.popleft()
        for edge in adjacency[node]:
            if edge.target not in hops:
                hops[edge.target] = hops[node] + 1
                queue.append(edge.target)
    return hops


def dfs(graph: Graph, source: NodeID) -> List[NodeID]:
    """Depth-first search in pre-order.

    Neighbors are explored in adjacency order, giving the same sequence as
    the textbook recursive DFS, but with an explicit stack.

    Returns:
        Visited nodes in discovery order, or an empty list if ``source`` is absent.
    """
    if not graph.has_node(source):
        return []
    return _preorder(graph._succ, source, set())  # type: ignore[attr-defined]


def dfs_postorder(graph: Graph, source: Optional[NodeID] = None) -> List[NodeID]:
    """Depth-first finish order.

    Args:
        graph: Graph to traverse.
        source: Start node. If None, every node is used as a root in
            insertion order, covering the whole graph.

    Returns:
        Nodes in the order their DFS subtrees complete.
    """
    adjacency = graph._succ  # type: ignore[attr-defined]
    if source is not None:
        if not graph.has_node(source):
            return []
        return _postorder(adjacency, source, set())
    visited: Set[NodeID] = set()
    order: List[NodeID] = []
    for root in graph:
        if root not in visited:
            order.extend(_postorder(adjacency, root, visited))
    return order


def connected_components(graph: Graph) -> List[Set[NodeID]]:
    """Partition all nodes into connected components.

    Edge direction is ignored, so on a directed graph the result is the
    weakly connected components. Components are listed in discovery order.

    Returns:
        Disjoint node sets covering every node of the graph.
    """
    visited: Set[NodeID] = set()
    components: List[Set[NodeID]] = []
    for root in graph:
        if root in visited:
            continue
        component = {root}
        visited.add(root)
        queue = deque([root])
        while queue:
            node = queue.popleft()
            for nbr in _undirected_neighbors(graph, node):
                if nbr not in visited:
                    visited.add(nbr)
                    component.add(nbr)
                    queue.append(nbr)
        components.append(component)
    return components


def is_connected(graph: Graph) -> bool:
    """Return True if the graph has exactly one (weakly) connected component.

    Raises:
        InvalidInput: If the graph has no nodes.
    """
    if len(graph) == 0:
        raise InvalidInput("Connectivity is undefined for an empty graph.")
    return len(connected_components(graph)) == 1


def bipartition(graph: Graph) -> Optional[Tuple[Set[NodeID], Set[NodeID]]]:
    """Two-color the graph, ignoring edge direction.

    Each component is colored independently by BFS, its root taking color 0.

    Returns:
        The two color classes, or None as soon as an edge joins two nodes of
        the same color (including a self-loop).
    """
    color: Dict[NodeID, int] = {}
    for root in graph:
        if root in color:
            continue
        color[root] = 0
        queue = deque([root])
        while queue:
            node = queue.popleft()
            for nbr in _undirected_neighbors(graph, node):
                if nbr not in color:
                    color[nbr] = 1 - color[node]
                    queue.append(nbr)
                elif color[nbr] == color[node]:
                    return None
    left = {node for node, side in color.items() if side == 0}
    right = {node for node, side in color.items() if side == 1}
    return left, right


def is_bipartite(graph: Graph) -> bool:
    """Return True if the graph can be two-colored."""
    return bipartition(graph) is not None


def find_cycle_directed(graph: Graph) -> Optional[List[NodeID]]:
    """Find one directed cycle using white/gray/black DFS.

    A gray node is on the current DFS path; reaching one again closes a cycle.

    Returns:
        The cycle as a closed node list (first node repeated last), or None.

    Raises:
        InvalidInput: If the graph is undirected.
    """
    if not graph.is_directed:
        raise InvalidInput(
            "Directed cycle detection needs a directed graph; "
            "use has_cycle_undirected for undirected graphs."
        )
    adjacency = graph._succ  # type: ignore[attr-defined]
    state: Dict[NodeID, int] = {node: _WHITE for node in graph}
    for root in graph:
        if state[root] != _WHITE:
            continue
        state[root] = _GRAY
        stack: List[Tuple[NodeID, Iterator[Edge]]] = [(root, iter(adjacency[root]))]
        while stack:
            node, edges = stack[-1]
            for edge in edges:
                nbr = edge.target
                if state[nbr] == _GRAY:
                    path = [n for n, _ in stack]
                    return path[path.index(nbr):] + [nbr]
                if state[nbr] == _WHITE:
                    state[nbr] = _GRAY
                    stack.append((nbr, iter(adjacency[nbr])))
                    break
            else:
                state[node] = _BLACK
                stack.pop()
    return None


def has_cycle_directed(graph: Graph) -> bool:
    """Return True if the directed graph contains a cycle (self-loops included)."""
    return find_cycle_directed(graph) is not None


def is_dag(graph: Graph) -> bool:
    """Return True for a directed acyclic graph."""
    return graph.is_directed and not has_cycle_directed(graph)


def has_cycle_undirected(graph: Graph) -> bool:
    """Return True if the graph, viewed as undirected, contains a cycle.

    Each edge is merged through a union-find; an edge whose endpoints are
    already joined closes a cycle. Self-loops and parallel edges count.
    """
    uf: UnionFind = UnionFind(graph.nodes())
    for edge in graph.edges():
        if not uf.union(edge.source, edge.target):
            return True
    return False


def has_cycle(graph: Graph) -> bool:
    """Dispatch to the directed or undirected cycle check."""
    if graph.is_directed:
        return has_cycle_directed(graph)
    return has_cycle_undirected(graph)


def topological_sort(graph: Graph) -> List[NodeID]:
    """Order nodes so every edge points from an earlier to a later node.

    Uses Kahn's algorithm; among ready nodes the insertion order wins.

    Returns:
        All nodes in a topological order.

    Raises:
        InvalidInput: If the graph is undirected.
        CyclicGraph: If the graph has a cycle. No partial order is returned.
    """
    if not graph.is_directed:
        raise InvalidInput("Topological sort needs a directed graph.")
    in_degree = {node: graph.in_degree(node) for node in graph}
    ready = deque(node for node, deg in in_degree.items() if deg == 0)
    adjacency = graph._succ  # type: ignore[attr-defined]
    order: List[NodeID] = []
    while ready:
        node = ready.popleft()
        order.append(node)
        for edge in adjacency[node]:
            in_degree[edge.target] -= 1
            if in_degree[edge.target] == 0:
                ready.append(edge.target)
    if len(order) < len(graph):
        cycle = find_cycle_directed(graph)
        logger.debug("Topological sort aborted, cycle found: %s", cycle)
        raise CyclicGraph(cycle)
    return order
