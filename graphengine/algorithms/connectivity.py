"""Strongly connected components, bridges and articulation points.

Every DFS here is iterative: each frame on the work stack holds the node and
an iterator over its remaining edges, so graphs with very long paths do not
hit the interpreter's recursion limit.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Set, Tuple

from graphengine.algorithms.traversal import _preorder, dfs_postorder
from graphengine.graph.model import Edge, EdgeKey, Graph, NodeID


def kosaraju(graph: Graph) -> List[Set[NodeID]]:
    """Strongly connected components by Kosaraju's two-pass algorithm.

    First pass: DFS finish order over the whole graph. Second pass: DFS on
    the transposed graph, taking roots in reverse finish order; each tree is
    one SCC.

    Returns:
        SCCs in the order their roots are met in the second pass (a
        topological order of the condensation).
    """
    finish_order = dfs_postorder(graph)
    transposed = graph.reverse()._succ  # type: ignore[attr-defined]
    visited: Set[NodeID] = set()
    components: List[Set[NodeID]] = []
    for node in reversed(finish_order):
        if node not in visited:
            components.append(set(_preorder(transposed, node, visited)))
    return components


def tarjan_scc(graph: Graph) -> List[Set[NodeID]]:
    """Strongly connected components by Tarjan's single-pass algorithm.

    Each node gets a discovery index and a low-link value. Nodes stay on an
    explicit stack until their component's root (low-link == index) finishes.

    Returns:
        SCCs in reverse topological order of the condensation.
    """
    adjacency = graph._succ  # type: ignore[attr-defined]
    index: Dict[NodeID, int] = {}
    low: Dict[NodeID, int] = {}
    scc_stack: List[NodeID] = []
    on_stack: Set[NodeID] = set()
    components: List[Set[NodeID]] = []
    counter = 0

    for root in adjacency:
        if root in index:
            continue
        index[root] = low[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        work: List[Tuple[NodeID, Iterator[Edge]]] = [(root, iter(adjacency[root]))]

        while work:
            node, edges = work[-1]
            for edge in edges:
                nbr = edge.target
                if nbr not in index:
                    index[nbr] = low[nbr] = counter
                    counter += 1
                    scc_stack.append(nbr)
                    on_stack.add(nbr)
                    work.append((nbr, iter(adjacency[nbr])))
                    break
                if nbr in on_stack:
                    low[node] = min(low[node], index[nbr])
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    low[parent] = min(low[parent], low[node])
                if low[node] == index[node]:
                    component: Set[NodeID] = set()
                    while True:
                        member = scc_stack.pop()
                        on_stack.discard(member)
                        component.add(member)
                        if member == node:
                            break
                    components.append(component)
    return components


def is_strongly_connected(graph: Graph) -> bool:
    """Return True if every node reaches every other node."""
    return len(graph) > 0 and len(tarjan_scc(graph)) == 1


def _low_link(graph: Graph) -> Tuple[List[Tuple[NodeID, NodeID]], Set[NodeID]]:
    """One DFS computing both bridges and articulation points.

    The parent is skipped by edge key rather than by node, so a second
    parallel edge to the parent acts as a back edge.
    """
    undirected = graph.to_undirected() if graph.is_directed else graph
    adjacency = undirected._succ  # type: ignore[attr-defined]
    disc: Dict[NodeID, int] = {}
    low: Dict[NodeID, int] = {}
    bridges: List[Tuple[NodeID, NodeID]] = []
    cut_nodes: Set[NodeID] = set()
    counter = 0

    for root in adjacency:
        if root in disc:
            continue
        disc[root] = low[root] = counter
        counter += 1
        root_children = 0
        work: List[Tuple[NodeID, Optional[EdgeKey], Iterator[Edge]]] = [
            (root, None, iter(adjacency[root]))
        ]

        while work:
            node, parent_key, edges = work[-1]
            for edge in edges:
                if edge.key == parent_key:
                    continue
                nbr = edge.target
                if nbr not in disc:
                    disc[nbr] = low[nbr] = counter
                    counter += 1
                    if len(work) == 1:
                        root_children += 1
                    work.append((nbr, edge.key, iter(adjacency[nbr])))
                    break
                low[node] = min(low[node], disc[nbr])
            else:
                work.pop()
                if not work:
                    continue
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])
                if low[node] > disc[parent]:
                    bridges.append((parent, node))
                if parent != root and low[node] >= disc[parent]:
                    cut_nodes.add(parent)

        if root_children >= 2:
            cut_nodes.add(root)

    return bridges, cut_nodes


def bridges(graph: Graph) -> List[Tuple[NodeID, NodeID]]:
    """Edges whose removal disconnects their component.

    A tree edge (u, v) is a bridge when ``low[v] > disc[u]``: nothing in
    v's subtree reaches back to u or above. Directed input is analysed
    through its undirected view; parallel edges are never bridges.

    Returns:
        Bridges as ``(parent, child)`` pairs in DFS orientation.
    """
    return _low_link(graph)[0]


def articulation_points(graph: Graph) -> Set[NodeID]:
    """Nodes whose removal disconnects their component.

    A non-root u is a cut node if some child v has ``low[v] >= disc[u]``;
    a DFS root is one iff it has at least two DFS children. Directed input
    is analysed through its undirected view.
    """
    return _low_link(graph)[1]
