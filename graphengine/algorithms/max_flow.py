"""Maximum flow: Edmonds-Karp and Dinic over a paired-arc residual network.

Edge weights are capacities. Each edge becomes a forward arc and a reverse
arc stored side by side, so ``arc ^ 1`` is always the partner of ``arc``.
A directed edge's reverse arc starts at zero capacity; an undirected edge
gets its full capacity in both directions.

The input graph is never modified: all state lives in the residual network
built for the call.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Literal, Set, Tuple, Union, overload

from graphengine.algorithms.base import MaxFlowAlg
from graphengine.algorithms.types import EdgeRef, FlowSummary
from graphengine.config import ENGINE_CONFIG
from graphengine.errors import InvalidInput, NodeNotFound
from graphengine.graph.model import Edge, Graph, NodeID, NodeMap
from graphengine.logging import get_logger

logger = get_logger(__name__)


class ResidualNetwork:
    """Integer-indexed residual graph built from a `Graph`.

    Attributes:
        node_map: Node <-> index mapping.
        adj: Outgoing arc ids per node index.
        head: Target node index of each arc.
        cap: Remaining capacity of each arc.
        edge_arcs: ``(edge, forward_arc_id)`` for every original edge.
    """

    def __init__(self, graph: Graph) -> None:
        self.node_map = NodeMap.from_names(graph)
        self.directed = graph.is_directed
        self.adj: List[List[int]] = [[] for _ in range(len(self.node_map))]
        self.head: List[int] = []
        self.cap: List[float] = []
        self.edge_arcs: List[Tuple[Edge, int]] = []

        to_index = self.node_map.to_index
        for edge in graph.edges():
            if edge.weight < 0:
                raise InvalidInput(
                    f"Edge {edge.source}->{edge.target} has negative capacity {edge.weight}."
                )
            u, v = to_index[edge.source], to_index[edge.target]
            arc = self._add_arc(u, v, edge.weight)
            self._add_arc(v, u, 0 if self.directed else edge.weight)
            self.edge_arcs.append((edge, arc))

    def _add_arc(self, u: int, v: int, capacity: float) -> int:
        arc = len(self.head)
        self.head.append(v)
        self.cap.append(capacity)
        self.adj[u].append(arc)
        return arc

    def tail(self, arc: int) -> int:
        return self.head[arc ^ 1]

    def push(self, arc: int, amount: float) -> None:
        self.cap[arc] -= amount
        self.cap[arc ^ 1] += amount

    def levels(self, src: int) -> List[int]:
        """BFS hop levels over arcs with remaining capacity (-1 if unreached)."""
        is_open = ENGINE_CONFIG.is_positive_capacity
        level = [-1] * len(self.adj)
        level[src] = 0
        queue = deque([src])
        while queue:
            u = queue.popleft()
            for arc in self.adj[u]:
                v = self.head[arc]
                if level[v] < 0 and is_open(self.cap[arc]):
                    level[v] = level[u] + 1
                    queue.append(v)
        return level


def _edmonds_karp(net: ResidualNetwork, src: int, dst: int) -> float:
    is_open = ENGINE_CONFIG.is_positive_capacity
    total: float = 0
    augmentations = 0
    while True:
        parent_arc = [-1] * len(net.adj)
        queue = deque([src])
        found = False
        while queue and not found:
            u = queue.popleft()
            for arc in net.adj[u]:
                v = net.head[arc]
                if v != src and parent_arc[v] < 0 and is_open(net.cap[arc]):
                    parent_arc[v] = arc
                    if v == dst:
                        found = True
                        break
                    queue.append(v)
        if not found:
            break

        bottleneck = float("inf")
        v = dst
        while v != src:
            arc = parent_arc[v]
            bottleneck = min(bottleneck, net.cap[arc])
            v = net.tail(arc)
        v = dst
        while v != src:
            arc = parent_arc[v]
            net.push(arc, bottleneck)
            v = net.tail(arc)
        total += bottleneck
        augmentations += 1

    logger.debug("Edmonds-Karp: %d augmenting paths, flow=%s", augmentations, total)
    return total


def _blocking_augment(
    net: ResidualNetwork, src: int, dst: int, level: List[int], ptr: List[int]
) -> float:
    """Push flow along one level-graph path; return 0 when none remains.

    ``ptr[u]`` only moves forward within a phase, so an arc found useless
    (saturated or leading to a dead end) is never examined again.
    """
    is_open = ENGINE_CONFIG.is_positive_capacity
    path: List[int] = []
    u = src
    while True:
        if u == dst:
            bottleneck = min(net.cap[arc] for arc in path)
            for arc in path:
                net.push(arc, bottleneck)
            return bottleneck

        arcs = net.adj[u]
        while ptr[u] < len(arcs):
            arc = arcs[ptr[u]]
            v = net.head[arc]
            if is_open(net.cap[arc]) and level[v] == level[u] + 1:
                path.append(arc)
                u = v
                break
            ptr[u] += 1
        else:
            # Dead end: drop u from the level graph and retreat.
            level[u] = -1
            if not path:
                return 0
            arc = path.pop()
            u = net.tail(arc)
            ptr[u] += 1


def _dinic(net: ResidualNetwork, src: int, dst: int) -> float:
    total: float = 0
    phases = 0
    while True:
        level = net.levels(src)
        if level[dst] < 0:
            break
        phases += 1
        ptr = [0] * len(net.adj)
        while True:
            pushed = _blocking_augment(net, src, dst, level, ptr)
            if not pushed:
                break
            total += pushed
    logger.debug("Dinic: %d phases, flow=%s", phases, total)
    return total


def _build_flow_summary(
    net: ResidualNetwork, src: int, total_flow: float
) -> FlowSummary:
    """Build a FlowSummary from the residual network state."""
    to_name = net.node_map.to_name
    edge_flow: Dict[EdgeRef, float] = {}
    residual_cap: Dict[EdgeRef, float] = {}
    for edge, arc in net.edge_arcs:
        ref = (edge.source, edge.target, edge.key)
        residual_cap[ref] = net.cap[arc]
        edge_flow[ref] = edge.weight - net.cap[arc]

    reachable_idx = {i for i, lvl in enumerate(net.levels(src)) if lvl >= 0}
    reachable: Set[NodeID] = {to_name[i] for i in reachable_idx}

    min_cut: List[EdgeRef] = []
    for edge, arc in net.edge_arcs:
        u_in = net.tail(arc) in reachable_idx
        v_in = net.head[arc] in reachable_idx
        if (u_in and not v_in) or (not net.directed and v_in and not u_in):
            min_cut.append((edge.source, edge.target, edge.key))

    return FlowSummary(
        total_flow=float(total_flow),
        edge_flow=edge_flow,
        residual_cap=residual_cap,
        reachable=reachable,
        min_cut=min_cut,
    )


def _run(
    graph: Graph, source: NodeID, sink: NodeID, algorithm: MaxFlowAlg
) -> FlowSummary:
    for node, role in ((source, "Source"), (sink, "Sink")):
        if not graph.has_node(node):
            raise NodeNotFound(node, f"{role} node '{node}' is not in the graph.")
    net = ResidualNetwork(graph)
    src = net.node_map.to_index[source]
    dst = net.node_map.to_index[sink]
    # Degenerate case (s == t): conservation forces the net surplus to zero.
    if src == dst:
        total: float = 0.0
    elif algorithm == MaxFlowAlg.EDMONDS_KARP:
        total = _edmonds_karp(net, src, dst)
    elif algorithm == MaxFlowAlg.DINIC:
        total = _dinic(net, src, dst)
    else:
        raise InvalidInput(f"Unknown max-flow algorithm: {algorithm!r}")
    return _build_flow_summary(net, src, total)


def edmonds_karp(graph: Graph, source: NodeID, sink: NodeID) -> FlowSummary:
    """Maximum flow by shortest augmenting paths (BFS), O(VE^2).

    Raises:
        NodeNotFound: If ``source`` or ``sink`` is not in the graph.
        InvalidInput: If any capacity is negative.
    """
    return _run(graph, source, sink, MaxFlowAlg.EDMONDS_KARP)


def dinic(graph: Graph, source: NodeID, sink: NodeID) -> FlowSummary:
    """Maximum flow by Dinic's algorithm, O(V^2 E).

    Each phase builds a BFS level graph and saturates it with a blocking
    flow found by an iterative DFS with per-node arc pointers.

    Raises:
        NodeNotFound: If ``source`` or ``sink`` is not in the graph.
        InvalidInput: If any capacity is negative.
    """
    return _run(graph, source, sink, MaxFlowAlg.DINIC)


@overload
def calc_max_flow(
    graph: Graph,
    source: NodeID,
    sink: NodeID,
    *,
    algorithm: MaxFlowAlg = MaxFlowAlg.DINIC,
    return_summary: Literal[False] = False,
) -> float: ...


@overload
def calc_max_flow(
    graph: Graph,
    source: NodeID,
    sink: NodeID,
    *,
    algorithm: MaxFlowAlg = MaxFlowAlg.DINIC,
    return_summary: Literal[True],
) -> Tuple[float, FlowSummary]: ...


def calc_max_flow(
    graph: Graph,
    source: NodeID,
    sink: NodeID,
    *,
    algorithm: MaxFlowAlg = MaxFlowAlg.DINIC,
    return_summary: bool = False,
) -> Union[float, Tuple[float, FlowSummary]]:
    """Compute the maximum flow between two nodes.

    Args:
        graph: Flow network; edge weights are capacities.
        source: The source node.
        sink: The sink node.
        algorithm: Which max-flow algorithm to run. Defaults to Dinic.
        return_summary: If True, also return a `FlowSummary` with per-edge
            flows, residual capacities, and the min-cut.

    Returns:
        The flow value, or ``(flow, summary)`` when ``return_summary`` is set.

    Examples:
        >>> g = Graph({"A": [("B", 10)], "B": [("C", 5)]})
        >>> calc_max_flow(g, "A", "C")
        5.0
        >>> flow, summary = calc_max_flow(g, "A", "C", return_summary=True)
        >>> summary.min_cut
        [('B', 'C', 1)]
    """
    summary = _run(graph, source, sink, algorithm)
    if return_summary:
        return summary.total_flow, summary
    return summary.total_flow
