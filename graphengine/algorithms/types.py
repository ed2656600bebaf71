"""Types and data structures for algorithm results.

Defines immutable result containers. Containers hold node identifiers by
value and never reference the graph they were computed from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Hashable, List, Optional, Set, Tuple

import numpy as np

from graphengine.algorithms.base import INF, Cost
from graphengine.errors import NodeNotFound
from graphengine.graph.model import Edge, EdgeKey, NodeID

# Edge identifier tuple: (source_node, target_node, edge_key)
EdgeRef = Tuple[Hashable, Hashable, EdgeKey]


def _walk_back(
    predecessors: Dict[NodeID, Optional[NodeID]], source: NodeID, target: NodeID
) -> List[NodeID]:
    path = [target]
    node = target
    # A predecessor chain is at most |V| long; a longer walk means corrupted input.
    for _ in range(len(predecessors)):
        if node == source:
            path.reverse()
            return path
        node = predecessors.get(node)
        if node is None:
            return []
        path.append(node)
    return []


@dataclass(frozen=True)
class ShortestPathResult:
    """Single-source shortest path distances and predecessor tree.

    Attributes:
        source: The source node.
        distances: Distance from ``source`` to every node; ``inf`` if unreachable.
        predecessors: Previous node on one shortest path; None for the source
            and for unreachable nodes.
    """

    source: NodeID
    distances: Dict[NodeID, Cost]
    predecessors: Dict[NodeID, Optional[NodeID]]

    def distance(self, target: NodeID) -> Cost:
        """Return the distance to ``target``.

        Raises:
            NodeNotFound: If ``target`` was not part of the graph.
        """
        if target not in self.distances:
            raise NodeNotFound(target)
        return self.distances[target]

    def is_reachable(self, target: NodeID) -> bool:
        return self.distances.get(target, INF) != INF

    def path_to(self, target: NodeID) -> List[NodeID]:
        """Rebuild the node sequence from the source to ``target``.

        Returns an empty list when ``target`` is unreachable.
        """
        if not self.is_reachable(target):
            return []
        return _walk_back(self.predecessors, self.source, target)


@dataclass(frozen=True)
class AllPairsResult:
    """All-pairs shortest distances.

    Attributes:
        distances: ``distances[u][v]`` is the shortest distance from u to v.
        predecessors: ``predecessors[u][v]`` is the node before v on one
            shortest u->v path (None when v == u or v is unreachable).
    """

    distances: Dict[NodeID, Dict[NodeID, Cost]]
    predecessors: Dict[NodeID, Dict[NodeID, Optional[NodeID]]]

    def distance(self, source: NodeID, target: NodeID) -> Cost:
        if source not in self.distances:
            raise NodeNotFound(source)
        if target not in self.distances[source]:
            raise NodeNotFound(target)
        return self.distances[source][target]

    def path(self, source: NodeID, target: NodeID) -> List[NodeID]:
        """Return the node sequence of a shortest path (empty if unreachable)."""
        if self.distance(source, target) == INF:
            return []
        return _walk_back(self.predecessors[source], source, target)

    def single_source(self, source: NodeID) -> ShortestPathResult:
        """Return the row for ``source`` as a `ShortestPathResult`."""
        if source not in self.distances:
            raise NodeNotFound(source)
        return ShortestPathResult(
            source=source,
            distances=dict(self.distances[source]),
            predecessors=dict(self.predecessors[source]),
        )


@dataclass(frozen=True, eq=True)
class Path:
    """A single loopless path.

    Attributes:
        nodes: Node sequence from source to target.
        edges: Keys of the edges traversed, ``len(nodes) - 1`` of them.
        cost: Total weight of the path.
    """

    nodes: Tuple[NodeID, ...]
    edges: Tuple[EdgeKey, ...]
    cost: Cost

    def __lt__(self, other: "Path") -> bool:
        return self.cost < other.cost

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class SpanningTree:
    """Edges of a minimum spanning tree (or forest) and their total weight."""

    edges: List[Edge]
    total_weight: Cost

    @property
    def nodes(self) -> Set[NodeID]:
        """Nodes touched by the selected edges."""
        found: Set[NodeID] = set()
        for edge in self.edges:
            found.add(edge.source)
            found.add(edge.target)
        return found


@dataclass(frozen=True)
class FlowSummary:
    """Summary of max-flow computation results.

    Captures edge flows, residual capacities, reachable set, and min-cut.

    Attributes:
        total_flow: Maximum flow value achieved.
        edge_flow: Flow amount per edge, indexed by ``(src, dst, key)``. For an
            undirected edge a negative value means flow from dst to src.
        residual_cap: Remaining capacity per edge in its stored orientation.
        reachable: Nodes reachable from source in the residual graph.
        min_cut: Saturated edges crossing the s-t cut.
    """

    total_flow: float
    edge_flow: Dict[EdgeRef, float]
    residual_cap: Dict[EdgeRef, float]
    reachable: Set[NodeID]
    min_cut: List[EdgeRef]


@dataclass(frozen=True)
class MinCutResult:
    """Global minimum cut of an undirected graph.

    Attributes:
        cut_value: Total weight of the cut edges.
        partition: The two node sides of the cut.
        cut_edges: Edges with one endpoint on each side.
    """

    cut_value: Cost
    partition: Tuple[FrozenSet[NodeID], FrozenSet[NodeID]]
    cut_edges: List[Edge] = field(default_factory=list)


@dataclass(frozen=True)
class PostmanTour:
    """Closed walk covering every edge at least once with minimum total weight.

    Attributes:
        walk: Node sequence; first and last node coincide.
        total_cost: Weight of the original edges plus the duplicated ones.
        added_edges: Original edges traversed a second time.
    """

    walk: List[NodeID]
    total_cost: Cost
    added_edges: List[Edge]


@dataclass(frozen=True, eq=False)
class ReachabilityMatrix:
    """Boolean reachability matrix with node labels.

    ``matrix[i, j]`` is True when ``nodes[j]`` is reachable from ``nodes[i]``.
    ``index`` maps each node to its row; it is built from ``nodes`` when omitted.
    """

    nodes: Tuple[NodeID, ...]
    matrix: np.ndarray
    index: Dict[NodeID, int] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not self.index:
            object.__setattr__(
                self, "index", {node: i for i, node in enumerate(self.nodes)}
            )

    def _index(self, node: NodeID) -> int:
        try:
            return self.index[node]
        except (KeyError, TypeError):
            raise NodeNotFound(node) from None

    def reachable(self, source: NodeID, target: NodeID) -> bool:
        return bool(self.matrix[self._index(source), self._index(target)])

    def successors(self, source: NodeID) -> Set[NodeID]:
        row = self.matrix[self._index(source)]
        return {self.nodes[j] for j in np.flatnonzero(row)}

    def to_dict(self) -> Dict[NodeID, Set[NodeID]]:
        return {
            node: {self.nodes[j] for j in np.flatnonzero(self.matrix[i])}
            for i, node in enumerate(self.nodes)
        }
