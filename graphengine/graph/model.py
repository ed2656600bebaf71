"""Immutable adjacency graph shared by every algorithm family.

`Graph` is built once from a mapping of node -> adjacency (plain neighbors or
``(neighbor, weight)`` pairs) or from an edge list, and is read-only
afterwards. Every edge receives an integer key in construction order, so
parallel edges stay distinguishable. Undirected edges are stored once in
``edges()`` and exposed from both endpoints under the same key.

Nodes referenced only as neighbors are added as zero-out-degree nodes. Queries
about nodes that are not in the graph return empty results rather than raising.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from numbers import Real
from typing import (
    Any,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    KeysView,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from graphengine.errors import InvalidInput

N = TypeVar("N", bound=Hashable)

NodeID = Hashable
EdgeKey = int
Weight = Union[int, float]


class Edge(NamedTuple):
    """A single edge. ``key`` is unique within the owning graph."""

    source: NodeID
    target: NodeID
    weight: Weight = 1
    key: EdgeKey = 0

    def flipped(self) -> "Edge":
        """Return the same edge oriented from target to source."""
        return Edge(self.target, self.source, self.weight, self.key)


def _is_weight(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_weight(value: Any, where: str) -> Weight:
    if not _is_weight(value):
        raise InvalidInput(f"Edge weight {value!r} on {where} is not a real number.")
    if math.isnan(value):
        raise InvalidInput(f"Edge weight on {where} is NaN.")
    return value


def _check_hashable(node: Any, where: str) -> None:
    try:
        hash(node)
    except TypeError as exc:
        raise InvalidInput(f"Node {node!r} in {where} is not hashable.") from exc


def _looks_weighted(entry: Any) -> bool:
    return (
        isinstance(entry, (tuple, list)) and len(entry) == 2 and _is_weight(entry[1])
    )


def _parse_adjacency(
    adjacency: Mapping[Any, Any], weighted: Optional[bool]
) -> Tuple[List[Tuple[Any, Any, Weight]], bool]:
    """Flatten an adjacency mapping into ``(u, v, w)`` triples.

    When ``weighted`` is None the form is detected: the mapping is weighted if
    every entry is a ``(neighbor, number)`` pair and no entry is itself a node
    key (which would make it a tuple-valued neighbor instead).
    """
    rows: List[Tuple[Any, List[Any]]] = []
    for node, entries in adjacency.items():
        _check_hashable(node, "adjacency keys")
        if isinstance(entries, (str, bytes)) or not isinstance(entries, Iterable):
            raise InvalidInput(
                f"Adjacency of node '{node}' must be a sequence, got {type(entries).__name__}."
            )
        rows.append((node, list(entries)))

    if weighted is None:
        entries_flat = [entry for _, entries in rows for entry in entries]
        pair_shaped = [_looks_weighted(entry) for entry in entries_flat]
        if entries_flat and all(pair_shaped):
            weighted = not any(
                _is_key(adjacency, tuple(entry)) for entry in entries_flat
            )
        elif any(pair_shaped) and not all(
            _is_key(adjacency, tuple(entry))
            for entry, shaped in zip(entries_flat, pair_shaped)
            if shaped
        ):
            raise InvalidInput(
                "Adjacency mixes weighted (neighbor, weight) pairs with plain "
                "neighbors; pass weighted=True or weighted=False explicitly."
            )
        else:
            weighted = False

    triples: List[Tuple[Any, Any, Weight]] = []
    for node, entries in rows:
        for entry in entries:
            if weighted:
                if not isinstance(entry, (tuple, list)) or len(entry) != 2:
                    raise InvalidInput(
                        f"Weighted adjacency of node '{node}' has malformed entry "
                        f"{entry!r}; expected (neighbor, weight)."
                    )
                nbr, weight = entry
                _check_hashable(nbr, f"adjacency of '{node}'")
                triples.append((node, nbr, _check_weight(weight, f"{node}->{nbr}")))
            else:
                _check_hashable(entry, f"adjacency of '{node}'")
                triples.append((node, entry, 1))
    return triples, bool(weighted)


def _is_key(adjacency: Mapping[Any, Any], candidate: Any) -> bool:
    try:
        return candidate in adjacency
    except TypeError:
        return False


def _merge_undirected(
    triples: Iterable[Tuple[Any, Any, Weight]],
) -> Iterator[Tuple[Any, Any, Weight]]:
    """Collapse symmetric listings of the same undirected edge.

    The multiplicity of ``{u, v}`` with weight ``w`` is the larger of the
    number of times it is listed from ``u`` and from ``v``. Edges are emitted
    in order of first appearance.
    """
    listed: Counter = Counter()
    emitted: Counter = Counter()
    for u, v, w in triples:
        listed[(u, v, w)] += 1
        pair = (frozenset((u, v)), w)
        if listed[(u, v, w)] > emitted[pair]:
            emitted[pair] += 1
            yield u, v, w


class Graph(Generic[N]):
    """Read-only directed or undirected graph with optional edge weights.

    Args:
        adjacency: Mapping of node to its neighbors, either plain nodes or
            ``(neighbor, weight)`` pairs. ``None`` builds an empty graph.
        directed: Whether edges are directed. Undirected adjacency may be
            given symmetrically or from one endpoint only.
        weighted: Force the adjacency form. ``None`` auto-detects.

    Raises:
        InvalidInput: If the adjacency is malformed.

    Example:
        >>> g = Graph({"A": [("B", 1), ("C", 4)], "B": [("C", 2)]})
        >>> g.weighted_neighbors("A")
        [('B', 1), ('C', 4)]
        >>> g.neighbors("C")
        []
    """

    def __init__(
        self,
        adjacency: Optional[Mapping[N, Iterable[Any]]] = None,
        *,
        directed: bool = True,
        weighted: Optional[bool] = None,
    ) -> None:
        self._reset(directed)
        if adjacency is None:
            return
        if not isinstance(adjacency, Mapping):
            raise InvalidInput(
                f"Adjacency must be a mapping, got {type(adjacency).__name__}."
            )
        triples, self._weighted = _parse_adjacency(adjacency, weighted)
        for node in adjacency:
            self._add_node(node)
        if not directed:
            triples = list(_merge_undirected(triples))
        for u, v, w in triples:
            self._add_edge(u, v, w)

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[Any],
        *,
        directed: bool = True,
        nodes: Iterable[N] = (),
        weighted: Optional[bool] = None,
    ) -> "Graph[N]":
        """Build a graph from ``(u, v)`` or ``(u, v, weight)`` tuples.

        Each tuple is one edge; no symmetric merging is applied, so an
        undirected edge must be listed once.

        Args:
            edges: Iterable of 2- or 3-tuples (``Edge`` instances are accepted).
            directed: Whether edges are directed.
            nodes: Extra nodes to include (e.g., isolated ones), added first.
            weighted: Force the weighted flag; by default the graph is weighted
                if any edge carries a weight.

        Returns:
            A new graph.

        Raises:
            InvalidInput: If an edge tuple is malformed.
        """
        graph: Graph[N] = cls(directed=directed)
        saw_weight = False
        for node in nodes:
            _check_hashable(node, "node list")
            graph._add_node(node)
        for item in edges:
            if isinstance(item, Edge):
                item = (item.source, item.target, item.weight)
            if not isinstance(item, (tuple, list)) or len(item) not in (2, 3):
                raise InvalidInput(f"Malformed edge {item!r}; expected (u, v[, w]).")
            u, v = item[0], item[1]
            _check_hashable(u, "edge list")
            _check_hashable(v, "edge list")
            if len(item) == 3:
                saw_weight = True
                w = _check_weight(item[2], f"{u}->{v}")
            else:
                w = 1
            graph._add_edge(u, v, w)
        graph._weighted = saw_weight if weighted is None else bool(weighted)
        return graph

    #
    # Construction internals
    #
    def _reset(self, directed: bool) -> None:
        self._directed = bool(directed)
        self._weighted = False
        # Per-node edges oriented away from / into the node.
        self._succ: Dict[N, List[Edge]] = {}
        self._pred: Dict[N, List[Edge]] = {}
        self._edges: List[Edge] = []
        self._self_loops: Counter = Counter()

    def _add_node(self, node: N) -> None:
        if node not in self._succ:
            self._succ[node] = []
            self._pred[node] = []

    def _add_edge(self, u: N, v: N, w: Weight) -> Edge:
        self._add_node(u)
        self._add_node(v)
        edge = Edge(u, v, w, len(self._edges))
        self._edges.append(edge)
        self._succ[u].append(edge)
        self._pred[v].append(edge)
        if u == v:
            self._self_loops[u] += 1
        elif not self._directed:
            back = edge.flipped()
            self._succ[v].append(back)
            self._pred[u].append(back)
        return edge

    #
    # Node queries
    #
    def nodes(self) -> KeysView[N]:
        """Return a set-like view of all nodes in insertion order."""
        return self._succ.keys()

    def has_node(self, node: N) -> bool:
        """Return True if ``node`` is in the graph."""
        try:
            return node in self._succ
        except TypeError:
            return False

    def __contains__(self, node: object) -> bool:
        return self.has_node(node)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[N]:
        return iter(self._succ)

    def __len__(self) -> int:
        return len(self._succ)

    def neighbors(self, node: N) -> List[N]:
        """Return the out-neighbors of ``node`` (empty if absent)."""
        return [edge.target for edge in self._succ.get(node, ())]

    def weighted_neighbors(self, node: N) -> List[Tuple[N, Weight]]:
        """Return ``(neighbor, weight)`` pairs for ``node`` (empty if absent)."""
        return [(edge.target, edge.weight) for edge in self._succ.get(node, ())]

    def predecessors(self, node: N) -> List[N]:
        """Return the in-neighbors of ``node`` (empty if absent)."""
        return [edge.source for edge in self._pred.get(node, ())]

    def out_edges(self, node: N) -> List[Edge]:
        """Return edges leaving ``node``, oriented from ``node``."""
        return list(self._succ.get(node, ()))

    def in_edges(self, node: N) -> List[Edge]:
        """Return edges entering ``node``, oriented toward ``node``."""
        return list(self._pred.get(node, ()))

    def out_degree(self, node: N) -> int:
        return len(self._succ.get(node, ()))

    def in_degree(self, node: N) -> int:
        return len(self._pred.get(node, ()))

    def degree(self, node: N) -> int:
        """Return the degree of ``node``.

        For directed graphs this is in-degree plus out-degree. For undirected
        graphs a self-loop contributes two.
        """
        if self._directed:
            return self.out_degree(node) + self.in_degree(node)
        return self.out_degree(node) + self._self_loops.get(node, 0)

    #
    # Edge queries
    #
    def edges(self) -> List[Edge]:
        """Return all edges in key order (each undirected edge once)."""
        return list(self._edges)

    def number_of_edges(self) -> int:
        return len(self._edges)

    def has_negative_weights(self) -> bool:
        return any(edge.weight < 0 for edge in self._edges)

    @property
    def is_directed(self) -> bool:
        return self._directed

    @property
    def is_weighted(self) -> bool:
        return self._weighted

    #
    # Derived graphs
    #
    def reverse(self) -> "Graph[N]":
        """Return the transpose graph (every edge flipped); keys are preserved.

        An undirected graph is its own transpose; a structural copy is returned.
        """
        edges = self._edges if not self._directed else [e.flipped() for e in self._edges]
        return Graph.from_edges(
            edges, directed=self._directed, nodes=self._succ, weighted=self._weighted
        )

    def to_undirected(self) -> "Graph[N]":
        """Return an undirected copy.

        Reciprocal directed edges with equal weight collapse into one
        undirected edge; see the class docstring for the multiplicity rule.
        """
        if not self._directed:
            return self.reverse()
        merged = _merge_undirected((e.source, e.target, e.weight) for e in self._edges)
        return Graph.from_edges(
            merged,
            directed=False,
            nodes=self._succ,
            weighted=self._weighted,
        )

    def to_adjacency(self) -> Dict[N, List[Any]]:
        """Return a plain-dict adjacency snapshot in the constructor's format."""
        if self._weighted:
            return {n: self.weighted_neighbors(n) for n in self._succ}
        return {n: self.neighbors(n) for n in self._succ}

    def __repr__(self) -> str:
        kind = "directed" if self._directed else "undirected"
        return (
            f"Graph({kind}, weighted={self._weighted}, "
            f"nodes={len(self._succ)}, edges={len(self._edges)})"
        )


@dataclass
class NodeMap:
    """Bidirectional mapping between nodes and contiguous integer indices.

    Matrix-based algorithms (Floyd-Warshall, transitive closure, max-flow
    residual networks) index nodes ``0..n-1``; the map translates results
    back to node ids.

    Attributes:
        to_index: Maps nodes to integer indices.
        to_name: Maps integer indices back to nodes.

    Example:
        >>> node_map = NodeMap.from_names(["A", "B", "C"])
        >>> node_map.to_index["A"]
        0
        >>> node_map.to_name[1]
        'B'
    """

    to_index: Dict[Hashable, int] = field(default_factory=dict)
    to_name: Dict[int, Hashable] = field(default_factory=dict)

    @classmethod
    def from_names(cls, names: Iterable[Hashable]) -> "NodeMap":
        """Create a NodeMap from nodes given in index order."""
        names = list(names)
        to_index = {name: i for i, name in enumerate(names)}
        to_name = {i: name for i, name in enumerate(names)}
        return cls(to_index=to_index, to_name=to_name)

    def __len__(self) -> int:
        """Return the number of nodes in the mapping."""
        return len(self.to_index)
