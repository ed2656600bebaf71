"""NetworkX graph conversion utilities.

Convert between NetworkX graphs and the immutable `Graph` used by the
algorithms in this package.

Example:
    >>> import networkx as nx
    >>> from graphengine.graph.convert import from_networkx, to_networkx
    >>>
    >>> G = nx.DiGraph()
    >>> G.add_edge("A", "B", weight=10)
    >>> G.add_edge("B", "C", weight=5)
    >>>
    >>> graph = from_networkx(G)
    >>> graph.weighted_neighbors("A")
    [('B', 10)]
    >>>
    >>> G_out = to_networkx(graph)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Union

from graphengine.graph.model import Graph, Weight

if TYPE_CHECKING:
    import networkx as nx

    NxGraph = Union[nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph]
else:
    NxGraph = Any


def from_networkx(
    G: NxGraph,
    *,
    weight_attr: str = "weight",
    default_weight: Weight = 1,
) -> Graph:
    """Convert a NetworkX graph to a `Graph`.

    Directedness follows ``G.is_directed()``. Node order and edge order follow
    NetworkX iteration order; isolated nodes are kept. Multigraph parallel
    edges become parallel edges.

    Args:
        G: NetworkX graph (DiGraph, MultiDiGraph, Graph, or MultiGraph).
        weight_attr: Edge attribute holding the weight (default: "weight").
        default_weight: Weight for edges missing ``weight_attr``.

    Returns:
        A new `Graph`. It is marked weighted if any edge carries ``weight_attr``.

    Raises:
        TypeError: If G is not a NetworkX graph.
        InvalidInput: If an edge weight is not a real number.
    """
    import networkx as nx

    if not isinstance(G, (nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph)):
        raise TypeError(
            f"Expected NetworkX graph (DiGraph, MultiDiGraph, Graph, MultiGraph), "
            f"got {type(G).__name__}"
        )

    has_weight = False
    edges = []
    for u, v, data in G.edges(data=True):
        if weight_attr in data:
            has_weight = True
        edges.append((u, v, data.get(weight_attr, default_weight)))

    return Graph.from_edges(
        edges, directed=G.is_directed(), nodes=G.nodes(), weighted=has_weight
    )


def to_networkx(
    graph: Graph,
    *,
    weight_attr: str = "weight",
    multigraph: Optional[bool] = None,
) -> NxGraph:
    """Convert a `Graph` back to NetworkX.

    Args:
        graph: Graph to convert.
        weight_attr: Edge attribute name to store weights under.
        multigraph: Force a multigraph result. By default a multigraph is
            produced only when the graph has parallel edges; its edge keys are
            the `Graph` edge keys.

    Returns:
        nx.DiGraph / nx.Graph, or their multigraph variants.
    """
    import networkx as nx

    if multigraph is None:
        seen = set()
        multigraph = False
        for edge in graph.edges():
            pair = (
                (edge.source, edge.target)
                if graph.is_directed
                else frozenset((edge.source, edge.target))
            )
            if pair in seen:
                multigraph = True
                break
            seen.add(pair)

    if graph.is_directed:
        G = nx.MultiDiGraph() if multigraph else nx.DiGraph()
    else:
        G = nx.MultiGraph() if multigraph else nx.Graph()

    G.add_nodes_from(graph.nodes())
    for edge in graph.edges():
        if multigraph:
            G.add_edge(edge.source, edge.target, key=edge.key, **{weight_attr: edge.weight})
        else:
            G.add_edge(edge.source, edge.target, **{weight_attr: edge.weight})
    return G
