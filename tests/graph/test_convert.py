import networkx as nx
import pytest

from graphengine.graph.convert import from_networkx, to_networkx
from graphengine.graph.model import Edge, Graph


def build_sample_digraph() -> nx.DiGraph:
    G = nx.DiGraph()
    G.add_node("Z")
    G.add_edge("A", "B", weight=10)
    G.add_edge("B", "C", weight=5)
    return G


def test_from_networkx_digraph():
    graph = from_networkx(build_sample_digraph())
    assert graph.is_directed
    assert graph.is_weighted
    assert list(graph.nodes()) == ["Z", "A", "B", "C"]
    assert graph.edges() == [Edge("A", "B", 10, 0), Edge("B", "C", 5, 1)]
    assert graph.out_degree("Z") == 0


def test_digraph_round_trip():
    G = build_sample_digraph()
    G_out = to_networkx(from_networkx(G))
    assert isinstance(G_out, nx.DiGraph)
    assert not G_out.is_multigraph()
    assert list(G_out.nodes()) == list(G.nodes())
    assert G_out.edges["A", "B"]["weight"] == 10
    assert G_out.edges["B", "C"]["weight"] == 5


def test_multigraph_parallel_edges():
    G = nx.MultiGraph()
    G.add_edge("A", "B", weight=1)
    G.add_edge("A", "B", weight=3)
    graph = from_networkx(G)
    assert not graph.is_directed
    assert graph.number_of_edges() == 2
    assert sorted(w for _, w in graph.weighted_neighbors("B")) == [1, 3]

    G_out = to_networkx(graph)
    assert isinstance(G_out, nx.MultiGraph)
    assert G_out.number_of_edges("A", "B") == 2
    assert sorted(d["weight"] for _, _, d in G_out.edges(data=True)) == [1, 3]


def test_default_weight_and_attribute_name():
    G = nx.DiGraph()
    G.add_edge("A", "B", capacity=4)
    G.add_edge("B", "C")

    unweighted = from_networkx(G, default_weight=2)
    assert not unweighted.is_weighted
    assert unweighted.weighted_neighbors("A") == [("B", 2)]

    by_capacity = from_networkx(G, weight_attr="capacity")
    assert by_capacity.is_weighted
    assert by_capacity.weighted_neighbors("A") == [("B", 4)]
    assert by_capacity.weighted_neighbors("B") == [("C", 1)]

    G_out = to_networkx(by_capacity, weight_attr="capacity")
    assert G_out.edges["A", "B"] == {"capacity": 4}


def test_to_networkx_undirected_and_forced_multigraph():
    graph = Graph({1: [2], 2: [1, 3]}, directed=False)
    G = to_networkx(graph)
    assert isinstance(G, nx.Graph) and not G.is_directed()
    assert sorted(map(sorted, G.edges())) == [[1, 2], [2, 3]]

    M = to_networkx(Graph({"A": ["B"]}), multigraph=True)
    assert isinstance(M, nx.MultiDiGraph)
    assert list(M.edges(keys=True)) == [("A", "B", 0)]


def test_from_networkx_rejects_other_types():
    with pytest.raises(TypeError):
        from_networkx({"A": ["B"]})
