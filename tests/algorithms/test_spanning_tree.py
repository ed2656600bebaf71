import pytest

from graphengine.algorithms.spanning_tree import kruskal, prim
from graphengine.errors import InvalidInput, NodeNotFound
from graphengine.graph.model import Graph


def test_kruskal_total_weight(mst_graph):
    tree = kruskal(mst_graph)
    assert tree.total_weight == 37
    assert len(tree.edges) == len(mst_graph) - 1
    assert tree.nodes == set(mst_graph.nodes())
    assert tree.edges[0].weight == 1


def test_prim_total_weight(mst_graph):
    tree = prim(mst_graph, "A")
    assert tree.total_weight == 37
    assert len(tree.edges) == len(mst_graph) - 1
    assert (tree.edges[0].source, tree.edges[0].target) == ("A", "B")


def test_kruskal_and_prim_agree_from_every_start(mst_graph, line1, petersen):
    for graph in (mst_graph, line1, petersen):
        expected = kruskal(graph).total_weight
        for start in graph:
            assert prim(graph, start).total_weight == expected


def test_parallel_edges_pick_lightest():
    g = Graph.from_edges([("A", "B", 5), ("A", "B", 2), ("B", "C", 1)], directed=False)
    assert kruskal(g).total_weight == 3
    assert prim(g).total_weight == 3


def test_disconnected_forest():
    g = Graph.from_edges([("A", "B", 1), ("C", "D", 2)], directed=False)
    assert kruskal(g).total_weight == 3
    assert len(kruskal(g).edges) == 2
    assert prim(g, "A").total_weight == 1
    assert prim(g, "A").nodes == {"A", "B"}
    assert prim(g, "A", span_forest=True).total_weight == 3


def test_directed_rejected(diamond1):
    with pytest.raises(InvalidInput):
        kruskal(diamond1)
    with pytest.raises(InvalidInput):
        prim(diamond1)


def test_prim_missing_start(mst_graph):
    with pytest.raises(NodeNotFound):
        prim(mst_graph, "Z")


def test_empty_and_single_node():
    empty = Graph(directed=False)
    assert kruskal(empty).total_weight == 0
    assert prim(empty).edges == []
    single = Graph({"A": []}, directed=False)
    assert kruskal(single).edges == []
    assert prim(single).total_weight == 0


def test_self_loops_ignored():
    g = Graph.from_edges([("A", "A", 0), ("A", "B", 3)], directed=False)
    assert kruskal(g).total_weight == 3
    assert prim(g).total_weight == 3


def test_kruskal_equal_weights_follow_edge_order():
    g = Graph.from_edges([("A", "B", 1), ("B", "C", 1), ("A", "C", 1)], directed=False)
    assert [(e.source, e.target) for e in kruskal(g).edges] == [("A", "B"), ("B", "C")]

    reversed_listing = Graph.from_edges(
        [("A", "C", 1), ("B", "C", 1), ("A", "B", 1)], directed=False
    )
    assert [(e.source, e.target) for e in kruskal(reversed_listing).edges] == [
        ("A", "C"),
        ("B", "C"),
    ]
