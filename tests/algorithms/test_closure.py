import numpy as np
import pytest

from graphengine.algorithms.closure import transitive_closure
from graphengine.algorithms.traversal import bfs
from graphengine.algorithms.types import ReachabilityMatrix
from graphengine.errors import NodeNotFound
from graphengine.graph.model import Graph


def test_chain():
    closure = transitive_closure(Graph({1: [2], 2: [3], 3: []}))
    assert closure.reachable(1, 3)
    assert not closure.reachable(3, 1)
    assert not closure.reachable(1, 1)
    assert closure.successors(1) == {2, 3}
    assert closure.to_dict() == {1: {2, 3}, 2: {3}, 3: set()}


def test_reflexive():
    closure = transitive_closure(Graph({1: [2], 2: [3], 3: []}), reflexive=True)
    assert closure.reachable(3, 3)
    assert closure.successors(3) == {3}


def test_cycle_reaches_itself(cycle3):
    closure = transitive_closure(cycle3)
    assert closure.matrix.all()
    assert closure.matrix.dtype == np.bool_


def test_matches_bfs(scc_graph, tree1, diamond1):
    for graph in (scc_graph, tree1, diamond1):
        closure = transitive_closure(graph, reflexive=True)
        for node in graph:
            assert closure.successors(node) == set(bfs(graph, node))


def test_undirected_is_symmetric(path3_undirected):
    closure = transitive_closure(path3_undirected)
    assert (closure.matrix == closure.matrix.T).all()
    assert closure.reachable(3, 1)


def test_node_order_and_missing_node(diamond1):
    closure = transitive_closure(diamond1)
    assert closure.nodes == ("A", "B", "C", "D")
    with pytest.raises(NodeNotFound):
        closure.reachable("A", "Z")


def test_empty_graph():
    closure = transitive_closure(Graph())
    assert closure.nodes == ()
    assert closure.to_dict() == {}


def test_row_index_follows_node_order():
    g = Graph({"c": ["a"], "a": ["b"], "b": []})
    closure = transitive_closure(g)
    assert closure.index == {"c": 0, "a": 1, "b": 2}
    assert closure.successors("c") == {"a", "b"}
    with pytest.raises(NodeNotFound):
        closure.reachable("c", ["unhashable"])


def test_index_built_when_omitted():
    matrix = np.array([[False, True], [False, False]])
    closure = ReachabilityMatrix(nodes=("x", "y"), matrix=matrix)
    assert closure.index == {"x": 0, "y": 1}
    assert closure.reachable("x", "y")
