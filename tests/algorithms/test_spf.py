import math

import pytest

from graphengine.algorithms.base import INF
from graphengine.algorithms.spf import (
    bellman_ford,
    bellman_ford_edges,
    check_non_negative,
    dijkstra,
    floyd_warshall,
    johnson,
    spfa,
)
from graphengine.errors import NegativeCycle, NegativeWeight, NodeNotFound
from graphengine.graph.model import Graph


class TestDijkstra:
    def test_dijkstra_distances(self, diamond1):
        result = dijkstra(diamond1, "A")
        assert result.distances == {"A": 0, "B": 1, "C": 3, "D": 4}
        assert result.path_to("D") == ["A", "B", "C", "D"]

    def test_dijkstra_predecessors(self, square1):
        result = dijkstra(square1, "A")
        assert result.distances == {"A": 0, "B": 1, "D": 2, "C": 2}
        assert result.predecessors == {"A": None, "B": "A", "D": "A", "C": "B"}

    def test_dijkstra_unreachable_is_inf(self, diamond1):
        result = dijkstra(diamond1, "C")
        assert result.distances["A"] == INF
        assert not result.is_reachable("A")
        assert result.path_to("A") == []

    def test_dijkstra_missing_source(self, diamond1):
        with pytest.raises(NodeNotFound) as exc_info:
            dijkstra(diamond1, "Z")
        assert exc_info.value.node == "Z"

    def test_dijkstra_missing_target(self, diamond1):
        with pytest.raises(NodeNotFound):
            dijkstra(diamond1, "A", "Z")

    def test_dijkstra_negative_weight(self, negative_dag):
        with pytest.raises(NegativeWeight) as exc_info:
            dijkstra(negative_dag, "A")
        assert exc_info.value.edge.weight == -2

    def test_dijkstra_with_target_settles_target(self, diamond1):
        result = dijkstra(diamond1, "A", "C")
        assert result.distance("C") == 3
        assert result.path_to("C") == ["A", "B", "C"]

    def test_dijkstra_exclusions(self, square1):
        result = dijkstra(square1, "A", excluded_nodes={"B"})
        assert result.distances["C"] == 4
        ab_key = square1.out_edges("A")[0].key
        result = dijkstra(square1, "A", excluded_edges={ab_key})
        assert result.distances["B"] == INF

    def test_dijkstra_parallel_edges(self, line1):
        assert dijkstra(line1, "A").distances == {"A": 0, "B": 1, "C": 2}

    def test_distance_unknown_node(self, diamond1):
        with pytest.raises(NodeNotFound):
            dijkstra(diamond1, "A").distance("Z")

    def test_unweighted_counts_hops(self, tree1):
        assert dijkstra(tree1, "A").distances["F"] == 2


class TestBellmanFord:
    def test_negative_edges(self, negative_dag):
        result = bellman_ford(negative_dag, "A")
        assert result.distances == {"A": 0, "B": 4, "C": 2, "D": 5}
        assert result.path_to("D") == ["A", "B", "C", "D"]

    def test_negative_cycle(self, negative_cycle):
        with pytest.raises(NegativeCycle) as exc_info:
            bellman_ford(negative_cycle, "S")
        cycle = exc_info.value.cycle
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"A", "B", "C"}

    def test_unreachable_negative_cycle_ignored(self):
        g = Graph({"S": [("T", 1)], "X": [("Y", -2)], "Y": [("X", 1)]})
        result = bellman_ford(g, "S")
        assert result.distances["T"] == 1
        assert result.distances["X"] == INF

    def test_agrees_with_dijkstra(self, diamond1, square1, square2):
        for graph in (diamond1, square1, square2):
            for source in graph:
                assert bellman_ford(graph, source).distances == dijkstra(graph, source).distances

    def test_edge_list_form(self):
        result = bellman_ford_edges(
            ["A", "B", "C", "Z"], [("A", "B", 2), ("B", "C", -1)], "A"
        )
        assert result.distances == {"A": 0, "B": 2, "C": 1, "Z": INF}

    def test_undirected_negative_edge_is_cycle(self):
        g = Graph.from_edges([("A", "B", -1)], directed=False)
        with pytest.raises(NegativeCycle):
            bellman_ford(g, "A")

    def test_missing_source(self, negative_dag):
        with pytest.raises(NodeNotFound):
            bellman_ford(negative_dag, "Z")


class TestSPFA:
    def test_matches_bellman_ford(self, negative_dag, diamond1):
        for graph in (negative_dag, diamond1):
            for source in graph:
                assert spfa(graph, source).distances == bellman_ford(graph, source).distances

    def test_negative_cycle(self, negative_cycle):
        with pytest.raises(NegativeCycle):
            spfa(negative_cycle, "S")

    def test_negative_self_loop(self):
        g = Graph({"A": [("A", -1)]})
        with pytest.raises(NegativeCycle):
            spfa(g, "A")


class TestAllPairs:
    def test_floyd_warshall_matches_dijkstra(self, diamond1):
        all_pairs = floyd_warshall(diamond1)
        for source in diamond1:
            assert all_pairs.distances[source] == dijkstra(diamond1, source).distances

    def test_floyd_warshall_paths(self, diamond1):
        all_pairs = floyd_warshall(diamond1)
        assert all_pairs.path("A", "D") == ["A", "B", "C", "D"]
        assert all_pairs.path("D", "A") == []
        assert all_pairs.distance("A", "A") == 0

    def test_floyd_warshall_negative_edges(self, negative_dag):
        all_pairs = floyd_warshall(negative_dag)
        assert all_pairs.distance("A", "D") == 5
        assert all_pairs.single_source("A").distances == bellman_ford(
            negative_dag, "A"
        ).distances

    def test_floyd_warshall_negative_cycle(self, negative_cycle):
        with pytest.raises(NegativeCycle) as exc_info:
            floyd_warshall(negative_cycle)
        cycle = exc_info.value.cycle
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"A", "B", "C"}

    def test_floyd_warshall_missing_node(self, diamond1):
        with pytest.raises(NodeNotFound):
            floyd_warshall(diamond1).distance("A", "Z")

    def test_johnson_matches_floyd_warshall(self, negative_dag, diamond1, line1):
        for graph in (negative_dag, diamond1, line1):
            fw = floyd_warshall(graph)
            jo = johnson(graph)
            for u in graph:
                for v in graph:
                    a, b = fw.distance(u, v), jo.distance(u, v)
                    assert (a == b == INF) or math.isclose(a, b, abs_tol=1e-9)

    def test_johnson_paths(self, negative_dag):
        assert johnson(negative_dag).path("A", "D") == ["A", "B", "C", "D"]

    def test_johnson_negative_cycle(self, negative_cycle):
        with pytest.raises(NegativeCycle):
            johnson(negative_cycle)

    def test_empty_graph(self):
        assert floyd_warshall(Graph()).distances == {}
        assert johnson(Graph()).distances == {}


def test_check_non_negative(diamond1, negative_dag):
    check_non_negative(diamond1)
    with pytest.raises(NegativeWeight):
        check_non_negative(negative_dag)
