"""Cross-checks between algorithm families and against NetworkX on random graphs."""

import math
import random

import networkx as nx
import pytest

from graphengine.algorithms.base import INF, MaxFlowAlg
from graphengine.algorithms.closure import transitive_closure
from graphengine.algorithms.connectivity import (
    articulation_points,
    bridges,
    kosaraju,
    tarjan_scc,
)
from graphengine.algorithms.max_flow import calc_max_flow
from graphengine.algorithms.min_cut import stoer_wagner
from graphengine.algorithms.spanning_tree import kruskal, prim
from graphengine.algorithms.spf import bellman_ford, dijkstra, floyd_warshall, johnson, spfa
from graphengine.algorithms.traversal import bfs, dfs, topological_sort
from graphengine.errors import CyclicGraph
from graphengine.graph.convert import to_networkx
from graphengine.graph.model import Graph

SEEDS = range(8)


def random_graph(seed, *, n=12, p=0.25, directed=True, low=1, high=10, connected=False):
    """Simple random graph (no parallel edges, no self-loops) with integer weights."""
    rng = random.Random(seed)
    pairs = set()
    if connected:
        order = list(range(n))
        rng.shuffle(order)
        for i in range(1, n):
            pairs.add((order[rng.randrange(i)], order[i]))
    for u in range(n):
        for v in range(n):
            if u == v or (not directed and v < u):
                continue
            if rng.random() < p:
                pairs.add((u, v))
    if not directed:
        pairs = {(min(u, v), max(u, v)) for u, v in pairs}
    edges = [(u, v, rng.randint(low, high)) for u, v in sorted(pairs)]
    return Graph.from_edges(edges, directed=directed, nodes=range(n))


@pytest.mark.parametrize("seed", SEEDS)
def test_traversals_visit_reachable_once(seed):
    graph = random_graph(seed)
    G = to_networkx(graph)
    for source in graph:
        expected = nx.descendants(G, source) | {source}
        for order in (bfs(graph, source), dfs(graph, source)):
            assert len(order) == len(set(order))
            assert set(order) == expected


@pytest.mark.parametrize("seed", SEEDS)
def test_shortest_paths_agree(seed):
    graph = random_graph(seed)
    G = to_networkx(graph)
    all_pairs = floyd_warshall(graph)
    johnson_pairs = johnson(graph)
    for source in graph:
        expected = nx.single_source_dijkstra_path_length(G, source)
        for result in (dijkstra(graph, source), bellman_ford(graph, source), spfa(graph, source)):
            reached = {n: d for n, d in result.distances.items() if d != INF}
            assert reached == expected
        for target in graph:
            fw = all_pairs.distance(source, target)
            assert fw == expected.get(target, INF)
            assert math.isclose(johnson_pairs.distance(source, target), fw) or fw == INF


@pytest.mark.parametrize("seed", SEEDS)
def test_negative_weights_bellman_ford_matches_networkx(seed):
    dag = random_graph(seed, low=-5, high=10)
    edges = [(u, v, w) for u, v, w, _ in dag.edges() if u < v]
    graph = Graph.from_edges(edges, nodes=range(12))
    G = to_networkx(graph)
    for source in graph:
        expected = nx.single_source_bellman_ford_path_length(G, source)
        result = bellman_ford(graph, source)
        assert {n: d for n, d in result.distances.items() if d != INF} == expected
        assert spfa(graph, source).distances == result.distances


@pytest.mark.parametrize("seed", SEEDS)
def test_mst_weights_agree(seed):
    graph = random_graph(seed, directed=False, connected=True)
    G = to_networkx(graph)
    expected = nx.minimum_spanning_tree(G).size(weight="weight")
    assert kruskal(graph).total_weight == expected
    assert prim(graph).total_weight == expected


@pytest.mark.parametrize("seed", SEEDS)
def test_max_flow_agrees(seed):
    graph = random_graph(seed, p=0.3)
    G = to_networkx(graph, weight_attr="capacity")
    for sink in (5, 11):
        expected = nx.maximum_flow_value(G, 0, sink)
        assert calc_max_flow(graph, 0, sink) == expected
        assert calc_max_flow(graph, 0, sink, algorithm=MaxFlowAlg.EDMONDS_KARP) == expected


@pytest.mark.parametrize("seed", SEEDS)
def test_scc_agree(seed):
    graph = random_graph(seed, p=0.15)
    expected = {frozenset(c) for c in nx.strongly_connected_components(to_networkx(graph))}
    assert {frozenset(c) for c in kosaraju(graph)} == expected
    assert {frozenset(c) for c in tarjan_scc(graph)} == expected


@pytest.mark.parametrize("seed", SEEDS)
def test_bridges_and_articulation_agree(seed):
    graph = random_graph(seed, directed=False, p=0.12)
    G = to_networkx(graph)
    assert set(articulation_points(graph)) == set(nx.articulation_points(G))
    expected = {frozenset(e) for e in nx.bridges(G)}
    assert {frozenset(e) for e in bridges(graph)} == expected


@pytest.mark.parametrize("seed", SEEDS)
def test_stoer_wagner_agrees(seed):
    graph = random_graph(seed, directed=False, connected=True, p=0.3)
    expected, _ = nx.stoer_wagner(to_networkx(graph))
    result = stoer_wagner(graph)
    assert result.cut_value == expected
    assert sum(edge.weight for edge in result.cut_edges) == expected


@pytest.mark.parametrize("seed", SEEDS)
def test_topological_sort_respects_edges(seed):
    graph = random_graph(seed, p=0.2)
    try:
        order = topological_sort(graph)
    except CyclicGraph:
        assert not nx.is_directed_acyclic_graph(to_networkx(graph))
        return
    position = {node: i for i, node in enumerate(order)}
    assert all(position[e.source] < position[e.target] for e in graph.edges())


@pytest.mark.parametrize("seed", SEEDS)
def test_transitive_closure_agrees(seed):
    graph = random_graph(seed, p=0.12)
    G = to_networkx(graph)
    closure = transitive_closure(graph)
    for node in graph:
        assert closure.successors(node) - {node} == nx.descendants(G, node)
