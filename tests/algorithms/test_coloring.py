import pytest

from graphengine.algorithms.base import ColoringStrategy
from graphengine.algorithms.coloring import (
    chromatic_number,
    exact_coloring,
    greedy_coloring,
    is_valid_coloring,
)
from graphengine.errors import InvalidInput
from graphengine.graph.model import Graph


@pytest.fixture
def crown4():
    # u_i ─ v_j for i != j. Bipartite, but insertion-order greedy needs 4 colors.
    order = [name for i in range(4) for name in (f"u{i}", f"v{i}")]
    edges = [(f"u{i}", f"v{j}") for i in range(4) for j in range(4) if i != j]
    return Graph.from_edges(edges, directed=False, nodes=order)


def _cycle(n):
    return Graph.from_edges([(i, (i + 1) % n) for i in range(n)], directed=False)


class TestGreedy:
    @pytest.mark.parametrize("strategy", list(ColoringStrategy))
    def test_valid_for_every_strategy(self, petersen, crown4, strategy):
        for graph in (petersen, crown4, _cycle(7)):
            colors = greedy_coloring(graph, strategy)
            assert is_valid_coloring(graph, colors)
            assert set(colors.values()) == set(range(len(set(colors.values()))))

    def test_insertion_order_is_not_optimal(self, crown4):
        colors = greedy_coloring(crown4, ColoringStrategy.INSERTION_ORDER)
        assert len(set(colors.values())) == 4

    def test_dsatur_optimal_on_bipartite(self, crown4):
        colors = greedy_coloring(crown4, ColoringStrategy.DSATUR)
        assert len(set(colors.values())) == 2

    def test_unknown_strategy(self, petersen):
        with pytest.raises(InvalidInput):
            greedy_coloring(petersen, 42)  # type: ignore[arg-type]


class TestExact:
    def test_known_chromatic_numbers(self, petersen, crown4):
        assert chromatic_number(petersen) == 3
        assert chromatic_number(crown4) == 2
        assert chromatic_number(_cycle(5)) == 3
        assert chromatic_number(_cycle(6)) == 2
        k5 = Graph.from_edges(
            [(i, j) for i in range(5) for j in range(i + 1, 5)], directed=False
        )
        assert chromatic_number(k5) == 5

    def test_exact_is_valid_and_minimal(self, petersen):
        colors = exact_coloring(petersen)
        assert is_valid_coloring(petersen, colors)
        assert max(colors.values()) == 2

    def test_direction_ignored(self, cycle3):
        assert chromatic_number(cycle3) == 3

    def test_edgeless_and_empty(self):
        assert chromatic_number(Graph({"A": [], "B": []})) == 1
        assert chromatic_number(Graph()) == 0
        assert exact_coloring(Graph()) == {}

    def test_self_loop_rejected(self):
        with pytest.raises(InvalidInput):
            exact_coloring(Graph({"A": ["A"]}))
        with pytest.raises(InvalidInput):
            greedy_coloring(Graph({"A": ["A", "B"]}))


def test_is_valid_coloring(path3_undirected):
    assert is_valid_coloring(path3_undirected, {1: 0, 2: 1, 3: 0})
    assert not is_valid_coloring(path3_undirected, {1: 0, 2: 0, 3: 1})
    assert not is_valid_coloring(path3_undirected, {1: 0, 2: 1})
