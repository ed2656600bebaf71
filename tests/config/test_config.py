"""Tests for `graphengine.config` tolerances and their effect on algorithms."""

import pytest

from graphengine.algorithms.max_flow import calc_max_flow
from graphengine.algorithms.spf import johnson
from graphengine.config import ENGINE_CONFIG, EngineConfig
from graphengine.graph.model import Graph


def test_defaults() -> None:
    config = EngineConfig()
    assert config.capacity_tolerance == 1e-12
    assert config.reweight_tolerance == 1e-9


def test_is_positive_capacity_threshold() -> None:
    config = EngineConfig(capacity_tolerance=0.5)
    assert config.is_positive_capacity(0.6)
    assert not config.is_positive_capacity(0.5)
    assert not config.is_positive_capacity(0.0)


@pytest.fixture
def restore_engine_config():
    saved = (ENGINE_CONFIG.capacity_tolerance, ENGINE_CONFIG.reweight_tolerance)
    yield ENGINE_CONFIG
    ENGINE_CONFIG.capacity_tolerance, ENGINE_CONFIG.reweight_tolerance = saved


def test_capacity_tolerance_treats_tiny_residuals_as_saturated(restore_engine_config) -> None:
    g = Graph({"A": [("B", 1e-6)]})
    assert calc_max_flow(g, "A", "B") == pytest.approx(1e-6)

    restore_engine_config.capacity_tolerance = 1e-3
    assert calc_max_flow(g, "A", "B") == 0.0


def test_float_weights_survive_reweighting() -> None:
    g = Graph({"A": [("B", 0.1), ("C", 0.3)], "B": [("C", -0.2)], "C": []})
    distances = johnson(g).distances
    assert distances["A"]["C"] == pytest.approx(-0.1)
    assert distances["B"]["C"] == pytest.approx(-0.2)
