"""
Tests for windowed persistence, turnover and tie decay.
"""

import math

import pytest

from tsna.network.dynamic import DynamicNetwork
from tsna.timeseries.windowed import (
    DecayMethod,
    TurnoverResult,
    window_count,
    window_boundaries,
    t_edge_persistence,
    t_turnover,
    tie_decay
)
from tsna.common.exceptions import ConfigurationError


def create_stable_network():
    """Every edge is active for the whole observation period."""
    return DynamicNetwork(3, edge_spells={
        (1, 2): [(0, 100)],
        (2, 3): [(0, 100)],
    })


def create_changing_network(directed=True):
    """(1, 2) is replaced by (2, 3) at time 10 while (1, 3) persists."""
    return DynamicNetwork(3, directed=directed, edge_spells={
        (1, 2): [(0, 10)],
        (2, 3): [(10, 20)],
        (1, 3): [(0, 20)],
    })


class TestWindows:
    """Test window counting and boundaries."""

    def test_window_count(self):
        net = create_stable_network()
        assert window_count(net, 10) == 10
        assert window_count(net, 30) == 4
        assert window_count(net, 0) == 0
        assert window_count(net, -5) == 0

    def test_boundaries(self):
        assert window_boundaries(create_stable_network(), 30) == [0, 30, 60, 90]

    def test_single_window_has_no_boundaries(self):
        assert window_boundaries(create_stable_network(), 100) == []
        assert window_boundaries(create_stable_network(), 500) == []

    def test_boundaries_start_at_observation_start(self):
        net = DynamicNetwork(2, edge_spells={(1, 2): [(5, 6)]}, observation_period=(100, 130))
        assert window_boundaries(net, 10) == [100, 110, 120]


class TestEdgePersistence:
    """Test the share of edges surviving between boundaries."""

    def test_stable_network(self):
        assert t_edge_persistence(create_stable_network(), 10) == 1.0

    def test_changing_network(self):
        assert t_edge_persistence(create_changing_network(), 10) == pytest.approx(0.5)

    def test_degenerate_windows(self):
        net = create_changing_network()
        assert t_edge_persistence(net, 0) == 1.0
        assert t_edge_persistence(net, 20) == 1.0

    def test_no_active_edges(self):
        net = DynamicNetwork(2, edge_spells={(1, 2): [(5, 6)]}, observation_period=(10, 40))
        assert t_edge_persistence(net, 10) == 1.0

    def test_value_in_unit_interval(self):
        value = t_edge_persistence(create_changing_network(directed=False), 5)
        assert 0.0 <= value <= 1.0


class TestTurnover:
    """Test edge formation and dissolution."""

    def test_stable_network(self):
        result = t_turnover(create_stable_network(), 10)
        assert result == TurnoverResult(0.0, 0.0, 0, 0)

    def test_changing_directed_network(self):
        result = t_turnover(create_changing_network(), 10)

        assert result.n_formations == 1
        assert result.n_dissolutions == 1
        # 6 possible directed edges, 2 present at the first boundary
        assert result.formation_rate == pytest.approx(1 / 4)
        assert result.dissolution_rate == pytest.approx(1 / 2)

    def test_changing_undirected_network(self):
        result = t_turnover(create_changing_network(directed=False), 10)

        assert result.n_formations == 1
        assert result.n_dissolutions == 1
        # 3 possible undirected edges, 2 present at the first boundary
        assert result.formation_rate == pytest.approx(1.0)
        assert result.dissolution_rate == pytest.approx(0.5)

    def test_degenerate_windows(self):
        assert t_turnover(create_changing_network(), -1) == TurnoverResult(0.0, 0.0, 0, 0)
        assert t_turnover(DynamicNetwork(3), 10) == TurnoverResult(0.0, 0.0, 0, 0)


class TestTieDecay:
    """Test the exponential tie decay estimate."""

    def create_network(self):
        return DynamicNetwork(3, edge_spells={
            (1, 2): [(0, 10)],
            (2, 3): [(0, 30)],
        })

    def test_exponential_rate(self):
        assert tie_decay(self.create_network()) == pytest.approx(1 / 20)

    def test_halflife(self):
        assert tie_decay(self.create_network(), "halflife") == pytest.approx(math.log(2) / 20)
        assert tie_decay(self.create_network(), DecayMethod.HALFLIFE) == pytest.approx(
            math.log(2) / 20
        )

    def test_no_spells(self):
        assert tie_decay(DynamicNetwork(3)) == 0.0

    def test_zero_length_spells(self):
        net = DynamicNetwork(2, edge_spells={(1, 2): [(3, 3), (5, 5)]})
        assert tie_decay(net) == 0.0

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError):
            tie_decay(self.create_network(), "linear")
