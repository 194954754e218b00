"""
Tests for edge and vertex duration statistics.
"""

import pytest

from tsna.network.dynamic import DynamicNetwork
from tsna.timeseries.duration import (
    DurationAggregate,
    edge_durations,
    vertex_durations,
    spell_durations,
    aggregate_durations,
    t_edge_duration,
    t_vertex_duration
)
from tsna.common.exceptions import ConfigurationError


def create_network():
    return DynamicNetwork(
        4,
        edge_spells={
            (1, 2): [(0, 20), (40, 60)],
            (2, 3): [(10, 40)],
            (3, 4): [(5, 15)],
        },
        vertex_spells={
            1: [(0, 100)],
            2: [(0, 10), (20, 30)],
        },
    )


class TestEdgeDuration:
    """Test edge duration aggregation."""

    def test_all_spells_summed(self):
        net = DynamicNetwork(2, edge_spells={(1, 2): [(0, 20), (40, 60)]})
        assert t_edge_duration(net, "all") == {(1, 2): 40}

    def test_modes(self):
        net = create_network()
        assert t_edge_duration(net, "all") == {(1, 2): 40, (2, 3): 30, (3, 4): 10}
        assert t_edge_duration(net, "total") == 80
        assert t_edge_duration(net) == pytest.approx(80 / 3)
        assert t_edge_duration(net, DurationAggregate.MEDIAN) == pytest.approx(30.0)

    def test_overlapping_spells_are_additive(self):
        net = DynamicNetwork(2, edge_spells={(1, 2): [(0, 10), (5, 15)]})
        assert t_edge_duration(net, "total") == 20

    def test_empty_network(self):
        net = DynamicNetwork(3)
        assert t_edge_duration(net, "mean") == 0
        assert t_edge_duration(net, "median") == 0
        assert t_edge_duration(net, "total") == 0
        assert t_edge_duration(net, "all") == {}

    def test_unknown_mode(self):
        with pytest.raises(ConfigurationError):
            t_edge_duration(create_network(), "max")


class TestVertexDuration:
    """Test vertex duration aggregation."""

    def test_vertices_without_spells_count_zero(self):
        net = create_network()
        assert t_vertex_duration(net, "all") == {1: 100, 2: 20, 3: 0, 4: 0}
        assert t_vertex_duration(net, "mean") == pytest.approx(30.0)
        assert t_vertex_duration(net, "median") == pytest.approx(10.0)
        assert t_vertex_duration(net, "total") == 120

    def test_unknown_mode(self):
        with pytest.raises(ConfigurationError):
            t_vertex_duration(create_network(), "sum")


class TestHelpers:
    """Test the underlying duration collections."""

    def test_edge_durations(self):
        assert edge_durations(create_network())[(2, 3)] == 30

    def test_vertex_durations_cover_all_vertices(self):
        assert sorted(vertex_durations(create_network())) == [1, 2, 3, 4]

    def test_spell_durations_in_key_order(self):
        assert spell_durations(create_network()) == [20, 20, 30, 10]

    def test_median_of_even_count(self):
        assert aggregate_durations({"a": 1, "b": 2, "c": 4, "d": 10}, "median") == pytest.approx(3.0)
