"""
Tests for the earliest arrival and latest departure solvers.
"""

import numpy as np
import pytest

from tsna.network.dynamic import DynamicNetwork
from tsna.timeseries.reachability import (
    EarliestArrivalTable,
    LatestDepartureTable,
    earliest_arrival,
    latest_departure,
    temporal_distance,
    forward_reachable_set,
    backward_reachable_set
)
from tsna.common.exceptions import ValidationError


def create_chain_network(directed=True):
    """Chain 1 -> 2 -> 3 -> 4 -> 5 with overlapping spells."""
    return DynamicNetwork(5, directed=directed, edge_spells={
        (1, 2): [(0, 20)],
        (2, 3): [(10, 40)],
        (3, 4): [(30, 60)],
        (4, 5): [(50, 80)],
    })


def create_contact_network():
    """Zero-length contacts; the reverse order (4, 5) before (1, 2) is not time-respecting."""
    return DynamicNetwork(6, edge_spells={
        (1, 2): [(1, 1)],
        (2, 3): [(2, 2)],
        (3, 4): [(4, 4)],
        (5, 1): [(3, 3)],
        (4, 6): [(0, 0), (6, 6)],
    })


class TestEarliestArrival:
    """Test the forward solver."""

    def test_chain_arrival_times(self):
        table = earliest_arrival(create_chain_network(), 1, 0)

        assert isinstance(table, EarliestArrivalTable)
        assert table.as_dict() == {1: 0, 2: 0, 3: 10, 4: 30, 5: 50}
        assert table.source == 1
        assert table.start_time == 0

    def test_late_start_reaches_only_source(self):
        table = earliest_arrival(create_chain_network(), 1, 90)
        assert table.reached() == {1}
        assert table[5] is None

    def test_spell_started_before_start_time_is_unusable(self):
        # (1, 2) starts at 0, before the journey begins
        table = earliest_arrival(create_chain_network(), 1, 5)
        assert table.reached() == {1}

    def test_direction_respected(self):
        table = earliest_arrival(create_chain_network(), 5, 0)
        assert table.reached() == {5}

    def test_undirected_traversal(self):
        table = earliest_arrival(create_chain_network(directed=False), 5, 0)
        # (4, 5) opens at 50, after every other spell has started
        assert table.reached() == {4, 5}
        assert table[4] == 50

    def test_contacts_respect_time_order(self):
        table = earliest_arrival(create_contact_network(), 1, 0)
        assert table[2] == 1
        assert table[3] == 2
        assert table[4] == 4
        assert table[6] == 6
        assert table[5] is None

    def test_source_time_never_overwritten(self):
        net = DynamicNetwork(2, edge_spells={(2, 1): [(5, 6)], (1, 2): [(3, 4)]})
        table = earliest_arrival(net, 1, 0)
        assert table[1] == 0
        assert table[2] == 3

    def test_predecessors(self):
        table = earliest_arrival(create_chain_network(), 1, 0, track_predecessors=True)
        assert table.tracks_predecessors
        assert table.predecessor(1) is None
        assert table.predecessor(3) == (2, 10)
        assert table.predecessor(5) == (4, 50)

    def test_without_predecessors(self):
        table = earliest_arrival(create_chain_network(), 1, 0)
        assert not table.tracks_predecessors
        assert table.predecessor(3) is None

    def test_invalid_source(self):
        with pytest.raises(ValidationError):
            earliest_arrival(create_chain_network(), 6, 0)
        with pytest.raises(ValidationError):
            earliest_arrival(create_chain_network(), 0, 0)

    def test_table_indexing(self):
        table = earliest_arrival(create_chain_network(), 1, 0)
        assert len(table) == 5
        assert list(table)[0] == (1, 0)
        with pytest.raises(IndexError):
            table[0]
        with pytest.raises(IndexError):
            table[6]


class TestLatestDeparture:
    """Test the backward solver."""

    def test_chain_departure_times(self):
        table = latest_departure(create_chain_network(), 5, 80)

        assert isinstance(table, LatestDepartureTable)
        assert table.as_dict() == {1: 20, 2: 40, 3: 60, 4: 80, 5: 80}
        assert table.target == 5
        assert table.end_time == 80

    def test_early_deadline(self):
        table = latest_departure(create_chain_network(), 5, 60)
        assert table.reached() == {5}

    def test_contacts(self):
        table = latest_departure(create_contact_network(), 6, 6)
        assert table[4] == 6
        assert table[3] == 4
        assert table[2] == 2
        assert table[1] == 1
        # 5 -> 1 at 3 is followed only by 1 -> 2 at 1
        assert table[5] is None

    def test_invalid_target(self):
        with pytest.raises(ValidationError):
            latest_departure(create_chain_network(), 9, 80)


class TestTemporalDistance:
    """Test temporal distance queries."""

    def test_chain(self):
        assert temporal_distance(create_chain_network(), 1, 5, 0) == 50

    def test_unreachable(self):
        assert temporal_distance(create_chain_network(), 1, 5, 90) is None
        assert temporal_distance(create_chain_network(), 5, 1, 0) is None

    def test_same_vertex(self):
        assert temporal_distance(create_chain_network(), 3, 3, 17) == 17

    def test_numpy_vertex_ids(self):
        net = create_chain_network()
        assert temporal_distance(net, np.int64(1), np.int64(5), 0) == 50
        assert forward_reachable_set(net, np.int32(1), 0) == {1, 2, 3, 4, 5}

    def test_invalid_vertices(self):
        with pytest.raises(ValidationError):
            temporal_distance(create_chain_network(), 1, 6, 0)
        with pytest.raises(ValidationError):
            temporal_distance(create_chain_network(), 7, 7, 0)

    def test_not_earlier_than_start(self):
        net = create_contact_network()
        for target in range(1, 7):
            distance = temporal_distance(net, 1, target, 0)
            assert distance is None or distance >= 0


class TestReachableSets:
    """Test forward and backward reachable sets."""

    def test_forward(self):
        assert forward_reachable_set(create_chain_network(), 1, 0) == {1, 2, 3, 4, 5}
        assert forward_reachable_set(create_chain_network(), 1, 90) == {1}

    def test_backward(self):
        assert backward_reachable_set(create_chain_network(), 5, 80) == {1, 2, 3, 4, 5}
        assert backward_reachable_set(create_chain_network(), 5, 60) == {5}

    def test_sets_contain_anchor(self):
        net = create_contact_network()
        for vertex in range(1, 7):
            assert vertex in forward_reachable_set(net, vertex, 100)
            assert vertex in backward_reachable_set(net, vertex, -1)

    def test_forward_monotone_in_start_time(self):
        net = create_contact_network()
        for start in range(0, 7):
            later = forward_reachable_set(net, 1, start + 1)
            assert later <= forward_reachable_set(net, 1, start)

    def test_duality_on_contacts(self):
        net = create_contact_network()
        for source in range(1, 7):
            for target in range(1, 7):
                distance = temporal_distance(net, source, target, 0)
                if distance is not None:
                    assert source in backward_reachable_set(net, target, distance)
