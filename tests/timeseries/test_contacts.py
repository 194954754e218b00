"""
Tests for contact sequences.
"""

import polars as pl

from tsna.network.dynamic import DynamicNetwork
from tsna.timeseries.contacts import Contact, ContactSequence, as_contact_sequence


def create_chain_network():
    return DynamicNetwork(5, edge_spells={
        (1, 2): [(0, 20)],
        (2, 3): [(10, 40)],
        (3, 4): [(30, 60)],
        (4, 5): [(50, 80)],
    })


class TestAsContactSequence:
    """Test flattening spells into contacts."""

    def test_chain(self):
        seq = as_contact_sequence(create_chain_network())

        assert len(seq) == 4
        assert [(c.source, c.target, c.time) for c in seq] == [
            (1, 2, 0), (2, 3, 10), (3, 4, 30), (4, 5, 50)
        ]
        assert seq[0] == Contact(1, 2, 0, 20)
        assert seq.n_vertices == 5
        assert seq.directed

    def test_one_contact_per_spell(self):
        net = DynamicNetwork(3, edge_spells={
            (1, 2): [(5, 9), (20, 21)],
            (1, 3): [(0, 1)],
        })
        seq = as_contact_sequence(net)
        assert [(c.source, c.target, c.time, c.duration) for c in seq] == [
            (1, 3, 0, 1), (1, 2, 5, 4), (1, 2, 20, 1)
        ]

    def test_time_ties_keep_edge_key_order(self):
        net = DynamicNetwork(3, edge_spells={(2, 3): [(5, 6)], (1, 2): [(5, 7)]})
        seq = as_contact_sequence(net)
        assert [(c.source, c.target) for c in seq] == [(1, 2), (2, 3)]

    def test_iteration_is_repeatable(self):
        seq = as_contact_sequence(create_chain_network())
        assert list(seq) == list(seq)

    def test_slicing(self):
        seq = as_contact_sequence(create_chain_network())
        assert seq[1:3] == (Contact(2, 3, 10, 30), Contact(3, 4, 30, 30))

    def test_empty_network(self):
        seq = as_contact_sequence(DynamicNetwork(2, directed=False))
        assert len(seq) == 0
        assert not seq.directed


class TestContactSequence:
    """Test the sequence container."""

    def test_sorted_on_construction(self):
        seq = ContactSequence([Contact(1, 2, 9, 1), Contact(2, 1, 3, 1)], n_vertices=2)
        assert [c.time for c in seq] == [3, 9]

    def test_to_dataframe(self):
        df = as_contact_sequence(create_chain_network()).to_dataframe()

        assert isinstance(df, pl.DataFrame)
        assert df.columns == ["source", "target", "time", "duration"]
        assert df["time"].to_list() == [0, 10, 30, 50]
        assert df["duration"].to_list() == [20, 30, 30, 30]

    def test_empty_dataframe(self):
        df = ContactSequence([], n_vertices=3).to_dataframe()
        assert df.shape == (0, 4)
        assert df.columns == ["source", "target", "time", "duration"]
