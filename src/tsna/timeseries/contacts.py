"""
Contact sequences: every edge activation as one time-stamped event.
"""

from typing import Iterable, Iterator, NamedTuple, Tuple, overload

import polars as pl

from ..network.dynamic import DynamicNetworkView, TimePoint
from ..common.logging_config import get_logger

logger = get_logger(__name__)


class Contact(NamedTuple):
    """One edge spell: ``source`` contacts ``target`` at ``time`` for ``duration``."""

    source: int
    target: int
    time: TimePoint
    duration: TimePoint


class ContactSequence:
    """
    Immutable, time-ordered sequence of contacts.

    Contacts are sorted by time on construction; contacts with equal times
    keep the order they were given in. Iteration can be repeated.

    Parameters
    ----------
    contacts : Iterable[Contact]
        Contacts in any order
    n_vertices : int
        Number of vertices of the originating network
    directed : bool, default True
        Whether contacts are directed
    """

    def __init__(
        self,
        contacts: Iterable[Contact],
        n_vertices: int,
        directed: bool = True
    ) -> None:
        self._contacts: Tuple[Contact, ...] = tuple(
            sorted(contacts, key=lambda contact: contact.time)
        )
        self._n_vertices = n_vertices
        self._directed = directed

    @property
    def contacts(self) -> Tuple[Contact, ...]:
        return self._contacts

    @property
    def n_vertices(self) -> int:
        return self._n_vertices

    @property
    def directed(self) -> bool:
        return self._directed

    def __len__(self) -> int:
        return len(self._contacts)

    def __iter__(self) -> Iterator[Contact]:
        return iter(self._contacts)

    @overload
    def __getitem__(self, index: int) -> Contact: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Contact, ...]: ...

    def __getitem__(self, index):
        return self._contacts[index]

    def __repr__(self) -> str:
        return (
            f"ContactSequence(contacts={len(self._contacts)}, "
            f"n_vertices={self._n_vertices}, directed={self._directed})"
        )

    def to_dataframe(self) -> pl.DataFrame:
        """
        Export the contacts as a polars DataFrame.

        Returns
        -------
        pl.DataFrame
            Columns ``source``, ``target``, ``time``, ``duration`` in
            sequence order
        """
        if not self._contacts:
            return pl.DataFrame(
                {"source": [], "target": [], "time": [], "duration": []},
                schema={"source": pl.Int64, "target": pl.Int64,
                        "time": pl.Float64, "duration": pl.Float64}
            )
        return pl.DataFrame(
            [contact._asdict() for contact in self._contacts]
        )


def as_contact_sequence(network: DynamicNetworkView) -> ContactSequence:
    """
    Flatten all edge spells of a network into a contact sequence.

    Each spell becomes one contact at its onset with the spell's duration;
    spells are never merged.

    Examples
    --------
    >>> seq = as_contact_sequence(net)
    >>> [(c.source, c.target, c.time) for c in seq]
    [(1, 2, 0), (2, 3, 10), (3, 4, 30), (4, 5, 50)]
    """
    contacts = [
        Contact(source, target, spell.onset, spell.duration)
        for (source, target), spells in sorted(network.edge_spells.items())
        for spell in spells
    ]
    logger.debug("Built contact sequence with %d contacts", len(contacts))
    return ContactSequence(contacts, network.n_vertices, directed=network.directed)
