"""
Edge event streams for temporal reachability.

Every spell of every edge becomes one event ``(onset, source, target,
terminus)``. Forward queries consume the events whose onset is not earlier
than the start time, in ascending onset order; backward queries consume the
events whose terminus is not later than the deadline, in descending terminus
order.

Events sharing a sort key are ordered by ``(source, target)`` and then by
the position of the spell in its edge's spell list, so the same network
always yields the same stream and therefore the same recorded predecessors.
"""

from enum import Enum
from typing import List, NamedTuple

from ..network.dynamic import DynamicNetworkView, TimePoint


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class EdgeEvent(NamedTuple):
    """One edge spell as seen by the solvers."""

    onset: TimePoint
    source: int
    target: int
    terminus: TimePoint


def build_edge_events(
    network: DynamicNetworkView,
    direction: Direction,
    bound: TimePoint
) -> List[EdgeEvent]:
    """
    Collect and order the edge events relevant to a query.

    Parameters
    ----------
    network : DynamicNetworkView
        Network whose edge spells are read
    direction : Direction
        FORWARD keeps ``onset >= bound`` sorted by ascending onset;
        BACKWARD keeps ``terminus <= bound`` sorted by descending terminus
    bound : TimePoint
        Start time (forward) or deadline (backward)

    Returns
    -------
    List[EdgeEvent]
        One event per qualifying spell

    Examples
    --------
    >>> events = build_edge_events(net, Direction.FORWARD, 0)
    >>> [(e.onset, e.source, e.target) for e in events]
    [(0, 1, 2), (10, 2, 3), (30, 3, 4), (50, 4, 5)]
    """
    events = []
    for (source, target), spells in sorted(network.edge_spells.items()):
        for spell in spells:
            if direction is Direction.FORWARD:
                if spell.onset >= bound:
                    events.append(EdgeEvent(spell.onset, source, target, spell.terminus))
            elif spell.terminus <= bound:
                events.append(EdgeEvent(spell.onset, source, target, spell.terminus))

    # sorted() is stable, so equal keys keep the (source, target, spell) order above
    if direction is Direction.FORWARD:
        return sorted(events, key=lambda event: event.onset)
    return sorted(events, key=lambda event: event.terminus, reverse=True)
