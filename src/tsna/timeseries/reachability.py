"""
Temporal reachability on dynamic networks.

Edges can only be traversed while they are active, so whether a vertex can
reach another depends on when the journey starts. This module implements the
two single-pass label-setting solvers the rest of the package builds on:

- :func:`earliest_arrival` relaxes forward events in ascending onset order.
  Traversing an edge happens at the onset of one of its spells, and is
  possible when the tail vertex has been reached no later than that onset.
  Because events arrive in non-decreasing onset order, the arrival time of
  the tail is already final when an event is relaxed.
- :func:`latest_departure` is the reverse-time mirror: events are relaxed in
  descending terminus order, recording the latest spell terminus from which
  the target is still reachable by the deadline.

Unreached vertices hold ``None`` in the result tables. Absence of a temporal
path is an ordinary outcome and never raises.
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple

from .events import Direction, build_edge_events
from ..network.dynamic import DynamicNetworkView, TimePoint
from ..common.validators import validate_vertex_id
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer

logger = get_logger(__name__)

Predecessor = Tuple[int, TimePoint]


class _VertexTimeTable:
    """Flat table of optional times indexed by vertex id (slot 0 unused)."""

    def __init__(self, n_vertices: int, anchor: int, anchor_time: TimePoint) -> None:
        self._times: List[Optional[TimePoint]] = [None] * (n_vertices + 1)
        self._times[anchor] = anchor_time
        self.anchor = anchor
        self.anchor_time = anchor_time

    @property
    def n_vertices(self) -> int:
        return len(self._times) - 1

    def __getitem__(self, vertex: int) -> Optional[TimePoint]:
        if not 1 <= vertex <= self.n_vertices:
            raise IndexError(f"Vertex {vertex} outside [1..{self.n_vertices}]")
        return self._times[vertex]

    def __iter__(self) -> Iterator[Tuple[int, Optional[TimePoint]]]:
        return iter(enumerate(self._times[1:], start=1))

    def __len__(self) -> int:
        return self.n_vertices

    def reached(self) -> Set[int]:
        """Vertices holding a time."""
        return {vertex for vertex, time in self if time is not None}

    def as_dict(self) -> Dict[int, Optional[TimePoint]]:
        return dict(self)


class EarliestArrivalTable(_VertexTimeTable):
    """
    Earliest arrival time per vertex from a fixed source and start time.

    When built with predecessor tracking, ``predecessor(v)`` returns the
    ``(previous_vertex, time)`` of the edge traversal that set ``v``'s time.
    """

    def __init__(
        self,
        n_vertices: int,
        source: int,
        start_time: TimePoint,
        track_predecessors: bool = False
    ) -> None:
        super().__init__(n_vertices, source, start_time)
        self._predecessors: Optional[List[Optional[Predecessor]]] = (
            [None] * (n_vertices + 1) if track_predecessors else None
        )

    @property
    def source(self) -> int:
        return self.anchor

    @property
    def start_time(self) -> TimePoint:
        return self.anchor_time

    @property
    def tracks_predecessors(self) -> bool:
        return self._predecessors is not None

    def predecessor(self, vertex: int) -> Optional[Predecessor]:
        if self._predecessors is None:
            return None
        return self._predecessors[vertex]

    def relax(self, tail: int, head: int, time: TimePoint) -> bool:
        """Set ``head`` to ``time`` if ``tail`` is reached by then and it improves ``head``."""
        tail_time = self._times[tail]
        if tail_time is None or tail_time > time:
            return False
        head_time = self._times[head]
        if head_time is not None and time >= head_time:
            return False
        self._times[head] = time
        if self._predecessors is not None:
            self._predecessors[head] = (tail, time)
        return True


class LatestDepartureTable(_VertexTimeTable):
    """Latest departure time per vertex for reaching a fixed target by a deadline."""

    @property
    def target(self) -> int:
        return self.anchor

    @property
    def end_time(self) -> TimePoint:
        return self.anchor_time

    def relax(self, tail: int, head: int, time: TimePoint) -> bool:
        """Set ``tail`` to ``time`` if ``head`` still reaches the target from then and it improves ``tail``."""
        head_time = self._times[head]
        if head_time is None or head_time < time:
            return False
        tail_time = self._times[tail]
        if tail_time is not None and time <= tail_time:
            return False
        self._times[tail] = time
        return True


def earliest_arrival(
    network: DynamicNetworkView,
    source: int,
    start_time: TimePoint,
    track_predecessors: bool = False
) -> EarliestArrivalTable:
    """
    Compute earliest arrival times from ``source`` leaving at ``start_time``.

    Parameters
    ----------
    network : DynamicNetworkView
        Network to search
    source : int
        Source vertex id
    start_time : TimePoint
        Time the journey starts; only spells with ``onset >= start_time``
        can be used
    track_predecessors : bool, default False
        Record the traversal that set each vertex's time, for path
        reconstruction

    Returns
    -------
    EarliestArrivalTable
        ``table[v]`` is the earliest arrival at ``v`` or None if unreachable

    Raises
    ------
    ValidationError
        If ``source`` is not a vertex of the network

    Notes
    -----
    Runs in O(E log E) for E qualifying spells, dominated by the event sort.
    Undirected networks relax every event in both orientations.
    """
    validate_vertex_id(source, network.n_vertices, "source")

    table = EarliestArrivalTable(network.n_vertices, source, start_time, track_predecessors)
    events = build_edge_events(network, Direction.FORWARD, start_time)

    with LoggingTimer("earliest_arrival", {"events": len(events)}):
        for onset, i, j, _ in events:
            table.relax(i, j, onset)
            if not network.directed:
                table.relax(j, i, onset)

    logger.debug("Earliest arrival from %d at %s reached %d vertices",
                 source, start_time, len(table.reached()))
    return table


def latest_departure(
    network: DynamicNetworkView,
    target: int,
    end_time: TimePoint
) -> LatestDepartureTable:
    """
    Compute latest departure times for reaching ``target`` by ``end_time``.

    Parameters
    ----------
    network : DynamicNetworkView
        Network to search
    target : int
        Target vertex id
    end_time : TimePoint
        Deadline; only spells with ``terminus <= end_time`` can be used

    Returns
    -------
    LatestDepartureTable
        ``table[v]`` is the latest spell terminus from which ``v`` still
        reaches ``target``, or None if it cannot

    Raises
    ------
    ValidationError
        If ``target`` is not a vertex of the network
    """
    validate_vertex_id(target, network.n_vertices, "target")

    table = LatestDepartureTable(network.n_vertices, target, end_time)
    events = build_edge_events(network, Direction.BACKWARD, end_time)

    with LoggingTimer("latest_departure", {"events": len(events)}):
        for _, i, j, terminus in events:
            table.relax(i, j, terminus)
            if not network.directed:
                table.relax(j, i, terminus)

    logger.debug("Latest departure to %d by %s reached %d vertices",
                 target, end_time, len(table.reached()))
    return table


def temporal_distance(
    network: DynamicNetworkView,
    source: int,
    target: int,
    start_time: TimePoint
) -> Optional[TimePoint]:
    """
    Earliest time ``target`` can be reached from ``source`` leaving at ``start_time``.

    Returns ``start_time`` when ``source == target`` and None when ``target``
    is unreachable.

    Examples
    --------
    >>> temporal_distance(net, 1, 5, 0)
    50
    >>> temporal_distance(net, 1, 5, 90) is None
    True
    """
    log_function_entry("temporal_distance", source=source, target=target, start_time=start_time)
    validate_vertex_id(target, network.n_vertices, "target")

    if source == target:
        validate_vertex_id(source, network.n_vertices, "source")
        return start_time

    return earliest_arrival(network, source, start_time)[target]


def forward_reachable_set(
    network: DynamicNetworkView,
    source: int,
    start_time: TimePoint
) -> Set[int]:
    """Vertices reachable from ``source`` leaving at ``start_time``, ``source`` included."""
    log_function_entry("forward_reachable_set", source=source, start_time=start_time)
    return earliest_arrival(network, source, start_time).reached()


def backward_reachable_set(
    network: DynamicNetworkView,
    target: int,
    end_time: TimePoint
) -> Set[int]:
    """Vertices that can reach ``target`` by ``end_time``, ``target`` included."""
    log_function_entry("backward_reachable_set", target=target, end_time=end_time)
    return latest_departure(network, target, end_time).reached()

