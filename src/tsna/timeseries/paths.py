"""
Temporal paths and their reconstruction.

A temporal path is a sequence of edge traversals with non-decreasing
traversal times. Shortest (earliest-arrival) temporal paths are obtained by
running the earliest arrival solver with predecessor tracking and walking the
recorded predecessors back from the target.
"""

from typing import Optional, Sequence, Tuple

from .reachability import EarliestArrivalTable, earliest_arrival
from ..network.dynamic import DynamicNetworkView, EdgeKey, TimePoint
from ..common.exceptions import ValidationError, InternalConsistencyError
from ..common.validators import validate_vertex_id
from ..common.logging_config import get_logger, log_function_entry

logger = get_logger(__name__)


class TemporalPath:
    """
    A time-respecting path through a dynamic network.

    Parameters
    ----------
    vertices : Sequence[int]
        Visited vertices ``v0..vk``
    times : Sequence[TimePoint]
        Traversal time of each edge ``t1..tk``, non-decreasing
    edges : Sequence[EdgeKey]
        Traversed edges, one per step

    Raises
    ------
    ValidationError
        If ``len(vertices) != len(edges) + 1``, ``len(times) != len(edges)``,
        or the times decrease

    Examples
    --------
    >>> path = TemporalPath([1, 2, 3], [0, 10], [(1, 2), (2, 3)])
    >>> len(path)
    2
    >>> str(path)
    '1 --(0)--> 2 --(10)--> 3'
    """

    def __init__(
        self,
        vertices: Sequence[int],
        times: Sequence[TimePoint],
        edges: Sequence[EdgeKey]
    ) -> None:
        if len(times) != len(edges):
            raise ValidationError(
                "times and edges must have the same length",
                field="times",
                details={"n_times": len(times), "n_edges": len(edges)}
            )
        if len(vertices) != len(edges) + 1:
            raise ValidationError(
                "vertices must have one more element than edges",
                field="vertices",
                details={"n_vertices": len(vertices), "n_edges": len(edges)}
            )
        for earlier, later in zip(times, times[1:]):
            if later < earlier:
                raise ValidationError(
                    "times must be non-decreasing",
                    field="times",
                    value=list(times)
                )

        self._vertices: Tuple[int, ...] = tuple(vertices)
        self._times: Tuple[TimePoint, ...] = tuple(times)
        self._edges: Tuple[EdgeKey, ...] = tuple(tuple(edge) for edge in edges)

    @property
    def vertices(self) -> Tuple[int, ...]:
        return self._vertices

    @property
    def times(self) -> Tuple[TimePoint, ...]:
        return self._times

    @property
    def edges(self) -> Tuple[EdgeKey, ...]:
        return self._edges

    @property
    def duration(self) -> TimePoint:
        """Time between the first and the last traversal (0 for an empty path)."""
        if not self._times:
            return 0
        return self._times[-1] - self._times[0]

    def __len__(self) -> int:
        return len(self._edges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemporalPath):
            return NotImplemented
        return (self._vertices, self._times, self._edges) == (
            other._vertices, other._times, other._edges
        )

    def __hash__(self) -> int:
        return hash((self._vertices, self._times, self._edges))

    def __repr__(self) -> str:
        return f"TemporalPath(vertices={list(self._vertices)}, times={list(self._times)})"

    def __str__(self) -> str:
        parts = [str(self._vertices[0])]
        for time, vertex in zip(self._times, self._vertices[1:]):
            parts.append(f" --({time})--> {vertex}")
        return "".join(parts)


def reconstruct_path(
    table: EarliestArrivalTable,
    source: int,
    target: int
) -> Optional[TemporalPath]:
    """
    Rebuild the earliest-arrival path to ``target`` from a tracked solver run.

    Parameters
    ----------
    table : EarliestArrivalTable
        Result of ``earliest_arrival(..., track_predecessors=True)``
    source : int
        Source vertex of the run
    target : int
        Vertex to reconstruct the path to

    Returns
    -------
    TemporalPath or None
        None when ``target`` was not reached; a single-vertex path when
        ``source == target``

    Raises
    ------
    ValidationError
        If ``source`` is not the source the table was computed from, or
        ``target`` is not a vertex of the table
    InternalConsistencyError
        If the table has no predecessors, or the chain from ``target`` breaks
        or loops before reaching ``source``
    """
    if source != table.source:
        raise ValidationError(
            "Source does not match the arrival table",
            field="source",
            value=source,
            expected=str(table.source)
        )
    validate_vertex_id(target, table.n_vertices, "target")

    if table[target] is None:
        return None

    if source == target:
        return TemporalPath([source], [], [])

    if not table.tracks_predecessors:
        raise InternalConsistencyError(
            "Arrival table was computed without predecessor tracking",
            vertex=target,
            operation="reconstruct_path"
        )

    vertices = [target]
    times = []
    edges = []

    current = target
    while current != source:
        if len(edges) >= table.n_vertices:
            raise InternalConsistencyError(
                "Predecessor chain loops without reaching the source",
                vertex=current,
                operation="reconstruct_path",
                resource_info={"source": source, "target": target}
            )
        step = table.predecessor(current)
        if step is None:
            raise InternalConsistencyError(
                "Predecessor chain broken before reaching the source",
                vertex=current,
                operation="reconstruct_path",
                resource_info={"source": source, "target": target}
            )
        previous, time = step
        vertices.append(previous)
        times.append(time)
        edges.append((previous, current))
        current = previous

    vertices.reverse()
    times.reverse()
    edges.reverse()

    return TemporalPath(vertices, times, edges)


def shortest_temporal_path(
    network: DynamicNetworkView,
    source: int,
    target: int,
    start_time: TimePoint
) -> Optional[TemporalPath]:
    """
    Earliest-arrival temporal path from ``source`` to ``target``.

    Parameters
    ----------
    network : DynamicNetworkView
        Network to search
    source, target : int
        End vertices
    start_time : TimePoint
        Time the journey starts

    Returns
    -------
    TemporalPath or None
        None if ``target`` is unreachable. Otherwise the final time of the
        path equals ``temporal_distance(network, source, target, start_time)``.

    Examples
    --------
    >>> path = shortest_temporal_path(net, 1, 5, 0)
    >>> path.edges
    ((1, 2), (2, 3), (3, 4), (4, 5))
    >>> path.times
    (0, 10, 30, 50)
    """
    log_function_entry("shortest_temporal_path", source=source, target=target,
                       start_time=start_time)
    validate_vertex_id(target, network.n_vertices, "target")

    if source == target:
        validate_vertex_id(source, network.n_vertices, "source")
        return TemporalPath([source], [], [])

    table = earliest_arrival(network, source, start_time, track_predecessors=True)
    path = reconstruct_path(table, source, target)

    if path is None:
        logger.debug("No temporal path from %d to %d starting at %s", source, target, start_time)
    return path
