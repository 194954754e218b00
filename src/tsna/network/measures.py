"""
Static network measures evaluated on snapshots of a dynamic network.

Every per-vertex measure extracts the snapshot at one instant and delegates
to networkit. Results are plain lists ordered by vertex id ``1..N``, so
``result[v - 1]`` is the value of vertex ``v``.

Series of graph-level statistics are returned as polars DataFrames with a
``time`` column and one column per requested statistic.
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

import networkit as nk
import numpy as np
import polars as pl

from .dynamic import (
    DynamicNetworkView, ExtractionRule, Snapshot, TimePoint, build_snapshot, max_possible_edges
)
from ..common.exceptions import ComputationError, require_positive
from ..common.validators import coerce_choice
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer

logger = get_logger(__name__)


class DegreeMode(Enum):
    TOTAL = "total"
    IN = "in"
    OUT = "out"


class SnaStatistic(Enum):
    """Graph-level statistics available to the statistic series."""

    DENSITY = "density"
    RECIPROCITY = "reciprocity"
    TRANSITIVITY = "transitivity"
    N_EDGES = "n_edges"
    N_VERTICES = "n_vertices"
    MEAN_DEGREE = "mean_degree"


class AggregationMethod(Enum):
    UNION = "union"
    INTERSECTION = "intersection"
    WEIGHTED = "weighted"


def _by_vertex(snapshot: Snapshot, scores: Sequence[float]) -> List[float]:
    mapper = snapshot.id_mapper
    return [float(scores[mapper.get_internal(v)]) for v in mapper.vertices()]


def _run_centrality(
    snapshot: Snapshot,
    name: str,
    factory: Callable[[nk.Graph], object]
) -> List[float]:
    if snapshot.n_vertices == 0:
        return []
    try:
        algorithm = factory(snapshot.graph)
        algorithm.run()
        scores = np.nan_to_num(np.array(algorithm.scores()), nan=0.0)
    except Exception as e:
        raise ComputationError(
            f"Failed to calculate {name} centrality: {str(e)}",
            operation=f"calculate_{name}",
            error_type="numerical",
            cause=e
        )
    return _by_vertex(snapshot, scores)


# Snapshot-level statistics

def snapshot_density(snapshot: Snapshot) -> float:
    n = snapshot.n_vertices
    if n <= 1:
        return 0.0
    return snapshot.n_edges / max_possible_edges(n, snapshot.directed)


def snapshot_reciprocity(snapshot: Snapshot) -> float:
    """Share of directed edges whose reverse edge is present as well."""
    if not snapshot.directed:
        return 1.0
    edges = snapshot.edge_set()
    if not edges:
        return 0.0
    mutual = sum(1 for source, target in edges if (target, source) in edges)
    return mutual / len(edges)


def snapshot_transitivity(snapshot: Snapshot) -> float:
    """
    Global clustering coefficient of the snapshot.

    Directed snapshots are read as undirected, with reciprocal edges merged
    and self-loops dropped. Returns 0.0 for fewer than three vertices or
    when the snapshot has no connected triples.

    Raises
    ------
    ComputationError
        If networkit fails to compute the coefficient
    """
    if snapshot.n_vertices < 3 or snapshot.n_edges == 0:
        return 0.0

    graph = snapshot.graph
    if snapshot.directed or graph.numberOfSelfLoops() > 0:
        edges = [(source, target) for source, target in snapshot.edge_set() if source != target]
        graph = build_snapshot(snapshot.n_vertices, False, edges).graph
    if all(graph.degree(u) < 2 for u in graph.iterNodes()):
        return 0.0

    try:
        value = nk.globals.ClusteringCoefficient.exactGlobal(graph)
    except Exception as e:
        raise ComputationError(
            f"Failed to calculate transitivity: {str(e)}",
            operation="calculate_transitivity",
            error_type="numerical",
            cause=e
        )
    return float(np.nan_to_num(value, nan=0.0))


def snapshot_mean_degree(snapshot: Snapshot) -> float:
    """Mean total degree, ``2E / N``."""
    if snapshot.n_vertices == 0:
        return 0.0
    return 2 * snapshot.n_edges / snapshot.n_vertices


_STATISTICS: Dict[SnaStatistic, Callable[[Snapshot], Union[int, float]]] = {
    SnaStatistic.DENSITY: snapshot_density,
    SnaStatistic.RECIPROCITY: snapshot_reciprocity,
    SnaStatistic.TRANSITIVITY: snapshot_transitivity,
    SnaStatistic.N_EDGES: lambda snapshot: snapshot.n_edges,
    SnaStatistic.N_VERTICES: lambda snapshot: snapshot.n_vertices,
    SnaStatistic.MEAN_DEGREE: snapshot_mean_degree,
}


# Per-instant measures

def t_degree(
    network: DynamicNetworkView,
    at: TimePoint,
    mode: Union[str, DegreeMode] = DegreeMode.TOTAL
) -> List[int]:
    """
    Degree of every vertex at time ``at``.

    Parameters
    ----------
    network : DynamicNetworkView
        Network to measure
    at : TimePoint
        Instant of the snapshot
    mode : {"total", "in", "out"}, default "total"
        Which degree to count on directed networks. Undirected networks
        return the plain degree for every mode.

    Returns
    -------
    List[int]
        Degree per vertex, ordered by vertex id

    Raises
    ------
    ConfigurationError
        If ``mode`` is not a known degree mode
    """
    mode = coerce_choice(mode, DegreeMode, "mode", "t_degree")
    snapshot = network.extract(at)
    graph = snapshot.graph

    if not graph.isDirected():
        degrees = [graph.degree(u) for u in graph.iterNodes()]
    elif mode is DegreeMode.IN:
        degrees = [graph.degreeIn(u) for u in graph.iterNodes()]
    elif mode is DegreeMode.OUT:
        degrees = [graph.degreeOut(u) for u in graph.iterNodes()]
    else:
        degrees = [graph.degreeIn(u) + graph.degreeOut(u) for u in graph.iterNodes()]

    return [int(d) for d in _by_vertex(snapshot, degrees)]


def t_density(network: DynamicNetworkView, at: TimePoint) -> float:
    """Edge density at ``at``; 0.0 for networks with fewer than two vertices."""
    return snapshot_density(network.extract(at))


def t_reciprocity(network: DynamicNetworkView, at: TimePoint) -> float:
    """Reciprocity at ``at``; 1.0 for undirected networks, 0.0 without edges."""
    return snapshot_reciprocity(network.extract(at))


def t_transitivity(network: DynamicNetworkView, at: TimePoint) -> float:
    return snapshot_transitivity(network.extract(at))


def t_betweenness(
    network: DynamicNetworkView,
    at: TimePoint,
    normalized: bool = False
) -> List[float]:
    """Betweenness centrality of every vertex at ``at``."""
    return _run_centrality(
        network.extract(at), "betweenness",
        lambda graph: nk.centrality.Betweenness(graph, normalized=normalized)
    )


def t_closeness(
    network: DynamicNetworkView,
    at: TimePoint,
    normalized: bool = True
) -> List[float]:
    """
    Closeness centrality of every vertex at ``at``.

    Uses harmonic closeness, which stays defined on disconnected snapshots.
    """
    return _run_centrality(
        network.extract(at), "closeness",
        lambda graph: nk.centrality.HarmonicCloseness(graph, normalized=normalized)
    )


def t_eigenvector(network: DynamicNetworkView, at: TimePoint) -> List[float]:
    """Eigenvector centrality of every vertex at ``at``."""
    return _run_centrality(
        network.extract(at), "eigenvector",
        lambda graph: nk.centrality.EigenvectorCentrality(graph)
    )


def t_pagerank(
    network: DynamicNetworkView,
    at: TimePoint,
    damping: float = 0.85
) -> List[float]:
    """
    PageRank of every vertex at ``at``.

    Raises
    ------
    ConfigurationError
        If ``damping`` is not in ``(0, 1)``
    ComputationError
        If networkit fails to compute the scores
    """
    require_positive(damping, "damping")
    require_positive(1 - damping, "1 - damping")
    return _run_centrality(
        network.extract(at), "pagerank",
        lambda graph: nk.centrality.PageRank(graph, damping)
    )


# Statistic series

def _resolve_statistics(
    stats: Iterable[Union[str, SnaStatistic]],
    function_name: str
) -> List[SnaStatistic]:
    return [coerce_choice(stat, SnaStatistic, "stats", function_name) for stat in stats]


def _statistics_frame(
    times: List[TimePoint],
    snapshots: List[Snapshot],
    stats: List[SnaStatistic]
) -> pl.DataFrame:
    columns: Dict[str, list] = {"time": times}
    for stat in stats:
        compute = _STATISTICS[stat]
        columns[stat.value] = [compute(snapshot) for snapshot in snapshots]
    return pl.DataFrame(columns)


def t_sna_stats(
    network: DynamicNetworkView,
    times: Sequence[TimePoint],
    stats: Iterable[Union[str, SnaStatistic]] = (SnaStatistic.DENSITY, SnaStatistic.N_EDGES)
) -> pl.DataFrame:
    """
    Graph-level statistics of the snapshots at the given instants.

    Parameters
    ----------
    network : DynamicNetworkView
        Network to measure
    times : Sequence[TimePoint]
        Instants to sample, in output order
    stats : Iterable of str or SnaStatistic
        Statistics to compute; see :class:`SnaStatistic`

    Returns
    -------
    pl.DataFrame
        One row per instant: ``time`` plus one column per statistic

    Raises
    ------
    ConfigurationError
        If a statistic name is unknown. All names are checked before any
        snapshot is extracted.

    Examples
    --------
    >>> t_sna_stats(net, [0, 15], ["density", "n_edges"])
    shape: (2, 3)
    ┌──────┬─────────┬─────────┐
    │ time ┆ density ┆ n_edges │
    ╞══════╪═════════╪═════════╡
    │ 0    ┆ 0.05    ┆ 1       │
    │ 15   ┆ 0.1     ┆ 2       │
    └──────┴─────────┴─────────┘
    """
    resolved = _resolve_statistics(stats, "t_sna_stats")
    log_function_entry("t_sna_stats", times=len(times), stats=[s.value for s in resolved])

    times = list(times)
    with LoggingTimer("t_sna_stats", {"times": len(times)}):
        snapshots = [network.extract(at) for at in times]
        return _statistics_frame(times, snapshots, resolved)


def window_sna_stats(
    network: DynamicNetworkView,
    window_size: TimePoint,
    stats: Iterable[Union[str, SnaStatistic]] = (SnaStatistic.DENSITY, SnaStatistic.N_EDGES),
    step: Optional[TimePoint] = None
) -> pl.DataFrame:
    """
    Graph-level statistics of sliding interval snapshots.

    Windows ``[start, start + window_size)`` begin at the start of the
    observation period and advance by ``step`` while they start before its
    end. An edge belongs to a window snapshot if one of its spells overlaps
    the window.

    Parameters
    ----------
    network : DynamicNetworkView
        Network to measure
    window_size : TimePoint
        Window width
    stats : Iterable of str or SnaStatistic
        Statistics to compute
    step : TimePoint, optional
        Distance between window starts. Defaults to ``window_size``
        (non-overlapping windows).

    Returns
    -------
    pl.DataFrame
        One row per window, ``time`` holding the window start

    Raises
    ------
    ConfigurationError
        If ``window_size`` or ``step`` is not positive, or a statistic name
        is unknown
    """
    resolved = _resolve_statistics(stats, "window_sna_stats")
    require_positive(window_size, "window_size")
    if step is None:
        step = window_size
    require_positive(step, "step")

    start, end = network.observation_period
    starts: List[TimePoint] = []
    current = start
    while current < end:
        starts.append(current)
        current = start + len(starts) * step

    logger.info("Computing %d statistics over %d windows", len(resolved), len(starts))

    with LoggingTimer("window_sna_stats", {"windows": len(starts)}):
        snapshots = [
            network.extract(onset, onset + window_size, rule=ExtractionRule.ANY)
            for onset in starts
        ]
        return _statistics_frame(starts, snapshots, resolved)


def t_aggregate(
    network: DynamicNetworkView,
    method: Union[str, AggregationMethod] = AggregationMethod.UNION
) -> Snapshot:
    """
    Collapse a dynamic network into one static snapshot.

    Parameters
    ----------
    network : DynamicNetworkView
        Network to collapse
    method : {"union", "intersection", "weighted"}, default "union"
        - "union": every edge with at least one spell
        - "intersection": edges active throughout the observation period
        - "weighted": the union, weighted by each edge's total active time

    Returns
    -------
    Snapshot

    Raises
    ------
    ConfigurationError
        If ``method`` is not a known aggregation method
    """
    method = coerce_choice(method, AggregationMethod, "method", "t_aggregate")
    spells = sorted(network.edge_spells.items())

    if method is AggregationMethod.INTERSECTION:
        start, end = network.observation_period
        edges = [key for key, edge_spells in spells
                 if any(spell.covers(start, end) for spell in edge_spells)]
        return build_snapshot(network.n_vertices, network.directed, edges)

    edges = [key for key, edge_spells in spells if edge_spells]
    if method is AggregationMethod.UNION:
        return build_snapshot(network.n_vertices, network.directed, edges)

    weights = [
        float(sum(spell.duration for spell in edge_spells))
        for _, edge_spells in spells if edge_spells
    ]
    return build_snapshot(network.n_vertices, network.directed, edges, weights)
