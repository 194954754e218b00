"""
Read-only dynamic network storage and snapshot extraction.

A dynamic network is a fixed vertex set ``1..N`` whose edges (and optionally
vertices) are active during spells, half-open intervals ``[onset, terminus)``.
The temporal algorithms of :mod:`tsna.timeseries` only depend on the
:class:`DynamicNetworkView` protocol; :class:`DynamicNetwork` is the
in-package implementation of it, built once from spell mappings or a polars
spell table and never mutated afterwards.

Snapshots (the network as it is at one instant, or over an interval) are
materialized as networkit graphs together with an :class:`IDMapper` that
translates networkit node ids back to vertex ids.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import (
    Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Set, Tuple,
    Union, runtime_checkable
)

import networkit as nk
import polars as pl

from ..common.id_mapper import IDMapper
from ..common.exceptions import ValidationError, require_positive
from ..common.validators import coerce_choice, validate_spell_dataframe, validate_vertex_id
from ..common.logging_config import get_logger

logger = get_logger(__name__)

TimePoint = Union[int, float]
EdgeKey = Tuple[int, int]


@dataclass(frozen=True)
class Spell:
    """
    One continuous activation ``[onset, terminus)`` of an edge or vertex.

    A zero-length spell (``onset == terminus``) is an instantaneous
    activation and counts as active exactly at its onset.
    """

    onset: TimePoint
    terminus: TimePoint

    def __post_init__(self) -> None:
        if self.onset > self.terminus:
            raise ValidationError(
                "Spell onset must not exceed terminus",
                field="onset",
                value=self.onset,
                expected=f"value <= {self.terminus}"
            )

    @property
    def duration(self) -> TimePoint:
        return self.terminus - self.onset

    def is_active(self, at: TimePoint) -> bool:
        if self.onset == self.terminus:
            return at == self.onset
        return self.onset <= at < self.terminus

    def overlaps(self, onset: TimePoint, terminus: TimePoint) -> bool:
        """True if the spell is active at some instant of ``[onset, terminus)``."""
        if onset == terminus:
            return self.is_active(onset)
        if self.onset == self.terminus:
            return onset <= self.onset < terminus
        return self.onset < terminus and self.terminus > onset

    def covers(self, onset: TimePoint, terminus: TimePoint) -> bool:
        """True if the spell is active throughout ``[onset, terminus)``."""
        if onset == terminus:
            return self.is_active(onset)
        return self.onset <= onset and self.terminus >= terminus


class ExtractionRule(Enum):
    """How interval extraction decides whether an edge is present."""

    ANY = "any"
    ALL = "all"


SpellInput = Union[Spell, Tuple[TimePoint, TimePoint]]


@dataclass(frozen=True)
class Snapshot:
    """
    A static view of a dynamic network.

    Attributes
    ----------
    graph : nk.Graph
        networkit graph over all ``N`` vertices
    id_mapper : IDMapper
        Vertex id <-> networkit node id mapping
    """

    graph: nk.Graph
    id_mapper: IDMapper

    @property
    def directed(self) -> bool:
        return self.graph.isDirected()

    @property
    def n_vertices(self) -> int:
        return self.graph.numberOfNodes()

    @property
    def n_edges(self) -> int:
        return self.graph.numberOfEdges()

    def edge_set(self) -> Set[EdgeKey]:
        """Edges of the snapshot as vertex id pairs (``(min, max)`` if undirected)."""
        edges = set()
        for u, v in self.graph.iterEdges():
            source = self.id_mapper.get_original(u)
            target = self.id_mapper.get_original(v)
            if not self.directed and source > target:
                source, target = target, source
            edges.add((source, target))
        return edges

    def has_edge(self, source: int, target: int) -> bool:
        return self.graph.hasEdge(
            self.id_mapper.get_internal(source), self.id_mapper.get_internal(target)
        )


@runtime_checkable
class DynamicNetworkView(Protocol):
    """
    Read-only interface the temporal algorithms consume.

    Implementations must not change while a query is running; the
    algorithms only ever read from the view.
    """

    @property
    def n_vertices(self) -> int: ...

    @property
    def directed(self) -> bool: ...

    @property
    def observation_period(self) -> Tuple[TimePoint, TimePoint]: ...

    @property
    def edge_spells(self) -> Mapping[EdgeKey, Tuple[Spell, ...]]: ...

    @property
    def vertex_spells(self) -> Mapping[int, Tuple[Spell, ...]]: ...

    def extract(
        self,
        at: TimePoint,
        terminus: Optional[TimePoint] = None,
        rule: Union[str, ExtractionRule] = ExtractionRule.ANY
    ) -> Snapshot: ...


class DynamicNetwork:
    """
    Immutable dynamic network over vertices ``1..N``.

    Parameters
    ----------
    n_vertices : int
        Number of vertices ``N``
    directed : bool, default True
        Whether edges are directed. Undirected edge keys are stored as
        ``(min, max)`` and spells given for both orientations are merged.
    edge_spells : Mapping[EdgeKey, Iterable[Spell or (onset, terminus)]], optional
        Activation spells per edge
    vertex_spells : Mapping[int, Iterable[Spell or (onset, terminus)]], optional
        Activation spells per vertex
    observation_period : Tuple[TimePoint, TimePoint], optional
        ``(start, end)``. Defaults to the earliest onset and latest terminus
        over all edge spells, or ``(0, 0)`` without spells.

    Raises
    ------
    ValidationError
        If a vertex id is outside ``[1..N]``, a spell is inverted, or the
        observation period ends before it starts
    ConfigurationError
        If ``n_vertices`` is negative

    Examples
    --------
    >>> net = DynamicNetwork(
    ...     5,
    ...     edge_spells={(1, 2): [(0, 20)], (2, 3): [(10, 40)]},
    ... )
    >>> net.active_edges(15)
    {(1, 2), (2, 3)}
    """

    def __init__(
        self,
        n_vertices: int,
        directed: bool = True,
        edge_spells: Optional[Mapping[EdgeKey, Iterable[SpellInput]]] = None,
        vertex_spells: Optional[Mapping[int, Iterable[SpellInput]]] = None,
        observation_period: Optional[Tuple[TimePoint, TimePoint]] = None
    ) -> None:
        require_positive(n_vertices, "n_vertices", allow_zero=True)

        self._n_vertices = n_vertices
        self._directed = directed

        edges: Dict[EdgeKey, List[Spell]] = {}
        for (source, target), spells in (edge_spells or {}).items():
            validate_vertex_id(source, self._n_vertices, "source")
            validate_vertex_id(target, self._n_vertices, "target")
            key = (source, target)
            if not directed and source > target:
                key = (target, source)
            edges.setdefault(key, []).extend(_as_spell(s) for s in spells)

        vertices: Dict[int, List[Spell]] = {}
        for vertex, spells in (vertex_spells or {}).items():
            validate_vertex_id(vertex, self._n_vertices, "vertex")
            vertices.setdefault(vertex, []).extend(_as_spell(s) for s in spells)

        self._edge_spells = MappingProxyType({k: tuple(v) for k, v in edges.items()})
        self._vertex_spells = MappingProxyType({k: tuple(v) for k, v in vertices.items()})

        if observation_period is None:
            observation_period = self._default_observation_period()
        start, end = observation_period
        if start > end:
            raise ValidationError(
                "Observation period ends before it starts",
                field="observation_period",
                value=observation_period
            )
        self._observation_period = (start, end)

        logger.debug(
            "Built dynamic network: %d vertices, %d edge keys, %d spells, directed=%s",
            n_vertices, len(self._edge_spells),
            sum(len(s) for s in self._edge_spells.values()), directed
        )

    @classmethod
    def from_spell_dataframe(
        cls,
        df: pl.DataFrame,
        n_vertices: Optional[int] = None,
        directed: bool = True,
        observation_period: Optional[Tuple[TimePoint, TimePoint]] = None,
        source_col: str = "source",
        target_col: str = "target",
        onset_col: str = "onset",
        terminus_col: str = "terminus"
    ) -> "DynamicNetwork":
        """
        Build a network from a polars spell table, one row per edge spell.

        Parameters
        ----------
        df : pl.DataFrame
            Spell table with integer vertex columns and numeric time columns
        n_vertices : int, optional
            Number of vertices. Defaults to the largest vertex id in the table.
        directed, observation_period
            As for the constructor
        source_col, target_col, onset_col, terminus_col : str
            Column names

        Returns
        -------
        DynamicNetwork
            The network, with spells in table row order per edge

        Raises
        ------
        ValidationError
            If the table fails validate_spell_dataframe()

        Examples
        --------
        >>> spells = pl.DataFrame({
        ...     "source": [1, 2, 3, 4],
        ...     "target": [2, 3, 4, 5],
        ...     "onset": [0, 10, 30, 50],
        ...     "terminus": [20, 40, 60, 80],
        ... })
        >>> net = DynamicNetwork.from_spell_dataframe(spells)
        >>> net.n_vertices
        5
        """
        validate_spell_dataframe(df, source_col, target_col, onset_col, terminus_col)

        if n_vertices is None:
            if df.is_empty():
                n_vertices = 0
            else:
                n_vertices = int(max(df[source_col].max(), df[target_col].max()))

        edge_spells: Dict[EdgeKey, List[Spell]] = {}
        for source, target, onset, terminus in df.select(
            [source_col, target_col, onset_col, terminus_col]
        ).iter_rows():
            edge_spells.setdefault((source, target), []).append(Spell(onset, terminus))

        logger.info("Loaded %d spells over %d edge keys from DataFrame", len(df), len(edge_spells))

        return cls(
            n_vertices,
            directed=directed,
            edge_spells=edge_spells,
            observation_period=observation_period
        )

    @property
    def n_vertices(self) -> int:
        return self._n_vertices

    @property
    def directed(self) -> bool:
        return self._directed

    @property
    def observation_period(self) -> Tuple[TimePoint, TimePoint]:
        return self._observation_period

    @property
    def edge_spells(self) -> Mapping[EdgeKey, Tuple[Spell, ...]]:
        return self._edge_spells

    @property
    def vertex_spells(self) -> Mapping[int, Tuple[Spell, ...]]:
        return self._vertex_spells

    def active_edges(self, at: TimePoint) -> Set[EdgeKey]:
        """Edge keys with at least one spell active at ``at``."""
        return {
            key for key, spells in self._edge_spells.items()
            if any(spell.is_active(at) for spell in spells)
        }

    def extract(
        self,
        at: TimePoint,
        terminus: Optional[TimePoint] = None,
        rule: Union[str, ExtractionRule] = ExtractionRule.ANY
    ) -> Snapshot:
        """
        Extract the static network at an instant or over an interval.

        Parameters
        ----------
        at : TimePoint
            The instant, or the onset of the interval when ``terminus`` is given
        terminus : TimePoint, optional
            End of the half-open interval ``[at, terminus)``
        rule : {"any", "all"}, default "any"
            For intervals: "any" keeps edges active at some instant of the
            interval, "all" keeps edges with a spell covering all of it

        Returns
        -------
        Snapshot
            networkit graph over all ``N`` vertices plus its id mapping

        Raises
        ------
        ConfigurationError
            If ``rule`` is not "any" or "all"
        """
        rule = coerce_choice(rule, ExtractionRule, "rule", "extract")

        if terminus is None:
            keep = [key for key, spells in self._edge_spells.items()
                    if any(spell.is_active(at) for spell in spells)]
        elif rule is ExtractionRule.ANY:
            keep = [key for key, spells in self._edge_spells.items()
                    if any(spell.overlaps(at, terminus) for spell in spells)]
        else:
            keep = [key for key, spells in self._edge_spells.items()
                    if any(spell.covers(at, terminus) for spell in spells)]

        return build_snapshot(self._n_vertices, self._directed, keep)

    def _default_observation_period(self) -> Tuple[TimePoint, TimePoint]:
        spells = [spell for spells in self._edge_spells.values() for spell in spells]
        if not spells:
            return (0, 0)
        return (min(s.onset for s in spells), max(s.terminus for s in spells))

    def __repr__(self) -> str:
        return (
            f"DynamicNetwork(n_vertices={self._n_vertices}, directed={self._directed}, "
            f"edges={len(self._edge_spells)}, observation_period={self._observation_period})"
        )


def max_possible_edges(n_vertices: int, directed: bool) -> int:
    """Number of distinct non-loop edges: ``N(N-1)`` directed, ``N(N-1)/2`` undirected."""
    n = n_vertices
    return n * (n - 1) if directed else n * (n - 1) // 2


def build_snapshot(
    n_vertices: int,
    directed: bool,
    edges: Iterable[EdgeKey],
    weights: Optional[Sequence[float]] = None
) -> Snapshot:
    """
    Build a networkit snapshot over vertices ``1..n_vertices``.

    Parameters
    ----------
    n_vertices : int
        Number of vertices
    directed : bool
        Whether the graph is directed
    edges : Iterable[EdgeKey]
        Edges in vertex ids; duplicates are added once
    weights : Sequence[float], optional
        One weight per edge; makes the graph weighted

    Returns
    -------
    Snapshot
    """
    id_mapper = IDMapper.for_vertex_count(n_vertices)
    graph = nk.Graph(n_vertices, weighted=weights is not None, directed=directed)

    edges = list(edges)
    for index, (source, target) in enumerate(edges):
        u = id_mapper.get_internal(source)
        v = id_mapper.get_internal(target)
        if graph.hasEdge(u, v):
            continue
        if weights is None:
            graph.addEdge(u, v)
        else:
            graph.addEdge(u, v, float(weights[index]))

    return Snapshot(graph=graph, id_mapper=id_mapper)


def _as_spell(value: SpellInput) -> Spell:
    if isinstance(value, Spell):
        return value
    onset, terminus = value
    return Spell(onset, terminus)
