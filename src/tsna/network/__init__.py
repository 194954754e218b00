"""
Dynamic network storage, snapshot extraction and snapshot measures.
"""

from .dynamic import (
    TimePoint,
    EdgeKey,
    Spell,
    ExtractionRule,
    Snapshot,
    DynamicNetworkView,
    DynamicNetwork,
    build_snapshot,
    max_possible_edges
)

from .measures import (
    DegreeMode,
    SnaStatistic,
    AggregationMethod,
    t_degree,
    t_density,
    t_reciprocity,
    t_transitivity,
    t_betweenness,
    t_closeness,
    t_eigenvector,
    t_pagerank,
    t_sna_stats,
    window_sna_stats,
    t_aggregate
)
