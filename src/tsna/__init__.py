"""
tsna - Temporal network analysis on dynamic networks.

This package provides time-respecting reachability, temporal paths and
windowed edge stability metrics for networks whose edges are active during
spells of time.

Modules:
    common: Shared utilities for exceptions, validation, id mapping and logging
    network: Dynamic network storage, snapshots and static snapshot measures
    timeseries: Temporal reachability, paths, durations and windowed metrics
"""

__version__ = "0.1.0"

from .common.exceptions import (
    TemporalNetworkError,
    ValidationError,
    ConfigurationError,
    ComputationError,
    InternalConsistencyError,
    DataFormatError
)
from .network.dynamic import DynamicNetwork, DynamicNetworkView, Spell, Snapshot
from .timeseries.reachability import (
    earliest_arrival,
    latest_departure,
    temporal_distance,
    forward_reachable_set,
    backward_reachable_set
)
from .timeseries.paths import TemporalPath, shortest_temporal_path
from .timeseries.duration import t_edge_duration, t_vertex_duration
from .timeseries.windowed import t_edge_persistence, t_turnover, tie_decay
from .timeseries.contacts import as_contact_sequence

__all__ = [
    "TemporalNetworkError",
    "ValidationError",
    "ConfigurationError",
    "ComputationError",
    "InternalConsistencyError",
    "DataFormatError",
    "DynamicNetwork",
    "DynamicNetworkView",
    "Spell",
    "Snapshot",
    "earliest_arrival",
    "latest_departure",
    "temporal_distance",
    "forward_reachable_set",
    "backward_reachable_set",
    "TemporalPath",
    "shortest_temporal_path",
    "t_edge_duration",
    "t_vertex_duration",
    "t_edge_persistence",
    "t_turnover",
    "tie_decay",
    "as_contact_sequence",
]
