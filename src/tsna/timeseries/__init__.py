"""
Temporal analysis of dynamic networks.

This module provides:
- Edge event streams ordered for forward and backward queries
- Earliest arrival and latest departure solvers with reachable sets
- Temporal path reconstruction
- Edge and vertex duration statistics
- Windowed persistence, turnover and tie decay
- Contact sequences
"""

from .events import Direction, EdgeEvent, build_edge_events

from .reachability import (
    EarliestArrivalTable,
    LatestDepartureTable,
    earliest_arrival,
    latest_departure,
    temporal_distance,
    forward_reachable_set,
    backward_reachable_set
)

from .paths import TemporalPath, reconstruct_path, shortest_temporal_path

from .duration import (
    DurationAggregate,
    edge_durations,
    vertex_durations,
    spell_durations,
    aggregate_durations,
    t_edge_duration,
    t_vertex_duration
)

from .windowed import (
    TurnoverResult,
    DecayMethod,
    window_count,
    window_boundaries,
    t_edge_persistence,
    t_turnover,
    tie_decay
)

from .contacts import Contact, ContactSequence, as_contact_sequence
