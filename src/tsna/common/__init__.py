"""
Common utilities for the temporal network analysis library.

This module provides shared functionality used across all other modules:
- Custom exception hierarchy
- Input validation for spell tables and parameters
- Vertex id mapping onto networkit node ids
- Logging configuration
"""

from .exceptions import (
    TemporalNetworkError,
    ValidationError,
    ConfigurationError,
    ComputationError,
    InternalConsistencyError,
    DataFormatError,
    validate_parameter,
    require_positive
)

from .id_mapper import IDMapper
from .validators import coerce_choice, validate_spell_dataframe, validate_vertex_id

from .logging_config import (
    setup_logging,
    get_logger,
    log_function_entry,
    log_performance_metric,
    LoggingTimer,
    JSONFormatter,
    PerformanceFilter
)
