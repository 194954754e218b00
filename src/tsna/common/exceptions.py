"""
Exceptions raised by the temporal network analysis library.

Bad arguments are rejected before any computation starts. Failures found
during a computation carry the name of the failed operation and, when there
is one, the underlying cause.

An unreachable vertex is never an error: a missing temporal path or arrival
time is returned as ``None``.
"""

from typing import Dict, Any, Optional, List, Union


class TemporalNetworkError(Exception):
    """
    Root of the package's exceptions.

    Parameters
    ----------
    message : str
        What went wrong
    details : Dict[str, Any], optional
        Structured facts about the failing input, appended to the message
    cause : Exception, optional
        Exception that triggered this one; set as ``__cause__``
    context : Dict[str, Any], optional
        Facts about the running operation, appended to the message
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.details = details or {}
        self.cause = cause
        self.context = context or {}

        text = message
        if self.details:
            text += f" (Details: {_format_pairs(self.details)})"
        if self.context:
            text += f" (Context: {_format_pairs(self.context)})"
        super().__init__(text)

        if cause is not None:
            self.__cause__ = cause


def _format_pairs(values: Dict[str, Any]) -> str:
    parts = []
    for key, value in values.items():
        # Spell lists and vertex sets can be huge; show their size only
        if isinstance(value, (list, dict, set, tuple)) and len(str(value)) > 100:
            parts.append(f"{key}=<{type(value).__name__} with {len(value)} items>")
        else:
            parts.append(f"{key}={value}")
    return ", ".join(parts)


class ValidationError(TemporalNetworkError):
    """
    Malformed input data.

    Raised for inverted spells, vertex ids outside ``[1..N]``, temporal
    paths with inconsistent sequence lengths, and spell tables with missing
    columns or nulls.

    Examples
    --------
    >>> raise ValidationError(
    ...     "Vertex id out of range",
    ...     field="source",
    ...     value=7,
    ...     expected="integer in [1..5]"
    ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected

        details = details or {}
        if field is not None:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = value
        if expected is not None:
            details["expected"] = expected

        prefix = f"Validation error in field '{field}'" if field else "Validation error"
        super().__init__(f"{prefix}: {message}", details=details, **kwargs)


class DataFormatError(ValidationError):
    """Spell table column with the wrong data type."""

    def __init__(
        self,
        message: str,
        format_type: Optional[str] = None,
        column: Optional[str] = None,
        dtype: Optional[str] = None,
        **kwargs
    ) -> None:
        details = kwargs.pop("details", None) or {}
        if format_type:
            details["format_type"] = format_type
        if column:
            details["column"] = column
        if dtype is not None:
            details["dtype"] = dtype
        super().__init__(message, details=details, **kwargs)


class ConfigurationError(TemporalNetworkError):
    """
    Invalid parameter value.

    Covers unknown aggregation modes, decay methods, statistic names,
    extraction rules and degree modes, and non-positive window sizes.
    When ``valid_options`` is given, the options are listed in the message.
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        value: Optional[Any] = None,
        valid_options: Optional[List[Any]] = None,
        function: Optional[str] = None,
        **kwargs
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.valid_options = valid_options
        self.function = function

        details = kwargs.pop("details", None) or {}
        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["invalid_value"] = value
        if valid_options:
            details["valid_options"] = valid_options
        if function:
            details["function"] = function

        if parameter and valid_options:
            message += f". Valid options for '{parameter}': {valid_options}"
        super().__init__(message, details=details, **kwargs)


class ComputationError(TemporalNetworkError):
    """
    A computation failed.

    Wraps errors raised by networkit while computing snapshot measures.

    Parameters
    ----------
    message : str
        Description of the failure
    operation : str, optional
        Name of the failed operation
    error_type : str, optional
        Kind of failure, e.g. "numerical" or "consistency"
    resource_info : Dict[str, Any], optional
        Inputs involved, merged into ``details``
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_type: Optional[str] = None,
        resource_info: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.operation = operation
        self.error_type = error_type
        self.resource_info = resource_info or {}

        context = {}
        if operation:
            context["operation"] = operation
        if error_type:
            context["error_type"] = error_type

        details = kwargs.pop("details", None) or {}
        details.update(self.resource_info)
        super().__init__(message, details=details, context=context, **kwargs)


class InternalConsistencyError(ComputationError):
    """
    Solver state contradicts itself.

    Raised when a predecessor chain breaks or loops before reaching the
    source although the arrival table marks the target as reached. It means
    the solver or its table is wrong, so nothing in the package catches it.

    Examples
    --------
    >>> raise InternalConsistencyError(
    ...     "Predecessor chain broken",
    ...     vertex=4,
    ...     operation="reconstruct_path"
    ... )
    """

    def __init__(
        self,
        message: str,
        vertex: Optional[int] = None,
        **kwargs
    ) -> None:
        self.vertex = vertex
        resource_info = kwargs.pop("resource_info", None) or {}
        if vertex is not None:
            resource_info["vertex"] = vertex
        kwargs.setdefault("error_type", "consistency")
        super().__init__(message, resource_info=resource_info, **kwargs)


def validate_parameter(
    value: Any,
    valid_options: List[Any],
    parameter_name: str,
    function_name: Optional[str] = None
) -> None:
    """Raise ConfigurationError unless ``value`` is one of ``valid_options``."""
    if value not in valid_options:
        raise ConfigurationError(
            f"Invalid value for parameter '{parameter_name}': {value}",
            parameter=parameter_name,
            value=value,
            valid_options=valid_options,
            function=function_name
        )


def require_positive(
    value: Union[int, float],
    parameter_name: str,
    allow_zero: bool = False
) -> None:
    """
    Raise ConfigurationError unless ``value`` is positive.

    With ``allow_zero`` the check is for non-negative values instead.
    """
    if allow_zero and value < 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be non-negative, got {value}",
            parameter=parameter_name,
            value=value
        )
    if not allow_zero and value <= 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be positive, got {value}",
            parameter=parameter_name,
            value=value
        )
