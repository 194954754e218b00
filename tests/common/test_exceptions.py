"""
Tests for the exception hierarchy.

This module tests message formatting, structured details, context handling
and the inheritance relationships of the package exceptions.
"""

import pytest

from tsna.common.exceptions import (
    TemporalNetworkError,
    ValidationError,
    ConfigurationError,
    ComputationError,
    InternalConsistencyError,
    DataFormatError,
    validate_parameter,
    require_positive
)


class TestTemporalNetworkError:
    """Test the base exception."""

    def test_basic_message(self):
        error = TemporalNetworkError("Something failed")
        assert str(error) == "Something failed"
        assert error.message == "Something failed"
        assert error.details == {}
        assert error.context == {}
        assert error.cause is None

    def test_details_in_message(self):
        error = TemporalNetworkError("Bad size", details={"n_vertices": -1})
        assert "Details: n_vertices=-1" in str(error)

    def test_long_collections_are_truncated(self):
        error = TemporalNetworkError("Too many", details={"ids": list(range(200))})
        assert "<list with 200 items>" in str(error)

    def test_cause_is_chained(self):
        cause = RuntimeError("boom")
        error = TemporalNetworkError("Wrapped", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_context_in_message(self):
        error = TemporalNetworkError("Failed", context={"operation": "extract"})
        assert error.context == {"operation": "extract"}
        assert "Context: operation=extract" in str(error)


class TestValidationError:
    """Test validation error formatting."""

    def test_message_with_field(self):
        error = ValidationError("Vertex id out of range", field="source", value=7,
                                expected="integer in [1..5]")
        assert "Validation error in field 'source'" in str(error)
        assert error.field == "source"
        assert error.value == 7
        assert error.details["invalid_value"] == 7
        assert error.details["expected"] == "integer in [1..5]"

    def test_message_without_field(self):
        error = ValidationError("bad input")
        assert str(error).startswith("Validation error: bad input")

    def test_is_base_error(self):
        with pytest.raises(TemporalNetworkError):
            raise ValidationError("bad")


class TestConfigurationError:
    """Test configuration error formatting."""

    def test_valid_options_in_message(self):
        error = ConfigurationError(
            "Invalid aggregation mode",
            parameter="aggregate",
            value="max",
            valid_options=["mean", "median", "total", "all"]
        )
        message = str(error)
        assert "Valid options for 'aggregate'" in message
        assert "median" in message
        assert error.details["invalid_value"] == "max"

    def test_function_recorded(self):
        error = ConfigurationError("bad", parameter="rule", function="extract")
        assert error.function == "extract"
        assert error.details["function"] == "extract"


class TestComputationErrors:
    """Test computation and internal consistency errors."""

    def test_operation_in_context(self):
        error = ComputationError("Eigenvector iteration failed",
                                 operation="t_eigenvector", error_type="numerical")
        assert error.context == {"operation": "t_eigenvector", "error_type": "numerical"}
        assert "Context:" in str(error)

    def test_resource_info_in_details(self):
        error = ComputationError("failed", resource_info={"n_vertices": 10})
        assert error.details["n_vertices"] == 10

    def test_internal_consistency_defaults(self):
        error = InternalConsistencyError("Predecessor chain broken", vertex=4,
                                         operation="reconstruct_path")
        assert isinstance(error, ComputationError)
        assert error.vertex == 4
        assert error.error_type == "consistency"
        assert error.resource_info["vertex"] == 4

    def test_data_format_error_is_validation_error(self):
        error = DataFormatError("wrong type", format_type="numeric", column="onset",
                                dtype="String")
        assert isinstance(error, ValidationError)


class TestHelpers:
    """Test validate_parameter and require_positive."""

    def test_validate_parameter_accepts_option(self):
        validate_parameter("any", ["any", "all"], "rule")

    def test_validate_parameter_rejects(self):
        with pytest.raises(ConfigurationError, match="Invalid value for parameter 'rule'"):
            validate_parameter("some", ["any", "all"], "rule", "extract")

    def test_require_positive(self):
        require_positive(1, "window_size")
        with pytest.raises(ConfigurationError, match="must be positive"):
            require_positive(0, "window_size")

    def test_require_non_negative(self):
        require_positive(0, "n_vertices", allow_zero=True)
        with pytest.raises(ConfigurationError, match="must be non-negative"):
            require_positive(-1, "n_vertices", allow_zero=True)
