"""
Tests for exception hierarchy.
"""

from __future__ import annotations

import pytest

from pypolytope.exceptions import (
    PolytopeError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
    ConversionError,
    InfeasibleSystemError,
    UnboundedPolytopeError,
    SolverFailedError,
    RepresentationError,
    InvalidInputError,
    DimensionMismatchError,
    FormatError,
)


class TestPolytopeError:
    """Tests for base PolytopeError."""

    def test_basic_message(self):
        """Should store and return message."""
        error = PolytopeError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"

    def test_message_with_details(self):
        """Should include details in string representation."""
        error = PolytopeError("Test error", details={"key": "value"})
        assert "key=value" in str(error)
        assert error.details == {"key": "value"}

    def test_can_be_raised(self):
        """Should be raiseable."""
        with pytest.raises(PolytopeError):
            raise PolytopeError("Test error")


class TestConfigurationErrors:
    """Tests for configuration-related errors."""

    def test_config_not_found(self):
        """ConfigNotFoundError should include path."""
        error = ConfigNotFoundError("/path/to/config.yml")
        assert "/path/to/config.yml" in str(error)
        assert error.details["path"] == "/path/to/config.yml"

    def test_config_validation_error(self):
        """ConfigValidationError should include key and reason."""
        error = ConfigValidationError("tolerance.eps", "must be in (0, 1)", value=-1)
        assert "tolerance.eps" in str(error)
        assert error.details["key"] == "tolerance.eps"
        assert error.details["value"] == "-1"

    def test_inheritance(self):
        """Configuration errors should inherit from ConfigurationError."""
        assert issubclass(ConfigNotFoundError, ConfigurationError)
        assert issubclass(ConfigValidationError, ConfigurationError)
        assert issubclass(ConfigurationError, PolytopeError)


class TestConversionErrors:
    """Tests for conversion errors."""

    def test_infeasible(self):
        """InfeasibleSystemError should record the system size."""
        error = InfeasibleSystemError(4)
        assert error.details["hyperplanes"] == 4
        assert "infeasible" in str(error)

    def test_unbounded_direction(self):
        """UnboundedPolytopeError should record the escape direction."""
        error = UnboundedPolytopeError(direction=(1.0, 0.0))
        assert error.details["direction"] == [1.0, 0.0]

    def test_unbounded_without_direction(self):
        """UnboundedPolytopeError should work without a direction."""
        assert UnboundedPolytopeError().details == {}

    def test_solver_failed(self):
        """SolverFailedError should include reason and status."""
        error = SolverFailedError("iteration limit", status=1)
        assert "iteration limit" in str(error)
        assert error.details["status"] == 1

    def test_inheritance(self):
        """Conversion errors should share a base class."""
        for cls in (InfeasibleSystemError, UnboundedPolytopeError, SolverFailedError):
            assert issubclass(cls, ConversionError)
        assert issubclass(ConversionError, PolytopeError)


class TestInputErrors:
    """Tests for input and representation errors."""

    def test_representation_error(self):
        """RepresentationError should name the representation."""
        error = RepresentationError("H-representation", "not full-dimensional")
        assert "H-representation" in str(error)

    def test_dimension_mismatch(self):
        """DimensionMismatchError should record both dimensions."""
        error = DimensionMismatchError("point", 3, 2)
        assert error.details["expected"] == 3
        assert error.details["actual"] == 2
        assert isinstance(error, InvalidInputError)

    def test_format_error_key(self):
        """FormatError should record the offending key."""
        error = FormatError("missing key", key="vertices")
        assert error.details["key"] == "vertices"
        assert isinstance(error, PolytopeError)
