"""
PyPolytope Exception Hierarchy.

This module defines all custom exceptions used in the PyPolytope package.
Errors fall into four groups:
- Configuration errors (loading and validating settings)
- Conversion errors (infeasible or unbounded inequality systems, LP failures)
- Representation and input errors (asking for something the polytope cannot give)
- Format errors (reading the textual polytope format)
"""

from typing import Any, Optional


class PolytopeError(Exception):
    """Base exception for all PyPolytope errors.

    All custom exceptions in PyPolytope inherit from this class, so every
    error raised by the package can be caught with a single except clause.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PolytopeError):
    """Error in configuration loading or validation."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Configuration file not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found: {config_path}",
            details={"path": config_path},
        )


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed."""

    def __init__(self, key: str, reason: str, value: Any = None):
        details = {"key": key, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            details=details,
        )


# =============================================================================
# Conversion Errors
# =============================================================================


class ConversionError(PolytopeError):
    """Base class for errors raised while converting between representations."""

    pass


class InfeasibleSystemError(ConversionError):
    """The half-space system has an empty feasible region."""

    def __init__(self, num_hyperplanes: Optional[int] = None):
        details = {}
        if num_hyperplanes is not None:
            details["hyperplanes"] = num_hyperplanes
        super().__init__(
            "The system of half-spaces is infeasible",
            details=details,
        )


class UnboundedPolytopeError(ConversionError):
    """The half-space system does not describe a bounded region."""

    def __init__(self, direction: Optional[Any] = None):
        details = {}
        if direction is not None:
            details["direction"] = list(direction)
        super().__init__(
            "The system of half-spaces does not define a bounded polytope",
            details=details,
        )


class SolverFailedError(ConversionError):
    """The linear programming solver did not return a usable point."""

    def __init__(self, reason: str = "Unknown", status: Optional[int] = None):
        details = {"reason": reason}
        if status is not None:
            details["status"] = status
        super().__init__(
            f"LP solver failed to find a feasible point: {reason}",
            details=details,
        )


# =============================================================================
# Representation and Input Errors
# =============================================================================


class RepresentationError(PolytopeError):
    """A requested representation cannot be derived from the polytope."""

    def __init__(self, representation: str, reason: str):
        super().__init__(
            f"Cannot build {representation}: {reason}",
            details={"representation": representation, "reason": reason},
        )


class InvalidInputError(PolytopeError):
    """Invalid argument passed to a geometric operation."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            f"Invalid input '{name}': {reason}",
            details={"input": name, "reason": reason},
        )


class DimensionMismatchError(InvalidInputError):
    """Points, vectors or hyperplanes live in spaces of different dimension."""

    def __init__(self, name: str, expected: int, actual: int):
        super().__init__(name, f"expected dimension {expected}, got {actual}")
        self.details["expected"] = expected
        self.details["actual"] = actual


# =============================================================================
# Format Errors
# =============================================================================


class FormatError(PolytopeError):
    """Malformed polytope description in the textual format."""

    def __init__(self, reason: str, key: Optional[str] = None):
        details = {"reason": reason}
        if key is not None:
            details["key"] = key
        super().__init__(
            f"Malformed polytope description: {reason}",
            details=details,
        )
