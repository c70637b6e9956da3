"""
Logging system for PyPolytope.

This module provides:
- Configurable log levels via environment variables
- JSON formatting option
- Timing utilities for the representation conversions
- Invariant assertions that log their location before raising
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

# Type variable for generic function wrapping
F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Log Level Configuration
# =============================================================================

LOG_LEVEL_ENV = "PYPOLYTOPE_LOG_LEVEL"
LOG_FORMAT_ENV = "PYPOLYTOPE_LOG_FORMAT"
LOG_FILE_ENV = "PYPOLYTOPE_LOG_FILE"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "json"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with the message escaped."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def make_formatter(format_str: Optional[str] = None) -> logging.Formatter:
    """Formatter for a format string, or the JSON formatter for JSON_FORMAT."""
    format_str = format_str or get_log_format()
    if format_str == JSON_FORMAT:
        return JsonFormatter()
    return logging.Formatter(format_str)


def get_log_level() -> int:
    """Get log level from environment variable."""
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def get_log_format() -> str:
    """Get log format from environment variable."""
    format_type = os.environ.get(LOG_FORMAT_ENV, "default").lower()
    if format_type == "json":
        return JSON_FORMAT
    return DEFAULT_FORMAT


def get_log_file() -> Optional[str]:
    """Get log file path from environment variable."""
    return os.environ.get(LOG_FILE_ENV)


# =============================================================================
# Logger Setup
# =============================================================================

_root_logger: Optional[logging.Logger] = None
_handlers: list = []


def setup_logging(
    level: Optional[int] = None,
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """Setup the PyPolytope logging system.

    Args:
        level: Log level (default: from env or INFO).
        format_str: Log format string or JSON_FORMAT (default: from env).
        log_file: Optional file to write logs to.
        force: Force reconfiguration even if already setup.

    Returns:
        Configured package logger.
    """
    global _root_logger, _handlers

    if _root_logger is not None and not force:
        return _root_logger

    if _root_logger is not None:
        for handler in _handlers:
            _root_logger.removeHandler(handler)
            handler.close()
    _handlers = []

    _root_logger = logging.getLogger("pypolytope")
    _root_logger.setLevel(level or get_log_level())
    _root_logger.propagate = False

    formatter = make_formatter(format_str)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    _root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    file_path = log_file or get_log_file()
    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        _root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    return _root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (will be prefixed with 'pypolytope.').
              If None, returns the package logger.

    Returns:
        Logger instance.
    """
    if _root_logger is None:
        setup_logging()

    if name:
        return logging.getLogger(f"pypolytope.{name}")
    return _root_logger


# =============================================================================
# Convenience Functions
# =============================================================================


def LOG_DEBUG(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log a debug message."""
    get_logger().debug(msg, *args, **kwargs)


def LOG_INFO(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log an info message."""
    get_logger().info(msg, *args, **kwargs)


def LOG_WARN(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log a warning message."""
    get_logger().warning(msg, *args, **kwargs)


def LOG_ERROR(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log an error message."""
    get_logger().error(msg, *args, **kwargs)


def LOG_CRITICAL(msg: str, *args: Any, **kwargs: Any) -> None:
    """Log a critical message."""
    get_logger().critical(msg, *args, **kwargs)


# =============================================================================
# Performance Profiling
# =============================================================================


@contextmanager
def profile_scope(name: str, log_level: int = logging.DEBUG):
    """Context manager for timing a block of code.

    Args:
        name: Name of the profiled scope.
        log_level: Log level for the timing message.

    Yields:
        None

    Example:
        with profile_scope("gift wrapping"):
            lattice = GiftWrapping(points).construct_face_lattice()
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start_time
        get_logger().log(log_level, f"{name} took {elapsed:.4f}s")


def timed(func: F) -> F:
    """Decorator for timing function execution.

    Args:
        func: Function to time.

    Returns:
        Wrapped function that logs execution time at debug level.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start_time
            get_logger().debug(f"{func.__qualname__} took {elapsed:.4f}s")

    return wrapper  # type: ignore


# =============================================================================
# Assertion with Logging
# =============================================================================


def POLYTOPE_ASSERT(condition: bool, message: str) -> None:
    """Assert a geometric invariant, logging the failing location.

    Args:
        condition: Condition to assert.
        message: Error message if assertion fails.

    Raises:
        AssertionError: If condition is False.
    """
    if not condition:
        import traceback

        stack = traceback.extract_stack()
        if len(stack) >= 2:
            caller = stack[-2]
            location = f"{caller.filename}:{caller.lineno}"
        else:
            location = "unknown"

        LOG_ERROR(f"Assertion failed at {location}: {message}")
        raise AssertionError(message)


# =============================================================================
# Module Initialization
# =============================================================================

setup_logging()
