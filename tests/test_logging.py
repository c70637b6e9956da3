"""
Tests for the logging helpers.
"""

from __future__ import annotations

import json
import logging

import pytest

from pypolytope.logging import (
    POLYTOPE_ASSERT,
    get_log_format,
    get_log_level,
    get_logger,
    profile_scope,
    setup_logging,
    timed,
    JSON_FORMAT,
    JsonFormatter,
    make_formatter,
)


@pytest.fixture
def debug_logging():
    """Route package logs through pytest's caplog at DEBUG level."""
    logger = setup_logging(level=logging.DEBUG, force=True)
    logger.propagate = True
    yield logger
    setup_logging(force=True)


class TestLogConfiguration:
    """Tests for environment-driven logging configuration."""

    def test_level_from_env(self, monkeypatch):
        """Log level should be read from the environment."""
        monkeypatch.setenv("PYPOLYTOPE_LOG_LEVEL", "debug")
        assert get_log_level() == logging.DEBUG

    def test_unknown_level_defaults_to_info(self, monkeypatch):
        """Unknown level names should fall back to INFO."""
        monkeypatch.setenv("PYPOLYTOPE_LOG_LEVEL", "chatty")
        assert get_log_level() == logging.INFO

    def test_json_format(self, monkeypatch):
        """JSON format should be selectable."""
        monkeypatch.setenv("PYPOLYTOPE_LOG_FORMAT", "json")
        assert get_log_format() == JSON_FORMAT
        assert isinstance(make_formatter(), JsonFormatter)

    def test_json_escapes_quotes(self):
        """Messages with quotes and newlines still produce valid JSON."""
        record = logging.LogRecord(
            "pypolytope.io", logging.WARNING, __file__, 1, 'bad key "f1"\nline two', None, None
        )
        entry = json.loads(JsonFormatter().format(record))
        assert entry["message"] == 'bad key "f1"\nline two'
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "pypolytope.io"

    def test_child_logger_name(self):
        """Named loggers should live under the package logger."""
        assert get_logger("conversion").name == "pypolytope.conversion"
        assert get_logger().name == "pypolytope"


class TestTiming:
    """Tests for timing helpers."""

    def test_profile_scope_logs_duration(self, debug_logging, caplog):
        """profile_scope should log the elapsed time."""
        with caplog.at_level(logging.DEBUG, logger="pypolytope"):
            with profile_scope("wrapping"):
                pass
        assert any("wrapping took" in r.message for r in caplog.records)

    def test_timed_returns_result(self, debug_logging, caplog):
        """timed should pass the return value through and log the call."""

        @timed
        def double(x):
            return 2 * x

        with caplog.at_level(logging.DEBUG, logger="pypolytope"):
            assert double(4) == 8
        assert any("double took" in r.message for r in caplog.records)


class TestAssert:
    """Tests for POLYTOPE_ASSERT."""

    def test_passes(self):
        """A true condition should not raise."""
        POLYTOPE_ASSERT(True, "never shown")

    def test_raises_and_logs(self, debug_logging, caplog):
        """A false condition should log and raise AssertionError."""
        with caplog.at_level(logging.ERROR, logger="pypolytope"):
            with pytest.raises(AssertionError, match="broken invariant"):
                POLYTOPE_ASSERT(False, "broken invariant")
        assert any("Assertion failed" in r.message for r in caplog.records)
