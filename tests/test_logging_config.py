"""Tests for the structured logging helpers."""

import json
import logging

from mealplanner.logging_config import (
    ContextualFormatter,
    LoggingContext,
    StructuredJsonFormatter,
    plan_id_ctx,
)


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("mealplanner.test", logging.INFO, __file__, 10, message, None, None)


class TestLoggingContext:
    """Tests for LoggingContext."""

    def test_sets_and_resets(self):
        """Test values are only visible inside the block."""
        with LoggingContext(plan_id="plan-1", day="Monday"):
            assert plan_id_ctx.get() == "plan-1"
        assert plan_id_ctx.get() is None

    def test_nested_blocks(self):
        """Test an inner block adds to the outer context and restores it."""
        with LoggingContext(plan_id="plan-1"):
            with LoggingContext(day="Tuesday"):
                data = json.loads(StructuredJsonFormatter().format(_record()))
                assert data["plan_id"] == "plan-1"
                assert data["day"] == "Tuesday"
            data = json.loads(StructuredJsonFormatter().format(_record()))
            assert "day" not in data


class TestFormatters:
    """Tests for the log formatters."""

    def test_json_format(self):
        data = json.loads(StructuredJsonFormatter().format(_record("generated")))
        assert data["message"] == "generated"
        assert data["level"] == "INFO"
        assert data["logger"] == "mealplanner.test"

    def test_contextual_format(self):
        with LoggingContext(request_id="0123456789abcdef", day="Friday"):
            line = ContextualFormatter().format(_record())
        assert "[req=01234567, day=Friday]" in line
        assert line.endswith("| hello")
