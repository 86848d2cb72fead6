"""Tests for logging helpers."""

import logging
from datetime import datetime

import pytest

from todo_app.logging_utils import TRACE_LEVEL, configure_logging, get_logger
from todo_app.task_management.query import TaskQuery, apply_query


@pytest.mark.unit
class TestLoggingUtils:
    """Test trace level registration and configuration."""

    def test_get_logger_adds_trace(self) -> None:
        logger = get_logger("todo_app.test")
        assert hasattr(logger, "trace")
        assert logging.getLevelName(TRACE_LEVEL) == "TRACE"

    @pytest.mark.parametrize(
        ("verbose", "trace", "expected"),
        [
            (False, False, logging.INFO),
            (True, False, logging.DEBUG),
            (False, True, TRACE_LEVEL),
        ],
    )
    def test_configure_logging_levels(
        self, verbose: bool, trace: bool, expected: int
    ) -> None:
        assert configure_logging(verbose=verbose, trace=trace) == expected

    def test_query_pipeline_traces_stages(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(TRACE_LEVEL, logger="todo_app.task_management.query")

        apply_query([], TaskQuery(), datetime(2026, 10, 19))

        trace_records = [r for r in caplog.records if r.levelno == TRACE_LEVEL]
        assert len(trace_records) == 3
