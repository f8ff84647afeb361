"""Tests for observability helpers."""

import time

import pytest
from structlog.testing import capture_logs

from curator.core.config import get_settings
from curator.observability import (
    StageTimer,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)
from curator.observability.logger import add_correlation_id, add_service_name


class TestStageTimer:
    """Tests for StageTimer."""

    def test_records_stage(self) -> None:
        timer = StageTimer()
        with timer.stage("fetch"):
            time.sleep(0.02)

        assert timer.get("fetch") >= 15
        assert timer.get("parse") == 0
        assert timer.total_ms >= timer.get("fetch")

    def test_stage_recorded_when_it_raises(self) -> None:
        timer = StageTimer()
        with pytest.raises(ValueError):
            with timer.stage("transform"):
                raise ValueError("bad mapping")

        assert "transform" in timer.durations


class TestLogProcessors:
    """Tests for structlog processors."""

    def test_add_correlation_id(self) -> None:
        set_correlation_id("abc-123")
        try:
            event = add_correlation_id(None, "info", {"event": "x"})  # type: ignore[arg-type]
        finally:
            set_correlation_id("")

        assert event["correlation_id"] == "abc-123"
        assert get_correlation_id() == ""

    def test_add_service_name_uses_settings(self) -> None:
        event = add_service_name(None, "info", {"event": "x"})  # type: ignore[arg-type]
        assert event["service"] == get_settings().service_name == "subgraph-curator"

    def test_add_service_name_keeps_explicit_value(self) -> None:
        event = add_service_name(None, "info", {"event": "x", "service": "worker"})  # type: ignore[arg-type]
        assert event["service"] == "worker"

    def test_events_are_structured(self) -> None:
        with capture_logs() as logs:
            get_logger("test").info("execution.source.completed", source_id="aave", rows=3)

        assert logs == [
            {
                "event": "execution.source.completed",
                "source_id": "aave",
                "rows": 3,
                "log_level": "info",
            }
        ]
