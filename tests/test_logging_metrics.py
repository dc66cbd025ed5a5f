"""Tests for structured logging and the metrics service."""

import json
import logging
import sys

import pytest

from simrec.api.logging_config import JSONFormatter
from simrec.api.metrics import MetricsService, metrics_service


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="simrec.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    line = JSONFormatter().format(_record("Ranked similar users", user_id=4, num_neighbors=12))
    data = json.loads(line)

    assert data["message"] == "Ranked similar users"
    assert data["level"] == "INFO"
    assert data["logger"] == "simrec.test"
    assert data["user_id"] == 4
    assert data["num_neighbors"] == 12
    assert "args" not in data


def test_json_formatter_handles_non_serializable_values(tmp_path):
    data = json.loads(JSONFormatter().format(_record("Loading", data_dir=tmp_path)))

    assert data["data_dir"] == str(tmp_path)


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed")
        record.exc_info = sys.exc_info()

    data = json.loads(JSONFormatter().format(record))

    assert "ValueError: boom" in data["exception"]


@pytest.fixture
def fresh_metrics():
    metrics_service.reset()
    yield metrics_service
    metrics_service.reset()


def test_metrics_service_is_singleton():
    assert MetricsService() is metrics_service


def test_metrics_record_and_snapshot(fresh_metrics):
    fresh_metrics.record("similar_users", 10.0)
    fresh_metrics.record("similar_users", 30.0)
    fresh_metrics.record("similar_users", 0.0, success=False)

    stats = fresh_metrics.get_metrics()["similar_users"]

    assert stats == {
        "count": 2,
        "errors": 1,
        "average_latency_ms": 20.0,
        "min_latency_ms": 10.0,
        "max_latency_ms": 30.0,
    }


def test_metrics_reset(fresh_metrics):
    fresh_metrics.record("recommended_items", 5.0)
    fresh_metrics.reset()

    assert fresh_metrics.get_metrics() == {}
