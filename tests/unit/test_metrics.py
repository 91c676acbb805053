# pylint: disable=missing-module-docstring,missing-function-docstring

import json

import pytest

from observability import logger, metrics


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    lines: list[str] = []
    monkeypatch.setattr(logger, "_print", lines.append)
    return lines


def test_timed_emits_one_metric(monkeypatch: pytest.MonkeyPatch, captured: list[str]) -> None:
    ticks = iter([1_000_000_000, 1_250_000_000])
    monkeypatch.setattr(metrics.time, "monotonic_ns", lambda: next(ticks, 1_250_000_000))

    with metrics.timed("reply_latency", session_id="sess_x", details={"turn": 1}):
        assert captured == []

    assert len(captured) == 1

    event = json.loads(captured[0])
    assert event["event_type"] == "METRIC_TIMER"
    assert event["metric"] == "reply_latency"
    assert event["value_ms"] == 250
    assert event["session_id"] == "sess_x"
    assert event["details"] == {"turn": 1}


def test_timed_emits_when_block_raises(captured: list[str]) -> None:
    with pytest.raises(ValueError):
        with metrics.timed("reply_latency"):
            raise ValueError("boom")

    assert len(captured) == 1
    event = json.loads(captured[0])
    assert event["session_id"] is None
    assert event["details"] == {}
    assert event["value_ms"] >= 0
