# pylint: disable=missing-module-docstring,missing-function-docstring

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import pytest

from observability import logger


def _capture(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    captured: list[str] = []
    monkeypatch.setattr(logger, "_print", captured.append)
    monkeypatch.setattr(logger, "_enabled", True)
    return captured


def test_log_event_emits_valid_jsonl(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """
    Contract:
    - log_event emits exactly one JSONL line
    - caller fields are preserved
    - output sink is patchable
    """
    captured = _capture(monkeypatch)

    payload: dict[str, Any] = {
        "event_type": "TEST",
        "value": 123,
    }

    logger.log_event(payload)

    # Exactly one line emitted
    assert len(captured) == 1
    assert "\n" not in captured[0]

    decoded = json.loads(captured[0])

    # Caller fields preserved, timestamp stamped
    assert {k: decoded[k] for k in payload} == payload
    assert isinstance(decoded["ts_ms"], int)


def test_explicit_ts_ms_is_kept(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch)

    logger.log_event({"event_type": "TEST", "ts_ms": 42})

    assert json.loads(captured[0])["ts_ms"] == 42


def test_enums_and_datetimes_are_stringified(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch)

    class Color(Enum):
        RED = "red"

    logger.log_event({
        "event_type": "TEST",
        "color": Color.RED,
        "at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    })

    decoded = json.loads(captured[0])
    assert "RED" in decoded["color"]
    assert decoded["at"].startswith("2024-01-01")


def test_unserializable_payload_never_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch)

    circular: dict[str, Any] = {"event_type": "TEST"}
    circular["self"] = circular

    logger.log_event(circular)

    decoded = json.loads(captured[0])
    assert decoded["event_type"] == "LOGGER_SERIALIZATION_ERROR"


def test_configure_disables_output(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch)

    logger.configure(enabled=False)
    try:
        logger.log_event({"event_type": "HIDDEN"})
    finally:
        logger.configure(enabled=True)

    logger.log_event({"event_type": "SHOWN"})

    assert [json.loads(line)["event_type"] for line in captured] == ["SHOWN"]
