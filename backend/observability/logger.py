"""
JSONL event logger.

- Write one JSON object per line
- Output to stdout
- No buffering, no batching
- No side effects beyond logging
"""

from __future__ import annotations

import json
import sys
import time
from typing import Any, Mapping, Callable


# ------------------------------------------------------------------
# Explicit output sink (patchable in tests)
# ------------------------------------------------------------------

def _stdout_print(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()

_print: Callable[[str], None] = _stdout_print

_enabled: bool = True


def configure(*, enabled: bool) -> None:
    """Enable or silence event output (ENABLE_JSON_LOGS)."""
    global _enabled  # pylint: disable=global-statement
    _enabled = enabled


def now_ms() -> int:
    """Wall-clock milliseconds for event timestamps."""
    return time.time_ns() // 1_000_000


def log_event(event: Mapping[str, Any]) -> None:
    """
    Write a single JSONL event to stdout.

    The caller supplies event_type and any session context.
    A missing ts_ms is stamped here.

    This function:
    - Serializes to JSON (enums and datetimes via str())
    - Writes exactly one line
    - Flushes immediately (no buffering)
    - Never raises
    """
    if not _enabled:
        return

    payload = dict(event)
    payload.setdefault("ts_ms", now_ms())

    try:
        line = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)
    except (TypeError, ValueError) as e:
        # Last-resort fallback, logging must never crash the caller
        fallback: dict[str, Any] = {
            "ts_ms": payload.get("ts_ms"),
            "event_type": "LOGGER_SERIALIZATION_ERROR",
            "error": str(e),
            "original_event_repr": repr(event),
        }
        line = json.dumps(fallback, ensure_ascii=False, separators=(",", ":"))

    _print(line)
