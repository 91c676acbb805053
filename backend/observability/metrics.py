"""
Reply timing.

One measured block produces one METRIC_TIMER log event. Durations come from
the monotonic clock; the event's ts_ms is wall-clock.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from observability.logger import log_event, now_ms


@contextmanager
def timed(
    name: str,
    *,
    session_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> Iterator[None]:
    """
    Time the enclosed block and log it as `name`.

    The event is emitted even when the block raises; the exception propagates.

        with timed("reply_latency", session_id=controller.session_id):
            reply = await generator.generate(intent, language)
    """
    start_ns = time.monotonic_ns()
    try:
        yield
    finally:
        log_event({
            "ts_ms": now_ms(),
            "event_type": "METRIC_TIMER",
            "metric": name,
            "value_ms": (time.monotonic_ns() - start_ns) // 1_000_000,
            "session_id": session_id,
            "details": details or {},
        })
