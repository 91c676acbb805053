"""
Navigation side-effect dispatch.

Delivers a resolved NavigationTarget to the screen-composition layer.
Delivery is scheduled on the event loop, never run inline, so the turn that
resolved the target completes first.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable

from intent.categories import NavigationTarget
from observability.logger import log_event


NavigationSink = Callable[[NavigationTarget], Awaitable[None] | None]


class NavigationDispatcher:
    """
    Notifies a single-argument sink of navigation targets.

    NONE and unknown targets are no-ops. Sink failures are logged and never
    reach the caller.
    """

    def __init__(
        self,
        sink: NavigationSink | None = None,
        *,
        session_id: str | None = None,
    ) -> None:
        self._sink = sink
        self._session_id = session_id
        self._tasks: set[asyncio.Task[Any]] = set()

    def dispatch(self, target: NavigationTarget | str | None) -> bool:
        """
        Schedule delivery of target.

        Returns True if delivery was scheduled.
        """
        resolved = _coerce(target)
        if resolved is None or resolved is NavigationTarget.NONE or self._sink is None:
            return False

        asyncio.get_running_loop().call_soon(self._deliver, resolved)
        log_event({
            "event_type": "NAVIGATION_SCHEDULED",
            "session_id": self._session_id,
            "target": resolved.value,
        })
        return True

    async def drain(self) -> None:
        """Let scheduled deliveries (including async sinks) run to completion."""
        await asyncio.sleep(0)
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _deliver(self, target: NavigationTarget) -> None:
        assert self._sink is not None
        try:
            result = self._sink(target)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log_failure(target, exc)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(self._await_sink(target, result))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _await_sink(self, target: NavigationTarget, pending: Awaitable[Any]) -> None:
        try:
            await pending
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log_failure(target, exc)

    def _log_failure(self, target: NavigationTarget, exc: Exception) -> None:
        log_event({
            "event_type": "NAVIGATION_SINK_ERROR",
            "session_id": self._session_id,
            "target": target.value,
            "exception": type(exc).__name__,
            "message": str(exc),
        })


def _coerce(target: NavigationTarget | str | None) -> NavigationTarget | None:
    if target is None or isinstance(target, NavigationTarget):
        return target
    try:
        return NavigationTarget(target)
    except ValueError:
        return None
