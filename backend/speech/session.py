"""
Runtime execution shell for one speech capture session.

Responsibilities:
- Own the speech snapshot
- Call the pure reducer
- Execute commands with side effects (capability calls, timers, listeners)
- Convert timer expiry and capability callbacks into events

Non-responsibilities:
- No transition rules (see speech.reducer)
- No conversation logic; transcripts and errors go to listeners
"""

from __future__ import annotations

import asyncio
import inspect
from collections import deque
from functools import partial
from typing import Any, Awaitable, Callable

from constants import ms_to_seconds
from observability.logger import log_event, now_ms
from speech.capability import (
    CapabilitySignal,
    RecognitionConfig,
    SignalKind,
    SpeechCapability,
)
from speech.commands import (
    AbortCapture,
    CancelTimer,
    Command,
    EmitError,
    EmitTranscript,
    LogEvent,
    StartCapture,
    StartTimer,
    StopCapture,
)
from speech.enums.state import SpeechState
from speech.errors import CapabilityUnsupported, RecognitionErrorKind, kind_from_code
from speech.events import (
    CaptureEnded,
    CaptureError,
    CaptureResult,
    CaptureStartFailed,
    CaptureStarted,
    Event,
    EventType,
    ListenTimeout,
    ResetRequested,
    StartRequested,
    StopRequested,
    Teardown,
    TranscriptCleared,
)
from speech.language import resolve_language_tag
from speech.reducer import reduce
from speech.state_dataclass import SpeechSnapshot


TranscriptListener = Callable[[str], Awaitable[None] | None]
ErrorListener = Callable[[RecognitionErrorKind, str], Awaitable[None] | None]
StateListener = Callable[[SpeechState], None]


class SpeechSession:
    """
    Execution boundary for a single speech capture capability.

    Guarantees:
    - Reducer is called exactly once per event, in arrival order, even when
      a capability calls back synchronously from inside start()/stop()
    - State is updated before any command executes
    - At most one listen timer exists at any time
    - close() (or leaving `async with`) cancels the timer and aborts the
      capability on every exit path

    Listener callbacks may be plain functions or coroutine functions;
    coroutines are scheduled as tasks and can be awaited with flush().
    """

    def __init__(
        self,
        capability: SpeechCapability,
        *,
        language: str | None = None,
        session_id: str | None = None,
        on_transcript: TranscriptListener | None = None,
        on_error: ErrorListener | None = None,
    ) -> None:
        self._capability = capability
        self._session_id = session_id
        self._supported = capability.is_supported()

        self._state = SpeechSnapshot(language_tag=resolve_language_tag(language))

        self._transcript_listeners: list[TranscriptListener] = []
        self._error_listeners: list[ErrorListener] = []
        self._state_listeners: list[StateListener] = []
        if on_transcript is not None:
            self._transcript_listeners.append(on_transcript)
        if on_error is not None:
            self._error_listeners.append(on_error)

        self._timers: dict[str, asyncio.Task[None]] = {}
        self._notifications: set[asyncio.Task[Any]] = set()

        self._inbox: deque[Event] = deque()
        self._dispatching = False

        if not self._supported:
            log_event({
                "event_type": "SPEECH_CAPABILITY_UNSUPPORTED",
                "session_id": self._session_id,
            })

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def state(self) -> SpeechSnapshot:
        """Current immutable snapshot. Never mutate; only the reducer does."""
        return self._state

    @property
    def is_supported(self) -> bool:
        return self._supported

    @property
    def is_listening(self) -> bool:
        return self._state.state is SpeechState.LISTENING

    @property
    def transcript(self) -> str:
        return self._state.transcript

    @property
    def error(self) -> str | None:
        return self._state.error_message

    @property
    def has_pending_timer(self) -> bool:
        return any(not t.done() for t in self._timers.values())

    # ------------------------------------------------------------------
    # Listener wiring
    # ------------------------------------------------------------------

    def add_transcript_listener(self, listener: TranscriptListener) -> None:
        self._transcript_listeners.append(listener)

    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    def add_state_listener(self, listener: StateListener) -> None:
        """Called synchronously whenever IDLE <-> LISTENING flips."""
        self._state_listeners.append(listener)

    # ------------------------------------------------------------------
    # Caller control
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """
        Begin a listening attempt.

        Raises:
            CapabilityUnsupported if the device cannot capture speech.

        No-op (logged) when already listening.
        """
        if not self._supported:
            raise CapabilityUnsupported()
        self._dispatch(StartRequested(event_type=EventType.START_REQUESTED, ts_ms=now_ms()))

    async def stop(self) -> None:
        """Finish listening gracefully. No-op when idle."""
        self._dispatch(StopRequested(event_type=EventType.STOP_REQUESTED, ts_ms=now_ms()))

    async def reset(self) -> None:
        """Cancel listening silently and forget the last outcome."""
        self._dispatch(ResetRequested(event_type=EventType.RESET_REQUESTED, ts_ms=now_ms()))

    def reset_transcript(self) -> None:
        """Clear the stored transcript and error. Never touches the capability."""
        self._dispatch(
            TranscriptCleared(event_type=EventType.TRANSCRIPT_CLEARED, ts_ms=now_ms())
        )

    async def close(self) -> None:
        """
        Release the capability.

        Aborts an in-flight attempt, cancels all timers and pending listener
        tasks, and waits for them to finish. Idempotent.
        """
        self._dispatch(Teardown(event_type=EventType.TEARDOWN, ts_ms=now_ms()))

        for timer_id in list(self._timers.keys()):
            self._cancel_timer(timer_id)

        pending = list(self._notifications)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._transcript_listeners.clear()
        self._error_listeners.clear()
        self._state_listeners.clear()

    async def flush(self) -> None:
        """Wait for listener tasks scheduled so far (e.g. a running turn)."""
        while self._notifications:
            await asyncio.gather(*list(self._notifications), return_exceptions=True)

    async def __aenter__(self) -> SpeechSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Capability callbacks
    # ------------------------------------------------------------------

    def _on_signal(self, attempt_id: int, signal: CapabilitySignal) -> None:
        """Translate a raw capability signal into an attempt-scoped event."""
        ts_ms = now_ms()
        event: Event

        if signal.kind is SignalKind.STARTED:
            event = CaptureStarted(
                event_type=EventType.CAPTURE_STARTED,
                ts_ms=ts_ms,
                attempt_id=attempt_id,
            )
        elif signal.kind is SignalKind.RESULT:
            event = CaptureResult(
                event_type=EventType.CAPTURE_RESULT,
                ts_ms=ts_ms,
                attempt_id=attempt_id,
                text=signal.text or "",
            )
        elif signal.kind is SignalKind.ERROR:
            event = CaptureError(
                event_type=EventType.CAPTURE_ERROR,
                ts_ms=ts_ms,
                attempt_id=attempt_id,
                kind=kind_from_code(signal.error_code),
            )
        else:
            event = CaptureEnded(
                event_type=EventType.CAPTURE_ENDED,
                ts_ms=ts_ms,
                attempt_id=attempt_id,
            )

        self._dispatch(event)

    # ------------------------------------------------------------------
    # Event entry point
    # ------------------------------------------------------------------

    def _dispatch(self, event: Event) -> None:
        """
        Single entry point for every event affecting the snapshot.

        Re-entrant calls (a capability calling back from inside a command)
        are queued and processed after the current event's commands.
        """
        self._inbox.append(event)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._inbox:
                current = self._inbox.popleft()
                previous = self._state.state
                new_state, commands = reduce(self._state, current)
                self._state = new_state
                for cmd in commands:
                    self._execute_command(cmd)
                if new_state.state is not previous:
                    for listener in list(self._state_listeners):
                        listener(new_state.state)
        finally:
            self._dispatching = False

    # ------------------------------------------------------------------
    # Command execution (side effects)
    # ------------------------------------------------------------------

    def _execute_command(self, cmd: Command) -> None:
        if isinstance(cmd, LogEvent):
            log_event({**cmd.event, "session_id": self._session_id})

        elif isinstance(cmd, StartTimer):
            self._start_timer(
                timer_id=cmd.timer_id,
                duration_ms=cmd.duration_ms,
                attempt_id=cmd.attempt_id,
            )

        elif isinstance(cmd, CancelTimer):
            self._cancel_timer(cmd.timer_id)

        elif isinstance(cmd, StartCapture):
            self._start_capture(cmd)

        elif isinstance(cmd, StopCapture):
            self._capability.stop()

        elif isinstance(cmd, AbortCapture):
            self._capability.abort()

        elif isinstance(cmd, EmitTranscript):
            for listener in list(self._transcript_listeners):
                self._notify(listener, cmd.text)

        elif isinstance(cmd, EmitError):
            for error_listener in list(self._error_listeners):
                self._notify(error_listener, cmd.kind, cmd.message)

        else:
            raise TypeError(f"Unknown speech command: {cmd!r}")

    def _start_capture(self, cmd: StartCapture) -> None:
        config = RecognitionConfig(language_tag=cmd.language_tag)
        try:
            self._capability.start(config, partial(self._on_signal, cmd.attempt_id))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "event_type": "CAPTURE_START_RAISED",
                "session_id": self._session_id,
                "attempt_id": cmd.attempt_id,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            self._dispatch(
                CaptureStartFailed(
                    event_type=EventType.CAPTURE_START_FAILED,
                    ts_ms=now_ms(),
                    attempt_id=cmd.attempt_id,
                    reason=type(exc).__name__,
                )
            )

    def _notify(self, listener: Callable[..., Any], *args: Any) -> None:
        result = listener(*args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._notifications.add(task)
            task.add_done_callback(self._notifications.discard)

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _start_timer(self, *, timer_id: str, duration_ms: int, attempt_id: int) -> None:
        """
        Start or replace a timer that injects ListenTimeout on expiry.

        Timer tasks re-enter _dispatch(), keeping the single entry point.
        """
        self._cancel_timer(timer_id)

        async def _timer_task() -> None:
            try:
                await asyncio.sleep(ms_to_seconds(duration_ms))
            except asyncio.CancelledError:
                # Timer was cancelled - this is normal
                return

            self._timers.pop(timer_id, None)
            self._dispatch(
                ListenTimeout(
                    event_type=EventType.LISTEN_TIMEOUT,
                    ts_ms=now_ms(),
                    attempt_id=attempt_id,
                )
            )

        self._timers[timer_id] = asyncio.create_task(_timer_task())

    def _cancel_timer(self, timer_id: str) -> None:
        """Idempotent: safe to call even if the timer doesn't exist."""
        task = self._timers.pop(timer_id, None)
        if task is not None and not task.done():
            task.cancel()
