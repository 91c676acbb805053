"""
Pure speech session reducer.

(state, event) -> (new_state, commands)

Rules:
- Pure: no side effects, no IO, no clocks.
- Deterministic: output depends only on inputs.
- Total: every (state, event) pair is handled or explicitly ignored (logged).

Edges:
    IDLE      --START_REQUESTED-->  LISTENING
    LISTENING --CAPTURE_RESULT-->   IDLE  (emit transcript, blank text ignored)
    LISTENING --CAPTURE_ERROR-->    IDLE  (emit error unless ABORTED)
    LISTENING --CAPTURE_ENDED-->    IDLE
    LISTENING --LISTEN_TIMEOUT-->   IDLE  (stop capture, no error)
    LISTENING --STOP_REQUESTED-->   IDLE  (stop capture)
    LISTENING --RESET_REQUESTED-->  IDLE  (abort capture, clear outcome)
    LISTENING --TEARDOWN-->         IDLE  (abort capture)
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from constants import CAPTURE_START_FAILED_MESSAGE, SPEECH_LISTEN_TIMEOUT_MS
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
from speech.enums.end_reason import EndReason
from speech.enums.state import SpeechState
from speech.errors import RecognitionErrorKind, user_message
from speech.events import (
    AttemptEvent,
    CaptureEnded,
    CaptureError,
    CaptureResult,
    CaptureStartFailed,
    CaptureStarted,
    Event,
    ListenTimeout,
    ResetRequested,
    StartRequested,
    StopRequested,
    Teardown,
    TranscriptCleared,
)
from speech.state_dataclass import SpeechSnapshot


# =============================================================================
# Timer IDs
# =============================================================================

TIMER_LISTEN = "listen_timeout"


ReduceResult = tuple[SpeechSnapshot, tuple[Command, ...]]


# =============================================================================
# Small helpers
# =============================================================================

def _log(
    state: SpeechSnapshot,
    event: Event,
    decision: str,
    details: dict[str, Any] | None = None,
) -> LogEvent:
    return LogEvent(
        event={
            "ts_ms": event.ts_ms,
            "state": state.state.value,
            "event_type": event.event_type.value,
            "decision": decision,
            "attempt_id": state.attempt_id,
            "language_tag": state.language_tag,
            "details": details or {},
        }
    )


def _to_idle(state: SpeechSnapshot, reason: EndReason) -> SpeechSnapshot:
    return replace(state, state=SpeechState.IDLE, last_end=reason)


def _ignore(state: SpeechSnapshot, event: Event, decision: str) -> ReduceResult:
    return state, (_log(state, event, decision),)


def _is_live(state: SpeechSnapshot, event: AttemptEvent) -> bool:
    return (
        state.state is SpeechState.LISTENING
        and event.attempt_id == state.attempt_id
    )


# =============================================================================
# Caller control
# =============================================================================

def _on_start(state: SpeechSnapshot, event: StartRequested) -> ReduceResult:
    if state.closed:
        return _ignore(state, event, "start_after_close_ignored")

    if state.state is SpeechState.LISTENING:
        return _ignore(state, event, "already_listening_ignored")

    attempt_id = state.attempt_id + 1
    new_state = replace(
        state,
        state=SpeechState.LISTENING,
        attempt_id=attempt_id,
        last_end=None,
        last_error=None,
        transcript="",
        error_message=None,
    )

    # Timer is armed before capture starts so a synchronous result
    # from the capability can still cancel it.
    return new_state, (
        StartTimer(
            timer_id=TIMER_LISTEN,
            duration_ms=SPEECH_LISTEN_TIMEOUT_MS,
            attempt_id=attempt_id,
        ),
        StartCapture(attempt_id=attempt_id, language_tag=state.language_tag),
        _log(new_state, event, "idle_to_listening"),
    )


def _on_stop(state: SpeechSnapshot, event: StopRequested) -> ReduceResult:
    if state.state is SpeechState.IDLE:
        return _ignore(state, event, "stop_while_idle_ignored")

    new_state = _to_idle(state, EndReason.STOPPED)
    return new_state, (
        CancelTimer(timer_id=TIMER_LISTEN),
        StopCapture(attempt_id=state.attempt_id),
        _log(new_state, event, "listening_to_idle", {"reason": "stopped"}),
    )


def _on_reset(state: SpeechSnapshot, event: ResetRequested) -> ReduceResult:
    cleared = replace(state, transcript="", error_message=None, last_error=None)

    if state.state is SpeechState.IDLE:
        return cleared, (_log(cleared, event, "reset_while_idle"),)

    new_state = _to_idle(cleared, EndReason.ABORTED)
    return new_state, (
        CancelTimer(timer_id=TIMER_LISTEN),
        AbortCapture(attempt_id=state.attempt_id),
        _log(new_state, event, "listening_to_idle", {"reason": "reset"}),
    )


def _on_transcript_cleared(
    state: SpeechSnapshot,
    event: TranscriptCleared,
) -> ReduceResult:
    new_state = replace(state, transcript="", error_message=None, last_error=None)
    return new_state, (_log(new_state, event, "transcript_cleared"),)


def _on_teardown(state: SpeechSnapshot, event: Teardown) -> ReduceResult:
    if state.closed:
        return _ignore(state, event, "teardown_repeated_ignored")

    if state.state is SpeechState.IDLE:
        new_state = replace(state, closed=True)
        return new_state, (_log(new_state, event, "closed"),)

    new_state = replace(_to_idle(state, EndReason.ABORTED), closed=True)
    return new_state, (
        CancelTimer(timer_id=TIMER_LISTEN),
        AbortCapture(attempt_id=state.attempt_id),
        _log(new_state, event, "listening_to_idle", {"reason": "teardown"}),
    )


# =============================================================================
# Capability events (attempt-gated)
# =============================================================================

def _on_started(state: SpeechSnapshot, event: CaptureStarted) -> ReduceResult:
    return state, (_log(state, event, "capture_started"),)


def _on_result(state: SpeechSnapshot, event: CaptureResult) -> ReduceResult:
    text = event.text.strip()
    if not text:
        return _ignore(state, event, "blank_result_ignored")

    new_state = replace(_to_idle(state, EndReason.RESULT), transcript=text)
    return new_state, (
        CancelTimer(timer_id=TIMER_LISTEN),
        EmitTranscript(attempt_id=state.attempt_id, text=text),
        _log(new_state, event, "listening_to_idle", {
            "reason": "result",
            "text_len": len(text),
        }),
    )


def _on_error(state: SpeechSnapshot, event: CaptureError) -> ReduceResult:
    message = user_message(event.kind)

    if message is None:
        new_state = _to_idle(state, EndReason.ABORTED)
        return new_state, (
            CancelTimer(timer_id=TIMER_LISTEN),
            _log(new_state, event, "abort_suppressed"),
        )

    return _fail(state, event, event.kind, message)


def _on_start_failed(
    state: SpeechSnapshot,
    event: CaptureStartFailed,
) -> ReduceResult:
    return _fail(
        state,
        event,
        RecognitionErrorKind.UNKNOWN,
        CAPTURE_START_FAILED_MESSAGE,
        {"cause": event.reason},
    )


def _fail(
    state: SpeechSnapshot,
    event: AttemptEvent,
    kind: RecognitionErrorKind,
    message: str,
    extra: dict[str, Any] | None = None,
) -> ReduceResult:
    new_state = replace(
        _to_idle(state, EndReason.ERROR),
        last_error=kind,
        error_message=message,
    )
    return new_state, (
        CancelTimer(timer_id=TIMER_LISTEN),
        EmitError(attempt_id=state.attempt_id, kind=kind, message=message),
        _log(new_state, event, "listening_to_idle", {
            "reason": "error",
            "error_kind": kind.value,
            **(extra or {}),
        }),
    )


def _on_ended(state: SpeechSnapshot, event: CaptureEnded) -> ReduceResult:
    new_state = _to_idle(state, EndReason.ENDED)
    return new_state, (
        CancelTimer(timer_id=TIMER_LISTEN),
        _log(new_state, event, "listening_to_idle", {"reason": "ended"}),
    )


def _on_timeout(state: SpeechSnapshot, event: ListenTimeout) -> ReduceResult:
    new_state = _to_idle(state, EndReason.TIMEOUT)
    return new_state, (
        StopCapture(attempt_id=state.attempt_id),
        _log(new_state, event, "listening_to_idle", {
            "reason": "timeout",
            "timeout_ms": SPEECH_LISTEN_TIMEOUT_MS,
        }),
    )


# =============================================================================
# Entry point
# =============================================================================

def reduce(state: SpeechSnapshot, event: Event) -> ReduceResult:
    """Apply one event to the speech session state."""
    if isinstance(event, StartRequested):
        return _on_start(state, event)
    if isinstance(event, StopRequested):
        return _on_stop(state, event)
    if isinstance(event, ResetRequested):
        return _on_reset(state, event)
    if isinstance(event, TranscriptCleared):
        return _on_transcript_cleared(state, event)
    if isinstance(event, Teardown):
        return _on_teardown(state, event)

    if isinstance(event, AttemptEvent):
        if not _is_live(state, event):
            return _ignore(state, event, "stale_event_ignored")

        if isinstance(event, CaptureStarted):
            return _on_started(state, event)
        if isinstance(event, CaptureResult):
            return _on_result(state, event)
        if isinstance(event, CaptureError):
            return _on_error(state, event)
        if isinstance(event, CaptureEnded):
            return _on_ended(state, event)
        if isinstance(event, CaptureStartFailed):
            return _on_start_failed(state, event)
        if isinstance(event, ListenTimeout):
            return _on_timeout(state, event)

    return _ignore(state, event, "unhandled_event_ignored")
