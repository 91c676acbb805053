# pylint: disable=missing-module-docstring,missing-function-docstring
from dataclasses import replace

from constants import CAPTURE_START_FAILED_MESSAGE, SPEECH_LISTEN_TIMEOUT_MS
from speech.reducer import reduce, TIMER_LISTEN
from speech.state_dataclass import SpeechSnapshot
from speech.enums.state import SpeechState
from speech.enums.end_reason import EndReason
from speech.errors import RecognitionErrorKind

from speech.events import (
    EventType,
    StartRequested,
    StopRequested,
    ResetRequested,
    TranscriptCleared,
    Teardown,
    CaptureStarted,
    CaptureResult,
    CaptureError,
    CaptureEnded,
    CaptureStartFailed,
    ListenTimeout,
)

from speech.commands import (
    Command,
    StartCapture,
    StopCapture,
    AbortCapture,
    StartTimer,
    CancelTimer,
    EmitTranscript,
    EmitError,
    LogEvent,
)


# ---------------------------------------------------------------------
# Event helpers (mirror SpeechSession construction)
# ---------------------------------------------------------------------

def start(ts_ms: int = 0) -> StartRequested:
    return StartRequested(ts_ms=ts_ms, event_type=EventType.START_REQUESTED)


def stop(ts_ms: int = 0) -> StopRequested:
    return StopRequested(ts_ms=ts_ms, event_type=EventType.STOP_REQUESTED)


def reset(ts_ms: int = 0) -> ResetRequested:
    return ResetRequested(ts_ms=ts_ms, event_type=EventType.RESET_REQUESTED)


def cleared(ts_ms: int = 0) -> TranscriptCleared:
    return TranscriptCleared(ts_ms=ts_ms, event_type=EventType.TRANSCRIPT_CLEARED)


def teardown(ts_ms: int = 0) -> Teardown:
    return Teardown(ts_ms=ts_ms, event_type=EventType.TEARDOWN)


def result(attempt_id: int, text: str = "hello") -> CaptureResult:
    return CaptureResult(
        ts_ms=0,
        event_type=EventType.CAPTURE_RESULT,
        attempt_id=attempt_id,
        text=text,
    )


def error(attempt_id: int, kind: RecognitionErrorKind) -> CaptureError:
    return CaptureError(
        ts_ms=0,
        event_type=EventType.CAPTURE_ERROR,
        attempt_id=attempt_id,
        kind=kind,
    )


def ended(attempt_id: int) -> CaptureEnded:
    return CaptureEnded(ts_ms=0, event_type=EventType.CAPTURE_ENDED, attempt_id=attempt_id)


def started(attempt_id: int) -> CaptureStarted:
    return CaptureStarted(ts_ms=0, event_type=EventType.CAPTURE_STARTED, attempt_id=attempt_id)


def timeout(attempt_id: int) -> ListenTimeout:
    return ListenTimeout(ts_ms=0, event_type=EventType.LISTEN_TIMEOUT, attempt_id=attempt_id)


def start_failed(attempt_id: int) -> CaptureStartFailed:
    return CaptureStartFailed(
        ts_ms=0,
        event_type=EventType.CAPTURE_START_FAILED,
        attempt_id=attempt_id,
        reason="RuntimeError",
    )


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def decisions(commands: tuple[Command, ...]) -> list[str]:
    """Extract decision strings from LogEvent commands."""
    return [
        c.event["decision"]
        for c in commands
        if isinstance(c, LogEvent)
    ]


def listening(attempt_id: int = 1) -> SpeechSnapshot:
    return SpeechSnapshot(state=SpeechState.LISTENING, attempt_id=attempt_id)


# ---------------------------------------------------------------------
# 1. Reducer shape & purity
# ---------------------------------------------------------------------

def test_reducer_returns_state_and_tuple():
    new_state, commands = reduce(SpeechSnapshot(), start())

    assert isinstance(commands, tuple)
    assert isinstance(new_state, SpeechSnapshot)


def test_reducer_does_not_mutate_input_state():
    state = SpeechSnapshot()

    reduce(state, start())

    assert state.state is SpeechState.IDLE
    assert state.attempt_id == 0


def test_reducer_emits_logevent_with_required_fields():
    _, commands = reduce(SpeechSnapshot(), start(ts_ms=123))

    payload = [c for c in commands if isinstance(c, LogEvent)][0].event

    for key in ("ts_ms", "state", "event_type", "decision", "attempt_id", "language_tag"):
        assert key in payload
    assert payload["ts_ms"] == 123


# ---------------------------------------------------------------------
# 2. Start
# ---------------------------------------------------------------------

def test_start_arms_timer_before_capture():
    new_state, commands = reduce(SpeechSnapshot(language_tag="es-ES"), start())

    assert new_state.state is SpeechState.LISTENING
    assert new_state.attempt_id == 1

    kinds = [type(c) for c in commands if not isinstance(c, LogEvent)]
    assert kinds == [StartTimer, StartCapture]

    timer = commands[0]
    assert isinstance(timer, StartTimer)
    assert timer.timer_id == TIMER_LISTEN
    assert timer.duration_ms == SPEECH_LISTEN_TIMEOUT_MS

    capture = commands[1]
    assert isinstance(capture, StartCapture)
    assert capture.language_tag == "es-ES"
    assert decisions(commands) == ["idle_to_listening"]


def test_start_clears_previous_outcome():
    state = SpeechSnapshot(
        transcript="old",
        error_message="old error",
        last_error=RecognitionErrorKind.NETWORK_ERROR,
        attempt_id=3,
    )

    new_state, _ = reduce(state, start())

    assert new_state.transcript == ""
    assert new_state.error_message is None
    assert new_state.last_error is None
    assert new_state.attempt_id == 4


def test_start_while_listening_is_ignored():
    state = listening()

    new_state, commands = reduce(state, start())

    assert new_state == state
    assert not any(isinstance(c, (StartTimer, StartCapture)) for c in commands)
    assert decisions(commands) == ["already_listening_ignored"]


def test_start_after_close_is_ignored():
    state = SpeechSnapshot(closed=True)

    new_state, commands = reduce(state, start())

    assert new_state == state
    assert decisions(commands) == ["start_after_close_ignored"]


# ---------------------------------------------------------------------
# 3. Attempt gating (critical invariant)
# ---------------------------------------------------------------------

def test_stale_result_is_ignored():
    state = listening(attempt_id=2)

    new_state, commands = reduce(state, result(attempt_id=1))

    assert new_state == state
    assert decisions(commands) == ["stale_event_ignored"]


def test_result_while_idle_is_ignored():
    state = SpeechSnapshot(attempt_id=1)

    new_state, commands = reduce(state, result(attempt_id=1))

    assert new_state == state
    assert not any(isinstance(c, EmitTranscript) for c in commands)


def test_late_error_after_result_is_ignored():
    state, _ = reduce(listening(), result(attempt_id=1, text="hi"))

    new_state, commands = reduce(state, error(1, RecognitionErrorKind.NETWORK_ERROR))

    assert new_state == state
    assert not any(isinstance(c, EmitError) for c in commands)


# ---------------------------------------------------------------------
# 4. Terminal events
# ---------------------------------------------------------------------

def test_result_emits_trimmed_transcript_and_cancels_timer():
    new_state, commands = reduce(listening(), result(1, "  what's my balance?  "))

    assert new_state.state is SpeechState.IDLE
    assert new_state.last_end is EndReason.RESULT
    assert new_state.transcript == "what's my balance?"
    assert CancelTimer(timer_id=TIMER_LISTEN) in commands
    assert EmitTranscript(attempt_id=1, text="what's my balance?") in commands


def test_blank_result_keeps_listening():
    state = listening()

    new_state, commands = reduce(state, result(1, "   "))

    assert new_state == state
    assert decisions(commands) == ["blank_result_ignored"]


def test_permission_denied_surfaces_message():
    new_state, commands = reduce(listening(), error(1, RecognitionErrorKind.PERMISSION_DENIED))

    assert new_state.state is SpeechState.IDLE
    assert new_state.last_end is EndReason.ERROR
    assert new_state.last_error is RecognitionErrorKind.PERMISSION_DENIED
    assert new_state.error_message

    emitted = [c for c in commands if isinstance(c, EmitError)]
    assert len(emitted) == 1
    assert emitted[0].message == new_state.error_message


def test_aborted_error_is_silent():
    new_state, commands = reduce(listening(), error(1, RecognitionErrorKind.ABORTED))

    assert new_state.state is SpeechState.IDLE
    assert new_state.error_message is None
    assert not any(isinstance(c, EmitError) for c in commands)
    assert decisions(commands) == ["abort_suppressed"]


def test_ended_without_result_returns_to_idle():
    new_state, commands = reduce(listening(), ended(1))

    assert new_state.state is SpeechState.IDLE
    assert new_state.last_end is EndReason.ENDED
    assert not any(isinstance(c, (EmitError, EmitTranscript)) for c in commands)


def test_started_is_informational():
    state = listening()

    new_state, commands = reduce(state, started(1))

    assert new_state == state
    assert decisions(commands) == ["capture_started"]


def test_timeout_stops_capture_without_error():
    new_state, commands = reduce(listening(), timeout(1))

    assert new_state.state is SpeechState.IDLE
    assert new_state.last_end is EndReason.TIMEOUT
    assert new_state.error_message is None
    assert StopCapture(attempt_id=1) in commands
    assert not any(isinstance(c, EmitError) for c in commands)


def test_start_failure_becomes_unknown_error():
    new_state, commands = reduce(listening(), start_failed(1))

    assert new_state.last_error is RecognitionErrorKind.UNKNOWN
    assert new_state.error_message == CAPTURE_START_FAILED_MESSAGE
    assert EmitError(
        attempt_id=1,
        kind=RecognitionErrorKind.UNKNOWN,
        message=CAPTURE_START_FAILED_MESSAGE,
    ) in commands


# ---------------------------------------------------------------------
# 5. Caller control
# ---------------------------------------------------------------------

def test_stop_while_idle_is_noop():
    state = SpeechSnapshot()

    new_state, commands = reduce(state, stop())

    assert new_state == state
    assert decisions(commands) == ["stop_while_idle_ignored"]


def test_stop_while_listening_stops_capture():
    new_state, commands = reduce(listening(), stop())

    assert new_state.state is SpeechState.IDLE
    assert new_state.last_end is EndReason.STOPPED
    assert StopCapture(attempt_id=1) in commands
    assert CancelTimer(timer_id=TIMER_LISTEN) in commands


def test_reset_while_listening_aborts_and_clears():
    state = replace(listening(), transcript="x", error_message="y")

    new_state, commands = reduce(state, reset())

    assert new_state.state is SpeechState.IDLE
    assert new_state.last_end is EndReason.ABORTED
    assert new_state.transcript == ""
    assert new_state.error_message is None
    assert AbortCapture(attempt_id=1) in commands


def test_reset_while_idle_never_touches_capability():
    state = SpeechSnapshot(error_message="old", transcript="old")

    new_state, commands = reduce(state, reset())

    assert new_state.error_message is None
    assert new_state.transcript == ""
    assert all(isinstance(c, LogEvent) for c in commands)


def test_transcript_cleared_twice_is_stable():
    state = SpeechSnapshot(
        error_message="Network error. Please check your connection.",
        last_error=RecognitionErrorKind.NETWORK_ERROR,
    )

    once, _ = reduce(state, cleared())
    twice, commands = reduce(once, cleared())

    assert once == twice
    assert twice.error_message is None
    assert all(isinstance(c, LogEvent) for c in commands)


def test_teardown_while_listening_aborts_and_closes():
    new_state, commands = reduce(listening(), teardown())

    assert new_state.closed is True
    assert new_state.state is SpeechState.IDLE
    assert AbortCapture(attempt_id=1) in commands


def test_teardown_is_idempotent():
    state, _ = reduce(SpeechSnapshot(), teardown())

    new_state, commands = reduce(state, teardown())

    assert new_state == state
    assert decisions(commands) == ["teardown_repeated_ignored"]
