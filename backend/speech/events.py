"""
Event definitions for the speech session reducer.

Rules:
- Events describe facts that have occurred.
- Events carry data only (no behavior).
- All reducer decisions are based on these events.

Capture events carry attempt_id so the reducer can drop strays from an
attempt that is no longer active.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from speech.errors import RecognitionErrorKind


# =============================================================================
# Event Type Enumeration
# =============================================================================

class EventType(str, Enum):
    """
    Canonical event types understood by the speech reducer.

    Every (state, event_type) pair must be explicitly handled
    or explicitly ignored by the reducer.
    """

    # ------------------------------------------------------------------
    # Caller control
    # ------------------------------------------------------------------
    START_REQUESTED = "START_REQUESTED"
    STOP_REQUESTED = "STOP_REQUESTED"
    RESET_REQUESTED = "RESET_REQUESTED"
    TRANSCRIPT_CLEARED = "TRANSCRIPT_CLEARED"
    TEARDOWN = "TEARDOWN"

    # ------------------------------------------------------------------
    # Capability
    # ------------------------------------------------------------------
    CAPTURE_STARTED = "CAPTURE_STARTED"
    CAPTURE_RESULT = "CAPTURE_RESULT"
    CAPTURE_ERROR = "CAPTURE_ERROR"
    CAPTURE_ENDED = "CAPTURE_ENDED"
    CAPTURE_START_FAILED = "CAPTURE_START_FAILED"

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------
    LISTEN_TIMEOUT = "LISTEN_TIMEOUT"


# =============================================================================
# Base Events
# =============================================================================

@dataclass(frozen=True)
class Event:
    """
    Base event type.

    All events must specify:
    - event_type: discriminant
    - ts_ms: timestamp provided by the source (or fake in tests)
    """

    event_type: EventType
    ts_ms: int


@dataclass(frozen=True)
class AttemptEvent(Event):
    """
    Event scoped to one listening attempt.

    The reducer MUST ignore these unless the session is LISTENING and
    attempt_id matches the active attempt.
    """

    attempt_id: int


# =============================================================================
# Caller Control Events
# =============================================================================

@dataclass(frozen=True)
class StartRequested(Event):
    """Caller asked to begin listening."""


@dataclass(frozen=True)
class StopRequested(Event):
    """Caller asked to finish listening gracefully."""


@dataclass(frozen=True)
class ResetRequested(Event):
    """Caller asked to cancel listening and forget the last outcome."""


@dataclass(frozen=True)
class TranscriptCleared(Event):
    """Caller consumed the stored transcript / error."""


@dataclass(frozen=True)
class Teardown(Event):
    """Session is being released."""


# =============================================================================
# Capability Events
# =============================================================================

@dataclass(frozen=True)
class CaptureStarted(AttemptEvent):
    """Platform confirmed capture began."""


@dataclass(frozen=True)
class CaptureResult(AttemptEvent):
    """Platform delivered final recognized text (possibly blank)."""
    text: str


@dataclass(frozen=True)
class CaptureError(AttemptEvent):
    """Platform reported a recognition error."""
    kind: RecognitionErrorKind


@dataclass(frozen=True)
class CaptureEnded(AttemptEvent):
    """Platform finished the attempt."""


@dataclass(frozen=True)
class CaptureStartFailed(AttemptEvent):
    """The capability raised while being started."""
    reason: str


# =============================================================================
# Timer Events
# =============================================================================

@dataclass(frozen=True)
class ListenTimeout(AttemptEvent):
    """No terminal event arrived within the listen window."""
