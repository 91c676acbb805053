"""
Side-effect command definitions for the speech session.

Rules:
- Commands are declarative requests for side effects.
- Commands are emitted by the reducer and executed by SpeechSession.
- No behavior, no async, no I/O, no clocks.

Invariant:
    - All concrete Command subclasses MUST be frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from speech.errors import RecognitionErrorKind


# =============================================================================
# Command Type Enumeration
# =============================================================================

class CommandType(str, Enum):
    """Stable discriminants used for logging and dispatch."""

    # Capability
    START_CAPTURE = "START_CAPTURE"
    STOP_CAPTURE = "STOP_CAPTURE"
    ABORT_CAPTURE = "ABORT_CAPTURE"

    # Timers
    START_TIMER = "START_TIMER"
    CANCEL_TIMER = "CANCEL_TIMER"

    # Outputs
    EMIT_TRANSCRIPT = "EMIT_TRANSCRIPT"
    EMIT_ERROR = "EMIT_ERROR"

    # Observability
    LOG_EVENT = "LOG_EVENT"


# =============================================================================
# Base Command
# =============================================================================

class Command:
    """
    Base command type.

    command_type is an explicit discriminant and must never be inferred
    from Python type identity.
    """

    command_type: CommandType


# =============================================================================
# Capability Commands
# =============================================================================

@dataclass(frozen=True)
class StartCapture(Command):
    """Start the capability for a new attempt."""
    attempt_id: int
    language_tag: str
    command_type: CommandType = CommandType.START_CAPTURE


@dataclass(frozen=True)
class StopCapture(Command):
    """Ask the capability to finish the current attempt."""
    attempt_id: int
    command_type: CommandType = CommandType.STOP_CAPTURE


@dataclass(frozen=True)
class AbortCapture(Command):
    """Cancel the current attempt immediately."""
    attempt_id: int
    command_type: CommandType = CommandType.ABORT_CAPTURE


# =============================================================================
# Timer Commands
# =============================================================================

@dataclass(frozen=True)
class StartTimer(Command):
    """
    Start a named timer.

    On expiration, the session must inject ListenTimeout(attempt_id).
    """
    timer_id: str
    duration_ms: int
    attempt_id: int
    command_type: CommandType = CommandType.START_TIMER


@dataclass(frozen=True)
class CancelTimer(Command):
    """Cancel a previously scheduled timer (idempotent)."""
    timer_id: str
    command_type: CommandType = CommandType.CANCEL_TIMER


# =============================================================================
# Output Commands
# =============================================================================

@dataclass(frozen=True)
class EmitTranscript(Command):
    """Deliver a finalized, non-empty transcript to listeners."""
    attempt_id: int
    text: str
    command_type: CommandType = CommandType.EMIT_TRANSCRIPT


@dataclass(frozen=True)
class EmitError(Command):
    """Deliver a user-visible recognition error to listeners."""
    attempt_id: int
    kind: RecognitionErrorKind
    message: str
    command_type: CommandType = CommandType.EMIT_ERROR


# =============================================================================
# Observability Commands
# =============================================================================

@dataclass(frozen=True)
class LogEvent(Command):
    """Request to emit a structured observability event."""
    event: dict[str, Any]
    command_type: CommandType = CommandType.LOG_EVENT
