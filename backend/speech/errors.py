"""
Recognition error taxonomy.

Maps platform error codes onto a closed set of kinds and attaches a short,
stable, human-readable message to each user-visible kind.

ABORTED is a cancellation, not a failure: it has no message and is never
surfaced to the user.
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Mapping

from constants import CAPTURE_UNSUPPORTED_MESSAGE


class RecognitionErrorKind(str, Enum):
    """Recoverable recognition failures reported by a capture capability."""

    NO_SPEECH = "no-speech"
    AUDIO_CAPTURE_DENIED = "audio-capture"
    PERMISSION_DENIED = "not-allowed"
    NETWORK_ERROR = "network"
    ABORTED = "aborted"
    UNKNOWN = "unknown"


ERROR_MESSAGES: Final[Mapping[RecognitionErrorKind, str]] = {
    RecognitionErrorKind.NO_SPEECH: "No speech detected. Please try speaking clearly.",
    RecognitionErrorKind.AUDIO_CAPTURE_DENIED: (
        "Microphone not accessible. Please check permissions."
    ),
    RecognitionErrorKind.PERMISSION_DENIED: (
        "Microphone permission denied. Please allow microphone access."
    ),
    RecognitionErrorKind.NETWORK_ERROR: "Network error. Please check your connection.",
    RecognitionErrorKind.UNKNOWN: "Voice recognition failed. Please try again.",
}


def kind_from_code(code: str | None) -> RecognitionErrorKind:
    """
    Map a platform error code to a RecognitionErrorKind.

    Unrecognized or missing codes map to UNKNOWN.
    """
    if code is None:
        return RecognitionErrorKind.UNKNOWN
    try:
        return RecognitionErrorKind(code.strip().lower())
    except ValueError:
        return RecognitionErrorKind.UNKNOWN


def is_suppressed(kind: RecognitionErrorKind) -> bool:
    """True for kinds that must never reach the user."""
    return kind is RecognitionErrorKind.ABORTED


def user_message(kind: RecognitionErrorKind) -> str | None:
    """Stable user-facing message, or None for suppressed kinds."""
    if is_suppressed(kind):
        return None
    return ERROR_MESSAGES[kind]


class CapabilityUnsupported(RuntimeError):
    """
    The capture capability is absent on this device.

    Permanent for the lifetime of the session. The caller is expected to
    fall back to text input; the session never retries.
    """

    def __init__(self, message: str = CAPTURE_UNSUPPORTED_MESSAGE) -> None:
        super().__init__(message)
