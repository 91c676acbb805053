"""
Authoritative speech session state container.

Rules:
- This dataclass is a pure data model.
- It contains ALL state the speech reducer may ever need.
- No behavior, no helpers, no derived logic.
"""
from __future__ import annotations

from dataclasses import dataclass

from constants import DEFAULT_SPEECH_LANGUAGE_TAG
from speech.enums.end_reason import EndReason
from speech.enums.state import SpeechState
from speech.errors import RecognitionErrorKind


@dataclass(frozen=True)
class SpeechSnapshot:
    """Immutable snapshot of everything the speech reducer owns."""

    # ------------------------------------------------------------------
    # Control state
    # ------------------------------------------------------------------
    state: SpeechState = SpeechState.IDLE

    # Monotonic; bumped only when a new attempt starts. 0 = none yet.
    attempt_id: int = 0

    # Resolved recognizer tag, e.g. "es-ES"
    language_tag: str = DEFAULT_SPEECH_LANGUAGE_TAG

    # ------------------------------------------------------------------
    # Outcome of the most recent attempt
    # ------------------------------------------------------------------
    last_end: EndReason | None = None
    last_error: RecognitionErrorKind | None = None

    # Stored until reset_transcript() / next start()
    transcript: str = ""
    error_message: str | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    closed: bool = False
