"""
Speech capture capability contract.

This module defines the *interface only*: no timers, no state machine, no
error policy.

Key invariants:
- Attempt ids are owned by SpeechSession. The capability never sees them;
  each start() receives a fresh event sink already bound to one attempt.
- Per attempt, signals are ordered STARTED < (RESULT | ERROR)* < ENDED.
- stop() asks for a graceful finish, abort() for immediate cancellation.
  Both MUST be idempotent and safe when nothing is running.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from constants import (
    SPEECH_CONTINUOUS,
    SPEECH_INTERIM_RESULTS,
    SPEECH_MAX_ALTERNATIVES,
)


@dataclass(frozen=True)
class RecognitionConfig:
    """Single-shot, final-only, single-alternative recognition settings."""
    language_tag: str
    continuous: bool = SPEECH_CONTINUOUS
    interim_results: bool = SPEECH_INTERIM_RESULTS
    max_alternatives: int = SPEECH_MAX_ALTERNATIVES

    def to_dict(self) -> dict[str, object]:
        return {
            "lang": self.language_tag,
            "continuous": self.continuous,
            "interim_results": self.interim_results,
            "max_alternatives": self.max_alternatives,
        }


class SignalKind(str, Enum):
    """Raw callback kinds delivered by a platform recognizer."""

    STARTED = "start"
    RESULT = "result"
    ERROR = "error"
    ENDED = "end"


@dataclass(frozen=True)
class CapabilitySignal:
    """
    One callback from the platform recognizer.

    text is set for RESULT, error_code (platform string) for ERROR.
    """
    kind: SignalKind
    text: str | None = None
    error_code: str | None = None


SignalSink = Callable[[CapabilitySignal], None]


class SpeechCapability(ABC):
    """
    Abstract platform speech-capture capability.

    Implementations are responsible for:
    - Reporting whether capture is available at all
    - Starting one recognition attempt and delivering its signals to the
      sink passed to start()
    - Honoring stop() / abort()

    Non-responsibilities:
    - No timeouts (SpeechSession owns the listen timer)
    - No error wording (see speech.errors)
    - No transcript trimming or filtering
    """

    @abstractmethod
    def is_supported(self) -> bool:
        """Return True if the device can capture speech."""
        raise NotImplementedError

    @abstractmethod
    def start(self, config: RecognitionConfig, on_signal: SignalSink) -> None:
        """
        Begin one recognition attempt.

        May raise if the platform refuses to start; SpeechSession turns that
        into an UNKNOWN recognition error for the attempt.
        """
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        """Finish the current attempt, delivering any final result."""
        raise NotImplementedError

    @abstractmethod
    def abort(self) -> None:
        """Cancel the current attempt immediately, discarding results."""
        raise NotImplementedError
