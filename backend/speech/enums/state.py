"""
Speech capture state enumeration.

Rules:
- This enum defines ONLY the capture control states.
- No behavior, no helper methods, no side effects.
- Transitions are defined exclusively in the speech reducer.
"""

from __future__ import annotations

from enum import Enum


class SpeechState(str, Enum):
    """
    Control state of the single capture attempt owned by a SpeechSession.

    IDLE:
        No attempt in flight. start() is always valid from here.

    LISTENING:
        The capability has been started for the active attempt and at most
        one terminal event (result, error, end, timeout) will be honored.
    """

    IDLE = "IDLE"
    LISTENING = "LISTENING"
