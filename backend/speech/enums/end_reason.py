"""
How a listening attempt ended.

Orthogonal to SpeechState:
- State answers: "Is the device capturing right now?"
- EndReason answers: "Why did the last attempt stop?"
"""

from __future__ import annotations

from enum import Enum


class EndReason(str, Enum):
    """
    Terminal outcome of the most recent listening attempt.

    RESULT:   a non-empty transcript was produced
    ERROR:    the capability reported a user-visible failure
    TIMEOUT:  no terminal event arrived in time; capture was force-stopped
    STOPPED:  stop() was requested by the caller
    ABORTED:  deliberate cancellation (reset, teardown or platform abort)
    ENDED:    the capability ended without a usable result
    """

    RESULT = "RESULT"
    ERROR = "ERROR"
    TIMEOUT = "TIMEOUT"
    STOPPED = "STOPPED"
    ABORTED = "ABORTED"
    ENDED = "ENDED"
