"""
Voice chat session container.

- Owns the conversation controller and (once opened) the speech session
- Owns the outbound control queue drained by the WebSocket route
- Owned and mutated by SessionGateway
- NOT a state machine
- Contains no conversation logic
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from conversation.controller import ConversationController
from session.client_capability import ClientSpeechCapability
from speech.session import SpeechSession


@dataclass
class VoiceSession:
    """Mutable runtime container for a single client connection."""

    # ------------------------------------------------------------------
    # Identity / lifecycle
    # ------------------------------------------------------------------

    session_id: str
    controller: ConversationController
    created_at: float = field(default_factory=time.time)

    # ------------------------------------------------------------------
    # Speech capture (attached on OPEN)
    # ------------------------------------------------------------------

    capability: ClientSpeechCapability | None = None
    speech: SpeechSession | None = None

    # ------------------------------------------------------------------
    # In-flight turns
    # ------------------------------------------------------------------

    turn_tasks: set[asyncio.Task[Any]] = field(default_factory=set)

    def __post_init__(self) -> None:
        self._control_out: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    # ------------------------------------------------------------------
    # Wiring helpers (called by SessionGateway)
    # ------------------------------------------------------------------

    def attach_speech(self, capability: ClientSpeechCapability, speech: SpeechSession) -> None:
        self.capability = capability
        self.speech = speech

    @property
    def opened(self) -> bool:
        return self.speech is not None

    # ------------------------------------------------------------------
    # Control queue
    # ------------------------------------------------------------------

    @property
    def control_out(self) -> asyncio.Queue[dict[str, Any]]:
        return self._control_out

    def enqueue_control(self, msg: dict[str, Any]) -> None:
        """Buffer a control message for delivery to the client (FIFO)."""
        self._control_out.put_nowait(msg)

    def drain_control(self) -> tuple[dict[str, Any], ...]:
        """
        Drain all pending control messages without waiting.

        After this call, the control queue is empty.
        """
        out: list[dict[str, Any]] = []
        while True:
            try:
                out.append(self._control_out.get_nowait())
            except asyncio.QueueEmpty:
                break
        return tuple(out)

    def log_context(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "opened": self.opened,
            "turns": self.controller.turn_count,
        }
