"""
Conversation message log.

Responsibilities:
- Store ordered user/assistant messages
- Assign strictly increasing message ids
- Provide a serializable representation for the UI

Non-responsibilities:
- No classification
- No turn serialization (see conversation.controller)
- No truncation: the log lives only as long as the active session
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterator, Literal

Sender = Literal["user", "assistant"]

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChatMessage:
    """Single log entry."""
    id: int
    text: str
    sender: Sender
    timestamp: datetime

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "text": self.text,
            "sender": self.sender,
            "timestamp": self.timestamp.isoformat(),
        }


class MessageLog:
    """
    Append-only message store owned by the ConversationController.

    Invariants:
    - Messages are stored in insertion order
    - id is strictly increasing (not required to start at 1 or be contiguous)
    """

    def __init__(self, *, clock: Clock = _utc_now) -> None:
        self._clock = clock
        self._messages: list[ChatMessage] = []
        self._next_id = 1

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def append(self, text: str, sender: Sender) -> ChatMessage:
        message = ChatMessage(
            id=self._next_id,
            text=text,
            sender=sender,
            timestamp=self._clock(),
        )
        self._next_id += 1
        self._messages.append(message)
        return message

    def snapshot(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def serialize(self) -> list[dict[str, object]]:
        """
        Output format:
        [
          {"id": 1, "text": "...", "sender": "assistant", "timestamp": "..."},
          {"id": 2, "text": "...", "sender": "user", "timestamp": "..."},
        ]
        """
        return [m.to_dict() for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(tuple(self._messages))

    def __bool__(self) -> bool:
        return bool(self._messages)
