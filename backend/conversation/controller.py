"""
Conversation turn orchestration.

Responsibilities:
- Own the message log (the only writer)
- Serialize turns with a single in-flight guard (no queueing)
- Inject the welcome message once and recognition errors on demand
- Invoke classifier -> generator -> navigation for each turn

Non-responsibilities:
- No speech capture state (see speech.session)
- No transport concerns
"""

from __future__ import annotations

from typing import Callable

from constants import (
    DEFAULT_REPLY_LANGUAGE,
    RECOGNITION_ERROR_TEMPLATE,
    REPLY_FAILURE_APOLOGY,
    WELCOME_HINT_TEXT_ONLY,
    WELCOME_HINT_VOICE,
    WELCOME_TEMPLATE,
)
from conversation.messages import ChatMessage, MessageLog
from conversation.navigation import NavigationDispatcher
from intent.categories import Intent, NavigationTarget
from intent.classifier import IntentClassifier
from observability.logger import log_event
from observability.metrics import timed
from replies.generator import ResponseGenerator


MessageListener = Callable[[ChatMessage], None]
ProcessingListener = Callable[[bool], None]


class ConversationController:
    """
    One conversation, one log.

    Invariants:
    - Every accepted user message yields exactly one assistant message
    - Welcome and recognition-error messages are not turns
    - is_processing is True only while a turn is in flight
    """

    def __init__(
        self,
        *,
        classifier: IntentClassifier,
        generator: ResponseGenerator,
        dispatcher: NavigationDispatcher | None = None,
        language: str = DEFAULT_REPLY_LANGUAGE,
        log: MessageLog | None = None,
        session_id: str | None = None,
    ) -> None:
        self._classifier = classifier
        self._generator = generator
        self._dispatcher = dispatcher or NavigationDispatcher(session_id=session_id)
        self._language = language
        self._log = log or MessageLog()
        self._session_id = session_id

        self._is_processing = False
        self._opened = False
        self._turn_count = 0

        self._message_listeners: list[MessageListener] = []
        self._processing_listeners: list[ProcessingListener] = []

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._log.snapshot()

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def turn_count(self) -> int:
        """Completed classified turns (welcome and error messages excluded)."""
        return self._turn_count

    @property
    def language(self) -> str:
        return self._language

    @language.setter
    def language(self, value: str) -> None:
        self._language = value

    def serialize(self) -> list[dict[str, object]]:
        return self._log.serialize()

    def subscribe(
        self,
        *,
        on_message: MessageListener | None = None,
        on_processing: ProcessingListener | None = None,
    ) -> None:
        if on_message is not None:
            self._message_listeners.append(on_message)
        if on_processing is not None:
            self._processing_listeners.append(on_processing)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self, *, capture_supported: bool = True) -> ChatMessage | None:
        """
        Append the welcome message if the log is still empty.

        Runs at most once per controller; later calls return None.
        """
        if self._opened or self._log:
            self._opened = True
            return None

        self._opened = True
        hint = WELCOME_HINT_VOICE if capture_supported else WELCOME_HINT_TEXT_ONLY
        text = WELCOME_TEMPLATE.format(
            assistant_name=self._generator.assistant_name,
            hint=hint,
        )
        return self._append(text, "assistant")

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def submit(self, text: str) -> ChatMessage | None:
        """
        Run one turn for typed or spoken text.

        Returns the assistant message, or None if the input was dropped
        (blank, or another turn is in flight).
        """
        cleaned = text.strip()
        if not cleaned:
            self._log_drop("blank_input")
            return None

        if self._is_processing:
            self._log_drop("turn_in_flight")
            return None

        self._append(cleaned, "user")
        self._set_processing(True)

        intent: Intent | None = None
        try:
            with timed("reply_latency", session_id=self._session_id):
                intent = self._classifier.classify(cleaned)
                reply_text = await self._generator.generate(intent, self._language)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "event_type": "REPLY_GENERATION_FAILED",
                "session_id": self._session_id,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            intent = None
            reply_text = REPLY_FAILURE_APOLOGY

        try:
            reply = self._append(reply_text, "assistant")
            self._turn_count += 1

            if intent is not None and intent.target is not NavigationTarget.NONE:
                self._dispatcher.dispatch(intent.target)
        finally:
            self._set_processing(False)

        log_event({
            "event_type": "TURN_COMPLETE",
            "session_id": self._session_id,
            "turn": self._turn_count,
            "category": intent.category.value if intent else None,
            "target": intent.target.value if intent else None,
            "log_len": len(self._log),
        })
        return reply

    async def on_transcript(self, text: str) -> ChatMessage | None:
        """Same as submit(); input came from speech capture."""
        return await self.submit(text)

    def on_error(self, message: str) -> ChatMessage:
        """
        Append a recognition error as an assistant message.

        No classification, does not touch is_processing, not a turn.
        """
        return self._append(
            RECOGNITION_ERROR_TEMPLATE.format(message=message),
            "assistant",
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _append(self, text: str, sender: str) -> ChatMessage:
        message = self._log.append(text, "user" if sender == "user" else "assistant")
        for listener in list(self._message_listeners):
            listener(message)
        return message

    def _set_processing(self, value: bool) -> None:
        self._is_processing = value
        for listener in list(self._processing_listeners):
            listener(value)

    def _log_drop(self, reason: str) -> None:
        log_event({
            "event_type": "SUBMIT_DROPPED",
            "session_id": self._session_id,
            "reason": reason,
            "is_processing": self._is_processing,
        })
