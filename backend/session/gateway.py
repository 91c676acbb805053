"""
Session gateway.

Responsibilities:
- Owns VoiceSession lifecycle for one WebSocket connection
- Builds the per-session classifier, generator, dispatcher and controller
- Routes inbound JSON control messages to the controller or speech session
- Pushes log updates, processing/listening flags and navigation targets to
  the outbound control queue

NOT responsible for:
- Socket I/O (see server.routes)
- Classification, reply selection or capture state rules
"""

from __future__ import annotations

import asyncio
import json
import random
from typing import Any, TYPE_CHECKING
from uuid import uuid4

from constants import CAPTURE_UNSUPPORTED_MESSAGE
from conversation.controller import ConversationController
from conversation.messages import ChatMessage
from conversation.navigation import NavigationDispatcher
from intent.categories import NavigationTarget
from intent.classifier import IntentClassifier
from observability.logger import log_event
from replies.generator import ResponseGenerator
from session.client_capability import ClientSpeechCapability
from session.voice_session import VoiceSession
from speech.enums.state import SpeechState
from speech.errors import CapabilityUnsupported, RecognitionErrorKind
from speech.session import SpeechSession

if TYPE_CHECKING:
    from config import AppConfig


def _new_session_id() -> str:
    return f"sess_{uuid4().hex[:12]}"


class SessionGateway:
    """One gateway == one chat session."""

    def __init__(self, *, config: AppConfig) -> None:
        self._config = config
        self.session: VoiceSession | None = None

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def on_ws_connect(self) -> VoiceSession:
        """Called when a WebSocket connection is established."""
        session_id = _new_session_id()

        generator = ResponseGenerator(
            assistant_name=self._config.assistant_name,
            rng=random.Random(self._config.random_seed),
            simulate_latency=self._config.simulate_reply_latency,
            session_id=session_id,
        )
        dispatcher = NavigationDispatcher(self._on_navigate, session_id=session_id)
        controller = ConversationController(
            classifier=IntentClassifier(session_id=session_id),
            generator=generator,
            dispatcher=dispatcher,
            language=self._config.default_language,
            session_id=session_id,
        )
        controller.subscribe(
            on_message=self._on_message,
            on_processing=self._on_processing,
        )

        self.session = VoiceSession(session_id=session_id, controller=controller)

        log_event({
            "event_type": "SESSION_STARTED",
            "session_id": session_id,
        })
        self._send({
            "type": "SESSION_INIT",
            "session_id": session_id,
            "config": {
                "assistant_name": self._config.assistant_name,
                "language": self._config.default_language,
            },
        })
        return self.session

    async def on_ws_disconnect(self, reason: str | None = None) -> None:
        """Called when the WebSocket disconnects. Idempotent."""
        if self.session is None:
            log_event({
                "event_type": "WS_DISCONNECT_WITHOUT_SESSION",
                "reason": reason,
            })
            return

        session = self.session

        if session.speech is not None:
            await session.speech.close()

        pending = list(session.turn_tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self.session = None

        log_event({
            "event_type": "SESSION_ENDED",
            "reason": reason,
            **session.log_context(),
        })

    # ------------------------------------------------------------------
    # Inbound JSON
    # ------------------------------------------------------------------

    async def on_json_message(self, payload: str) -> None:
        """Route one inbound JSON message. Never raises on bad input."""
        if self.session is None:
            log_event({
                "event_type": "MESSAGE_WITHOUT_SESSION",
                "payload_preview": payload[:100],
            })
            return

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            log_event({
                "event_type": "JSON_DECODE_ERROR",
                "session_id": self.session.session_id,
                "error": str(e),
                "payload_preview": payload[:100],
            })
            return

        if not isinstance(data, dict):
            log_event({
                "event_type": "JSON_NOT_AN_OBJECT",
                "session_id": self.session.session_id,
                "payload_preview": payload[:100],
            })
            return

        msg_type = data.get("type")

        if msg_type == "OPEN":
            self._open(
                capture_supported=bool(data.get("capture_supported", False)),
                language=data.get("language"),
            )
        elif msg_type == "SUBMIT":
            self._start_turn(str(data.get("text") or ""))
        elif msg_type == "MIC_START":
            await self._mic_start()
        elif msg_type == "MIC_STOP":
            if self._require_speech(msg_type):
                assert self.session.speech is not None
                await self.session.speech.stop()
        elif msg_type == "MIC_RESET":
            if self._require_speech(msg_type):
                assert self.session.speech is not None
                await self.session.speech.reset()
        elif msg_type == "SPEECH_EVENT":
            if self._require_speech(msg_type):
                assert self.session.capability is not None
                self.session.capability.deliver(
                    data.get("event"),
                    capture_id=data.get("capture_id"),
                    text=data.get("text"),
                    error=data.get("error"),
                )
        else:
            log_event({
                "event_type": "UNKNOWN_MESSAGE_TYPE",
                "msg_type": msg_type,
                "session_id": self.session.session_id,
            })

    def drain_outbound(self) -> tuple[dict[str, Any], ...]:
        if self.session is None:
            return ()
        return self.session.drain_control()

    async def wait_idle(self) -> None:
        """Wait until in-flight turns, speech listeners and navigation finish."""
        if self.session is None:
            return
        session = self.session
        while session.turn_tasks:
            await asyncio.gather(*list(session.turn_tasks), return_exceptions=True)
        if session.speech is not None:
            await session.speech.flush()
        await asyncio.sleep(0)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _open(self, *, capture_supported: bool, language: Any) -> None:
        assert self.session is not None
        session = self.session

        if session.opened:
            log_event({
                "event_type": "OPEN_IGNORED",
                "session_id": session.session_id,
                "reason": "already_open",
            })
            return

        if isinstance(language, str) and language:
            session.controller.language = language
        else:
            language = session.controller.language

        capability = ClientSpeechCapability(
            self._send,
            supported=capture_supported,
            session_id=session.session_id,
        )
        speech = SpeechSession(
            capability,
            language=language,
            session_id=session.session_id,
            on_transcript=session.controller.on_transcript,
            on_error=self._on_recognition_error,
        )
        speech.add_state_listener(self._on_speech_state)
        session.attach_speech(capability, speech)

        session.controller.open(capture_supported=speech.is_supported)

    def _start_turn(self, text: str) -> None:
        assert self.session is not None
        task = asyncio.ensure_future(self.session.controller.submit(text))
        self.session.turn_tasks.add(task)
        task.add_done_callback(self.session.turn_tasks.discard)

    async def _mic_start(self) -> None:
        if not self._require_speech("MIC_START"):
            return
        assert self.session is not None and self.session.speech is not None

        try:
            await self.session.speech.start()
        except CapabilityUnsupported:
            log_event({
                "event_type": "MIC_START_UNSUPPORTED",
                "session_id": self.session.session_id,
            })
            self._send({
                "type": "ERROR",
                "reason": "capture_unsupported",
                "message": CAPTURE_UNSUPPORTED_MESSAGE,
            })

    def _require_speech(self, msg_type: str) -> bool:
        assert self.session is not None
        if self.session.speech is not None:
            return True
        log_event({
            "event_type": "MESSAGE_BEFORE_OPEN",
            "session_id": self.session.session_id,
            "msg_type": msg_type,
        })
        self._send({"type": "ERROR", "reason": "session_not_open"})
        return False

    # ------------------------------------------------------------------
    # Outbound pushes
    # ------------------------------------------------------------------

    def _send(self, msg: dict[str, Any]) -> None:
        if self.session is None:
            log_event({
                "event_type": "SEND_WITHOUT_SESSION",
                "msg_type": msg.get("type"),
            })
            return
        self.session.enqueue_control(msg)

    def _on_message(self, message: ChatMessage) -> None:
        self._send({"type": "MESSAGE", "message": message.to_dict()})

    def _on_processing(self, is_processing: bool) -> None:
        self._send({"type": "PROCESSING", "is_processing": is_processing})

    def _on_speech_state(self, state: SpeechState) -> None:
        self._send({"type": "LISTENING", "is_listening": state is SpeechState.LISTENING})

    def _on_recognition_error(self, kind: RecognitionErrorKind, message: str) -> None:
        assert self.session is not None
        log_event({
            "event_type": "RECOGNITION_ERROR_SURFACED",
            "session_id": self.session.session_id,
            "kind": kind.value,
        })
        self.session.controller.on_error(message)

    def _on_navigate(self, target: NavigationTarget) -> None:
        self._send({"type": "NAVIGATE", "target": target.value})
