"""
Speech capability backed by the connected browser.

The browser owns the actual recognizer. This adapter:
- Relays start/stop/abort to the client as control messages
- Feeds SPEECH_EVENT reports from the client into the current attempt's sink

Every CAPTURE_START carries a fresh capture_id; the client must echo it in
each SPEECH_EVENT. Reports for any other capture_id, or arriving after
stop()/abort(), are dropped here.

It holds no timers and no error policy; SpeechSession owns both.
"""

from __future__ import annotations

from typing import Any, Callable

from observability.logger import log_event
from speech.capability import (
    CapabilitySignal,
    RecognitionConfig,
    SignalKind,
    SignalSink,
    SpeechCapability,
)


ControlSink = Callable[[dict[str, Any]], None]


class ClientSpeechCapability(SpeechCapability):
    """One per WebSocket connection."""

    def __init__(
        self,
        send_control: ControlSink,
        *,
        supported: bool,
        session_id: str | None = None,
    ) -> None:
        self._send = send_control
        self._supported = supported
        self._session_id = session_id
        self._sink: SignalSink | None = None
        self._capture_id = 0

    @property
    def capture_id(self) -> int | None:
        """Id of the capture the client may still report on, if any."""
        return self._capture_id if self._sink is not None else None

    def is_supported(self) -> bool:
        return self._supported

    def start(self, config: RecognitionConfig, on_signal: SignalSink) -> None:
        self._capture_id += 1
        self._sink = on_signal
        self._send({
            "type": "CAPTURE_START",
            "capture_id": self._capture_id,
            "config": config.to_dict(),
        })

    def stop(self) -> None:
        if self._sink is None:
            return
        self._sink = None
        self._send({"type": "CAPTURE_STOP", "capture_id": self._capture_id})

    def abort(self) -> None:
        if self._sink is None:
            return
        self._sink = None
        self._send({"type": "CAPTURE_ABORT", "capture_id": self._capture_id})

    # ------------------------------------------------------------------
    # Client reports
    # ------------------------------------------------------------------

    def deliver(
        self,
        event: str | None,
        *,
        capture_id: Any,
        text: str | None = None,
        error: str | None = None,
    ) -> bool:
        """
        Forward one browser recognition event to the active capture.

        Returns False (and logs) when the event name is unknown, there is no
        active capture, or capture_id does not name it.
        """
        try:
            kind = SignalKind(event)
        except ValueError:
            log_event({
                "event_type": "UNKNOWN_SPEECH_EVENT",
                "session_id": self._session_id,
                "speech_event": event,
            })
            return False

        sink = self._sink
        if sink is None or capture_id != self._capture_id:
            log_event({
                "event_type": "STALE_SPEECH_EVENT_DROPPED",
                "session_id": self._session_id,
                "speech_event": kind.value,
                "capture_id": capture_id,
                "active_capture_id": self.capture_id,
            })
            return False

        if kind is SignalKind.ENDED:
            self._sink = None

        sink(CapabilitySignal(kind=kind, text=text, error_code=error))
        return True
