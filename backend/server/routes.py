"""
Route registration for the chat API.

Responsibilities:
- Define HTTP and WebSocket endpoints
- Wire gateway to WebSocket lifecycle
- Pump the session's outbound control queue to the socket
- Pull dependencies from app.state
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect, FastAPI

from observability.logger import log_event
from session.gateway import SessionGateway


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""
    @app.get("/health")
    async def health() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        return {"status": "ok"}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket) -> None: # pyright: ignore[reportUnusedFunction]
        await ws.accept()

        gateway = SessionGateway(config=app.state.config)
        pump: asyncio.Task[None] | None = None
        session_id: str | None = None

        try:
            session = await gateway.on_ws_connect()
            session_id = session.session_id
            pump = asyncio.create_task(_pump_outbound(ws, session.control_out))

            while True:
                text = await ws.receive_text()
                await gateway.on_json_message(text)

        except WebSocketDisconnect:
            await gateway.on_ws_disconnect(reason="client_disconnect")

        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "event_type": "WS_FATAL_ERROR",
                "session_id": session_id,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            await gateway.on_ws_disconnect(reason="server_error")

        finally:
            if pump is not None:
                pump.cancel()
                await asyncio.gather(pump, return_exceptions=True)


async def _pump_outbound(
    ws: WebSocket,
    queue: asyncio.Queue[dict[str, Any]],
) -> None:
    """Send control messages in FIFO order until cancelled."""
    while True:
        msg = await queue.get()
        await ws.send_text(json.dumps(msg))
