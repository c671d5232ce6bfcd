"""One log line per HTTP request and per realtime session."""
from __future__ import annotations

import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

# websocket.close before accept means the handshake was refused.
_WS_ACCEPTED = 101
_WS_REJECTED = 403


class RequestTimingMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        status: int | None = None

        async def send_recording_status(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            elif message["type"] == "websocket.accept":
                status = _WS_ACCEPTED
            elif message["type"] == "websocket.close" and status is None:
                status = _WS_REJECTED
            await send(message)

        start = time.perf_counter()
        try:
            await self.app(scope, receive, send_recording_status)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s %s %.1fms",
                scope.get("method", "WS"),
                scope["path"],
                status if status is not None else 500,
                elapsed_ms,
            )
