"""In-process WebSocket connection manager."""
from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect, WebSocketState

from notify_service.application.exceptions import TransportClosed
from notify_service.domain.entities.message import Message
from notify_service.domain.value_objects.enums import FrameType
from notify_service.infrastructure.ws.protocol import WsOutbound
from notify_service.services.history import HistoryBuffer

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks open realtime connections and fans new messages out to them."""

    def __init__(self, history: HistoryBuffer, replay_size: int = 50) -> None:
        self._history = history
        self._replay_size = replay_size
        self._connections: set[WebSocket] = set()

    def __len__(self) -> int:
        return len(self._connections)

    async def connect(self, ws: WebSocket) -> bool:
        """Accept ``ws`` and replay recent history. False if it closed meanwhile."""
        await ws.accept()
        replay = [m.to_dict() for m in self._history.recent(self._replay_size)]
        self._connections.add(ws)
        logger.debug("WS connected (total=%d)", len(self._connections))
        try:
            await self._send(ws, WsOutbound(type=FrameType.HISTORY, payload=replay).model_dump_json())
        except TransportClosed:
            self.disconnect(ws)
            return False
        return True

    def disconnect(self, ws: WebSocket) -> None:
        if ws in self._connections:
            self._connections.discard(ws)
            logger.debug("WS disconnected (total=%d)", len(self._connections))

    async def broadcast(self, message: Message) -> int:
        """Send a ``message`` frame to every open connection; returns deliveries."""
        raw = WsOutbound(type=FrameType.MESSAGE, payload=message.to_dict()).model_dump_json()
        targets = list(self._connections)
        results = await asyncio.gather(*(self._deliver(ws, raw) for ws in targets))
        for ws, ok in zip(targets, results):
            if not ok:
                self.disconnect(ws)
        return sum(results)

    async def _deliver(self, ws: WebSocket, raw: str) -> bool:
        try:
            await self._send(ws, raw)
        except TransportClosed:
            return False
        return True

    @staticmethod
    async def _send(ws: WebSocket, raw: str) -> None:
        if (
            ws.client_state != WebSocketState.CONNECTED
            or ws.application_state != WebSocketState.CONNECTED
        ):
            raise TransportClosed("connection is not open")
        try:
            await ws.send_text(raw)
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            raise TransportClosed(str(exc)) from exc
