from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket

from notify_service.infrastructure.ws.manager import ConnectionManager

logger = logging.getLogger(__name__)
router = APIRouter(tags=["realtime"])


@router.websocket("/realtime")
async def realtime(websocket: WebSocket) -> None:
    manager: ConnectionManager = websocket.app.state.broadcaster
    if not await manager.connect(websocket):
        return

    try:
        # Server → client only; inbound frames are drained until the peer leaves.
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    except Exception:
        logger.exception("WS error")
    finally:
        manager.disconnect(websocket)
