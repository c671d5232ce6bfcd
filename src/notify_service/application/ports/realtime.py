from __future__ import annotations

from typing import Protocol

from notify_service.domain.entities.message import Message


class Broadcaster(Protocol):
    async def broadcast(self, message: Message) -> int: ...
