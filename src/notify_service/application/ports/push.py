from __future__ import annotations

from typing import Protocol

from notify_service.domain.entities.subscription import Subscription


class PushSender(Protocol):
    """Delivers one encrypted payload; raises DeliveryFailure on rejection."""

    async def send(self, subscription: Subscription, payload: str) -> None: ...
