"""Web Push delivery through pywebpush (RFC 8291 encryption + VAPID)."""
from __future__ import annotations

import asyncio
import logging

from py_vapid import Vapid
from pywebpush import WebPushException, webpush

from notify_service.application.exceptions import DeliveryFailure
from notify_service.domain.entities.subscription import Subscription
from notify_service.infrastructure.push.vapid import VapidKeys

logger = logging.getLogger(__name__)


class WebPushSender:
    """Implements application.ports.push.PushSender."""

    def __init__(
        self,
        keys: VapidKeys,
        claims_sub: str,
        *,
        ttl: int = 2419200,
        timeout: float | None = None,
    ) -> None:
        self._vapid = Vapid.from_string(private_key=keys.private_key)
        self._claims_sub = claims_sub
        self._ttl = ttl
        self._timeout = timeout

    async def send(self, subscription: Subscription, payload: str) -> None:
        await asyncio.to_thread(self._send_sync, subscription, payload)

    def _send_sync(self, subscription: Subscription, payload: str) -> None:
        try:
            webpush(
                subscription_info=subscription.to_push_info(),
                data=payload,
                vapid_private_key=self._vapid,
                # webpush() fills in aud/exp in place, so each call gets its own dict.
                vapid_claims={"sub": self._claims_sub},
                ttl=self._ttl,
                timeout=self._timeout,
            )
        except WebPushException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise DeliveryFailure(subscription.endpoint, status_code, str(exc)) from exc
        except Exception as exc:
            raise DeliveryFailure(subscription.endpoint, None, str(exc)) from exc
