from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

from notify_service.application.exceptions import DeliveryFailure
from notify_service.application.ports.push import PushSender
from notify_service.domain.entities.message import Message
from notify_service.domain.entities.subscription import Subscription
from notify_service.domain.value_objects.enums import PrunePolicy
from notify_service.services.subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)

IMAGE_ONLY_BODY = "Sent an image"
ELLIPSIS = "..."

# Push services cap the encrypted record at 4096 bytes; leave room for the
# aes128gcm header and padding.
MAX_PAYLOAD_BYTES = 3800
MAX_TITLE_JSON = 256


def _shorten_for_json(text: str, budget: int) -> str:
    """Longest prefix of ``text`` (plus ellipsis) whose JSON string fits ``budget``."""
    used = len('""') + len(ELLIPSIS)
    for i, ch in enumerate(text):
        used += len(json.dumps(ch)) - 2
        if used > budget:
            return text[:i].rstrip() + ELLIPSIS if i else ""
    return text


@dataclass(frozen=True, slots=True)
class DispatchReport:
    attempted: int
    delivered: int
    pruned: int


class PushDispatcher:
    """Sends one notification per message to every stored subscription.

    Attempts run concurrently and the batch settles as a whole; failed
    subscriptions are pruned from the store in a single write afterwards.
    """

    def __init__(
        self,
        store: SubscriptionStore,
        sender: PushSender,
        *,
        prune_policy: PrunePolicy = PrunePolicy.ANY,
        click_url: str = "/",
    ) -> None:
        self._store = store
        self._sender = sender
        self._prune_policy = prune_policy
        self._click_url = click_url

    def build_payload(self, message: Message) -> str:
        """JSON notification for the service worker, at most MAX_PAYLOAD_BYTES.

        The title is capped at MAX_TITLE_JSON; past the limit the image is
        dropped first, then the body is shortened.
        """
        payload: dict[str, Any] = {
            "title": _shorten_for_json(f"{message.sender} sent a notification", MAX_TITLE_JSON),
            "body": message.text or IMAGE_ONLY_BODY,
            "data": {"url": self._click_url, "messageId": str(message.id)},
        }
        if message.image_data_url:
            payload["image"] = message.image_data_url

        raw = json.dumps(payload)
        if len(raw) > MAX_PAYLOAD_BYTES and "image" in payload:
            del payload["image"]
            raw = json.dumps(payload)

        if len(raw) > MAX_PAYLOAD_BYTES:
            budget = MAX_PAYLOAD_BYTES - (len(raw) - len(json.dumps(payload["body"])))
            payload["body"] = _shorten_for_json(payload["body"], budget)
            raw = json.dumps(payload)
        return raw

    async def dispatch(self, message: Message) -> DispatchReport:
        subscriptions = self._store.all()
        if not subscriptions:
            return DispatchReport(attempted=0, delivered=0, pruned=0)

        payload = self.build_payload(message)
        failures = await asyncio.gather(
            *(self._attempt(s, payload) for s in subscriptions)
        )

        stale = [
            s for s, failure in zip(subscriptions, failures)
            if failure is not None and self._should_prune(failure)
        ]
        pruned = await self._store.prune(stale) if stale else 0

        delivered = sum(1 for f in failures if f is None)
        logger.debug(
            "Push batch for message %s: attempted=%d delivered=%d pruned=%d",
            message.id, len(subscriptions), delivered, pruned,
        )
        return DispatchReport(attempted=len(subscriptions), delivered=delivered, pruned=pruned)

    async def _attempt(self, subscription: Subscription, payload: str) -> DeliveryFailure | None:
        try:
            await self._sender.send(subscription, payload)
        except DeliveryFailure as exc:
            failure = exc
        except Exception as exc:
            logger.exception("Unexpected push sender error for %s", subscription.endpoint)
            failure = DeliveryFailure(subscription.endpoint, None, str(exc))
        else:
            return None

        logger.info(
            "Push delivery failed endpoint=%s status=%s: %s",
            subscription.endpoint, failure.status_code, failure.detail,
        )
        return failure

    def _should_prune(self, failure: DeliveryFailure) -> bool:
        if self._prune_policy == PrunePolicy.ANY:
            return True
        return failure.is_gone
