from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from notify_service.application.exceptions import (
    InvalidSubscription,
    StorageReadFailure,
    StorageWriteFailure,
)
from notify_service.application.ports.storage import SubscriptionStorage
from notify_service.domain.entities.subscription import Subscription

logger = logging.getLogger(__name__)


def parse_subscription(record: Any) -> Subscription:
    if not isinstance(record, dict):
        raise InvalidSubscription("Invalid subscription payload.")
    endpoint = record.get("endpoint")
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise InvalidSubscription("Invalid subscription payload.")

    keys = record.get("keys")
    expiration_time = record.get("expirationTime")
    return Subscription(
        endpoint=endpoint,
        keys=keys if isinstance(keys, dict) else {},
        expiration_time=expiration_time if isinstance(expiration_time, (int, float)) else None,
    )


class SubscriptionStore:
    """Push subscriptions keyed by endpoint, mirrored to durable storage.

    Every mutation holds ``_lock`` across the in-memory change and the
    rewrite, so concurrent requests cannot persist a stale set.
    """

    def __init__(self, storage: SubscriptionStorage) -> None:
        self._storage = storage
        self._subscriptions: dict[str, Subscription] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._subscriptions)

    def all(self) -> list[Subscription]:
        return list(self._subscriptions.values())

    def get(self, endpoint: str) -> Subscription | None:
        return self._subscriptions.get(endpoint)

    async def load(self) -> None:
        try:
            records = await self._storage.read()
        except StorageReadFailure as exc:
            logger.warning("Subscriptions storage unreadable, starting empty: %s", exc.detail)
            records = []

        loaded: dict[str, Subscription] = {}
        for record in records:
            try:
                subscription = parse_subscription(record)
            except InvalidSubscription:
                logger.warning("Skipping stored subscription without endpoint")
                continue
            loaded[subscription.endpoint] = subscription

        async with self._lock:
            self._subscriptions = loaded
        logger.info("Loaded %d push subscriptions", len(loaded))

    async def add(self, record: Any) -> Subscription:
        subscription = parse_subscription(record)
        async with self._lock:
            self._subscriptions[subscription.endpoint] = subscription
            await self._persist()
        return subscription

    async def remove(self, endpoint: str) -> bool:
        async with self._lock:
            if self._subscriptions.pop(endpoint, None) is None:
                return False
            await self._persist()
        return True

    async def prune(self, subscriptions: Iterable[Subscription]) -> int:
        """Drop dead subscriptions and persist once.

        An endpoint re-subscribed since ``subscriptions`` was snapshotted is
        kept. Write failures are logged, never raised.
        """
        async with self._lock:
            removed = 0
            for subscription in subscriptions:
                if self._subscriptions.get(subscription.endpoint) is subscription:
                    del self._subscriptions[subscription.endpoint]
                    removed += 1
            if removed:
                try:
                    await self._persist()
                except StorageWriteFailure:
                    logger.exception("Failed to persist pruned subscriptions")
        return removed

    async def _persist(self) -> None:
        await self._storage.write([s.to_record() for s in self._subscriptions.values()])
