"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from notify_service.application.exceptions import (
    DeliveryFailure,
    StorageReadFailure,
    StorageWriteFailure,
)
from notify_service.domain.entities.message import Message
from notify_service.domain.entities.subscription import Subscription
from notify_service.services.subscription_store import SubscriptionStore


def make_message(
    *,
    sender: str = "Ada",
    text: str = "hello",
    image: str = "",
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        sender=sender,
        text=text,
        image_data_url=image,
        created_at=created_at or datetime.now(timezone.utc),
    )


def make_subscription_record(endpoint: str, *, auth: str = "tBHItJI5svbpez7KI4CCXg") -> dict[str, Any]:
    return {
        "endpoint": endpoint,
        "expirationTime": None,
        "keys": {"p256dh": "BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA", "auth": auth},
    }


@dataclass
class FakeStorage:
    """In-memory SubscriptionStorage that records every rewrite."""

    records: list[Any] = field(default_factory=list)
    fail_read: bool = False
    fail_write: bool = False
    writes: list[list[dict[str, Any]]] = field(default_factory=list)

    async def read(self) -> list[Any]:
        if self.fail_read:
            raise StorageReadFailure("corrupt")
        return list(self.records)

    async def write(self, records: list[dict[str, Any]]) -> None:
        if self.fail_write:
            raise StorageWriteFailure("disk full")
        self.writes.append(records)
        self.records = list(records)


@dataclass
class FakePushSender:
    """Scripted PushSender: endpoints in ``failures`` raise with that status."""

    failures: dict[str, int | None] = field(default_factory=dict)
    sent: list[tuple[str, str]] = field(default_factory=list)

    async def send(self, subscription: Subscription, payload: str) -> None:
        await asyncio.sleep(0)
        if subscription.endpoint in self.failures:
            raise DeliveryFailure(subscription.endpoint, self.failures[subscription.endpoint])
        self.sent.append((subscription.endpoint, payload))


@dataclass
class FakeBroadcaster:
    messages: list[Message] = field(default_factory=list)

    async def broadcast(self, message: Message) -> int:
        self.messages.append(message)
        return 0


@dataclass
class StepClock:
    """Deterministic clock advancing one second per call."""

    start: datetime = field(default_factory=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc))
    calls: int = 0

    def now(self) -> datetime:
        value = self.start + timedelta(seconds=self.calls)
        self.calls += 1
        return value


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def store(storage: FakeStorage) -> SubscriptionStore:
    return SubscriptionStore(storage)


@pytest.fixture
def push_sender() -> FakePushSender:
    return FakePushSender()
