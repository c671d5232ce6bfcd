from __future__ import annotations

from typing import Any, Protocol


class SubscriptionStorage(Protocol):
    """Durable backing for the subscription set; writes replace everything."""

    async def read(self) -> list[dict[str, Any]]: ...

    async def write(self, records: list[dict[str, Any]]) -> None: ...
