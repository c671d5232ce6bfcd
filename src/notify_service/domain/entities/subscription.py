from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Subscription:
    """Browser-issued push subscription; ``keys`` is opaque to this service."""

    endpoint: str
    keys: dict[str, Any] = field(default_factory=dict)
    expiration_time: float | None = None

    def to_record(self) -> dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "expirationTime": self.expiration_time,
            "keys": self.keys,
        }

    def to_push_info(self) -> dict[str, Any]:
        return {"endpoint": self.endpoint, "keys": self.keys}
