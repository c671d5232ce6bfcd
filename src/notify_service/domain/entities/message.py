from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    sender: str
    text: str
    image_data_url: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Wire representation shared by the HTTP API, realtime frames and push payloads."""
        return {
            "id": str(self.id),
            "sender": self.sender,
            "text": self.text,
            "imageDataUrl": self.image_data_url,
            "createdAt": self.created_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        }
