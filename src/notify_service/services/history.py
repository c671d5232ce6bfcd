from __future__ import annotations

from collections import deque

from notify_service.domain.entities.message import Message


class HistoryBuffer:
    """Bounded in-memory log of recent messages, oldest evicted first."""

    def __init__(self, capacity: int = 100) -> None:
        self._items: deque[Message] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._items)

    def append(self, message: Message) -> None:
        self._items.append(message)

    def recent(self, n: int) -> list[Message]:
        """Up to the last ``n`` messages, oldest first."""
        if n <= 0:
            return []
        return list(self._items)[-n:]
