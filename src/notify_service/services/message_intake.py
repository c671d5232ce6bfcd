from __future__ import annotations

import asyncio
import logging
import uuid

from notify_service.application.exceptions import EmptyMessage, PayloadTooLarge
from notify_service.application.ports.clock import Clock, SystemClock
from notify_service.application.ports.realtime import Broadcaster
from notify_service.domain.entities.message import Message
from notify_service.services.history import HistoryBuffer
from notify_service.services.push_dispatcher import PushDispatcher

logger = logging.getLogger(__name__)

ANONYMOUS_SENDER = "Anonymous"


class MessageIntake:
    """Validates inbound messages and fans them out.

    Realtime broadcast is awaited before ``submit`` returns; push delivery
    runs as a tracked background batch so the sender is acknowledged
    without waiting on push services.
    """

    def __init__(
        self,
        history: HistoryBuffer,
        broadcaster: Broadcaster,
        dispatcher: PushDispatcher,
        *,
        clock: Clock | None = None,
        max_image_bytes: int | None = None,
    ) -> None:
        self._history = history
        self._broadcaster = broadcaster
        self._dispatcher = dispatcher
        self._clock = clock or SystemClock()
        self._max_image_bytes = max_image_bytes
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending_dispatches(self) -> int:
        return len(self._pending)

    def create(self, sender: str | None, text: str | None, image: str | None) -> Message:
        text = (text or "").strip()
        image = (image or "").strip()
        if not text and not image:
            raise EmptyMessage("Please include text or an image.")
        if self._max_image_bytes is not None and len(image.encode()) > self._max_image_bytes:
            raise PayloadTooLarge("Image is too large.")

        return Message(
            id=uuid.uuid4(),
            sender=(sender or "").strip() or ANONYMOUS_SENDER,
            text=text,
            image_data_url=image,
            created_at=self._clock.now(),
        )

    async def submit(self, sender: str | None, text: str | None, image: str | None) -> Message:
        message = self.create(sender, text, image)
        self._history.append(message)

        await self._broadcaster.broadcast(message)

        task = asyncio.create_task(self._dispatch(message), name=f"push-dispatch-{message.id}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return message

    async def drain(self) -> None:
        """Wait for every in-flight push batch to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _dispatch(self, message: Message) -> None:
        try:
            await self._dispatcher.dispatch(message)
        except Exception:
            logger.exception("Push dispatch failed for message %s", message.id)
