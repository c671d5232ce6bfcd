"""Realtime frame envelope."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from notify_service.domain.value_objects.enums import FrameType


class WsOutbound(BaseModel):
    """Server → Client."""

    type: FrameType
    payload: Any = None
