from __future__ import annotations

from enum import StrEnum


class PrunePolicy(StrEnum):
    ANY = "any"  # prune on every failed delivery
    GONE = "gone"  # prune only when the push service reports 404/410


class FrameType(StrEnum):
    HISTORY = "history"
    MESSAGE = "message"
