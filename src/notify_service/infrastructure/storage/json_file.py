"""Subscriptions persisted as a single JSON array on local disk."""
from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from notify_service.application.exceptions import StorageReadFailure, StorageWriteFailure

logger = logging.getLogger(__name__)


class JsonFileSubscriptionStorage:
    """Implements application.ports.storage.SubscriptionStorage.

    Single-process only: every write replaces the whole file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def read(self) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, records: list[dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write_sync, records)

    def _read_sync(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            parsed = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageReadFailure(f"{self._path}: {exc}") from exc
        if not isinstance(parsed, list):
            raise StorageReadFailure(f"{self._path}: expected a JSON array")
        return parsed

    def _write_sync(self, records: list[dict[str, Any]]) -> None:
        raw = json.dumps(records, indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(raw)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageWriteFailure(f"{self._path}: {exc}") from exc
        logger.debug("Wrote %d subscriptions to %s", len(records), self._path)
