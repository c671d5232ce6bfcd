from __future__ import annotations

import json

import pytest

from notify_service.application.exceptions import StorageReadFailure, StorageWriteFailure
from notify_service.infrastructure.storage.json_file import JsonFileSubscriptionStorage
from tests.conftest import make_subscription_record


@pytest.mark.asyncio
async def test_missing_file_reads_as_empty(tmp_path):
    storage = JsonFileSubscriptionStorage(tmp_path / "subscriptions.json")

    assert await storage.read() == []


@pytest.mark.asyncio
async def test_write_replaces_whole_file_and_creates_parent(tmp_path):
    path = tmp_path / "data" / "subscriptions.json"
    storage = JsonFileSubscriptionStorage(path)

    await storage.write([make_subscription_record("https://push.example/a")])
    await storage.write([make_subscription_record("https://push.example/b")])

    assert [r["endpoint"] for r in json.loads(path.read_text())] == ["https://push.example/b"]
    assert await storage.read() == [make_subscription_record("https://push.example/b")]
    assert [p.name for p in path.parent.iterdir()] == ["subscriptions.json"]


@pytest.mark.parametrize("content", ["{not json", '{"endpoint": "x"}', "\xff\xfe"])
@pytest.mark.asyncio
async def test_corrupt_file_raises_read_failure(tmp_path, content):
    path = tmp_path / "subscriptions.json"
    path.write_text(content, encoding="latin-1")

    with pytest.raises(StorageReadFailure):
        await JsonFileSubscriptionStorage(path).read()


@pytest.mark.asyncio
async def test_unwritable_location_raises_write_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    storage = JsonFileSubscriptionStorage(blocker / "subscriptions.json")

    with pytest.raises(StorageWriteFailure):
        await storage.write([])
