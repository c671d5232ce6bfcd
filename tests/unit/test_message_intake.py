from __future__ import annotations

import pytest

from notify_service.application.exceptions import EmptyMessage, PayloadTooLarge
from notify_service.services.history import HistoryBuffer
from notify_service.services.message_intake import MessageIntake
from notify_service.services.push_dispatcher import PushDispatcher
from tests.conftest import FakeBroadcaster, StepClock, make_subscription_record


@pytest.fixture
def broadcaster() -> FakeBroadcaster:
    return FakeBroadcaster()


@pytest.fixture
def history() -> HistoryBuffer:
    return HistoryBuffer()


@pytest.fixture
def intake(store, push_sender, history, broadcaster) -> MessageIntake:
    return MessageIntake(
        history,
        broadcaster,
        PushDispatcher(store, push_sender),
        clock=StepClock(),
        max_image_bytes=64,
    )


@pytest.mark.parametrize(
    ("text", "image"),
    [("hi", ""), ("", "data:image/png;base64,AAAA"), ("hi", "data:image/png;base64,AAAA")],
)
def test_create_accepts_text_or_image(intake, text, image):
    message = intake.create("Ada", text, image)

    assert message.text == text
    assert message.image_data_url == image
    assert message.sender == "Ada"


@pytest.mark.parametrize(("text", "image"), [("", ""), ("   ", " "), (None, None)])
def test_create_rejects_empty_message(intake, text, image):
    with pytest.raises(EmptyMessage):
        intake.create("Ada", text, image)


@pytest.mark.parametrize("sender", ["", "   ", None])
def test_create_defaults_blank_sender(intake, sender):
    assert intake.create(sender, "hi", "").sender == "Anonymous"


def test_create_stamps_unique_id_and_time(intake):
    first = intake.create("Ada", "one", "")
    second = intake.create("Ada", "two", "")

    assert first.id != second.id
    assert first.created_at < second.created_at
    assert first.created_at.tzinfo is not None


def test_create_rejects_oversized_image(intake):
    with pytest.raises(PayloadTooLarge):
        intake.create("Ada", "", "data:image/png;base64," + "A" * 100)


@pytest.mark.asyncio
async def test_submit_fans_out_to_history_realtime_and_push(intake, store, push_sender, history, broadcaster):
    await store.add(make_subscription_record("https://push.example/a"))

    message = await intake.submit("Ada", "hello", "")
    await intake.drain()

    assert history.recent(1) == [message]
    assert broadcaster.messages == [message]
    assert [endpoint for endpoint, _ in push_sender.sent] == ["https://push.example/a"]
    assert intake.pending_dispatches == 0


@pytest.mark.asyncio
async def test_submit_succeeds_when_dispatch_blows_up(history, broadcaster):
    class _ExplodingDispatcher:
        async def dispatch(self, message):
            raise RuntimeError("push service down")

    intake = MessageIntake(history, broadcaster, _ExplodingDispatcher())

    message = await intake.submit("Ada", "hello", "")
    await intake.drain()

    assert history.recent(1) == [message]
    assert broadcaster.messages == [message]


@pytest.mark.asyncio
async def test_submit_rejects_empty_without_side_effects(intake, history, broadcaster):
    with pytest.raises(EmptyMessage):
        await intake.submit("Ada", "", "")

    assert len(history) == 0
    assert broadcaster.messages == []
