"""
Event bus tests
"""

import uuid

import pytest

from careshift.core.events import DomainEvent, EventBus, ShiftCompleted, ShiftStarted
from careshift.core.timeutils import utcnow


def started_event() -> ShiftStarted:
    return ShiftStarted(shift_id=uuid.uuid4(), user_id=uuid.uuid4(), location_id=None, started_at=utcnow())


def completed_event() -> ShiftCompleted:
    return ShiftCompleted(
        shift_id=uuid.uuid4(), user_id=uuid.uuid4(),
        total_hours=1.5, total_shifts=1, average_hours=1.5,
    )


@pytest.mark.asyncio
async def test_publish_reaches_subscribers():
    bus = EventBus()
    received = []

    async def handler(event):
        received.append(event)

    bus.subscribe(ShiftStarted, handler)
    event = started_event()
    delivered = await bus.publish(event)

    assert delivered == 1
    assert received == [event]
    assert event.to_dict()["event_type"] == "ShiftStarted"
    assert event.to_dict()["location_id"] is None


@pytest.mark.asyncio
async def test_subscribers_only_see_their_event_class():
    bus = EventBus()
    received = []

    async def handler(event):
        received.append(event)

    bus.subscribe(ShiftCompleted, handler)

    assert await bus.publish(started_event()) == 0
    assert received == []


@pytest.mark.asyncio
async def test_base_class_subscription_sees_every_event():
    bus = EventBus()
    names = []

    async def audit(event):
        names.append(event.name)

    bus.subscribe(DomainEvent, audit)
    await bus.publish(started_event())
    await bus.publish(completed_event())

    assert names == ["ShiftStarted", "ShiftCompleted"]


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    received = []

    async def broken(event):
        raise RuntimeError("boom")

    async def handler(event):
        received.append(event.total_hours)

    bus.subscribe(ShiftCompleted, broken)
    bus.subscribe(ShiftCompleted, handler)
    delivered = await bus.publish(completed_event())

    assert received == [1.5]
    assert delivered == 1


@pytest.mark.asyncio
async def test_unsubscribe():
    bus = EventBus()
    received = []

    async def handler(event):
        received.append(event)

    bus.subscribe(ShiftStarted, handler)
    bus.unsubscribe(ShiftStarted, handler)
    await bus.publish(started_event())

    assert received == []
