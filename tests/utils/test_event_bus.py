import logging
from unittest.mock import AsyncMock

import pytest

from models.events import NetworkEvent
from utils.event_bus import ALL_EVENTS, EventBus


def make_event(event_type: str = "ShipmentDocked") -> NetworkEvent:
    return NetworkEvent(event_type=event_type, transaction_id="tx-1", payload={"outcome": "DOCKED"})


def test_event_bus_initialization():
    bus = EventBus()
    assert bus.subscribers == {}


def test_subscribe_and_duplicate_ignored(caplog):
    """The same callback is stored once per event type."""
    bus = EventBus()
    callback = AsyncMock(name="cb")

    with caplog.at_level(logging.WARNING):
        bus.subscribe("ShipmentDocked", callback)
        bus.subscribe("ShipmentDocked", callback)

    assert bus.subscribers["ShipmentDocked"] == [callback]
    assert "already subscribed" in caplog.text


def test_subscribe_rejects_non_callable():
    bus = EventBus()
    with pytest.raises(TypeError):
        bus.subscribe("ShipmentDocked", "not callable")


def test_unsubscribe_removes_empty_list():
    bus = EventBus()
    callback = AsyncMock(name="cb")
    bus.subscribe("ShipmentDocked", callback)

    bus.unsubscribe("ShipmentDocked", callback)

    assert "ShipmentDocked" not in bus.subscribers


def test_unsubscribe_unknown_callback_warns(caplog):
    bus = EventBus()
    with caplog.at_level(logging.WARNING):
        bus.unsubscribe("ShipmentDocked", AsyncMock(name="ghost"))
    assert "not found" in caplog.text


@pytest.mark.asyncio
async def test_publish_reaches_typed_and_wildcard_subscribers():
    bus = EventBus()
    docked = AsyncMock(name="docked")
    everything = AsyncMock(name="everything")
    arrived = AsyncMock(name="arrived")
    bus.subscribe("ShipmentDocked", docked)
    bus.subscribe(ALL_EVENTS, everything)
    bus.subscribe("ShipmentArrived", arrived)
    event = make_event()

    await bus.publish(event)

    docked.assert_awaited_once_with(event)
    everything.assert_awaited_once_with(event)
    arrived.assert_not_awaited()


@pytest.mark.asyncio
async def test_publish_isolates_failing_subscriber(caplog):
    """One subscriber raising does not stop delivery to the others."""
    bus = EventBus()
    failing = AsyncMock(name="failing", side_effect=RuntimeError("boom"))
    healthy = AsyncMock(name="healthy")
    bus.subscribe("ShipmentDocked", failing)
    bus.subscribe("ShipmentDocked", healthy)

    with caplog.at_level(logging.ERROR):
        await bus.publish(make_event())

    healthy.assert_awaited_once()
    assert "boom" in caplog.text


@pytest.mark.asyncio
async def test_publish_rejects_non_event():
    bus = EventBus()
    with pytest.raises(TypeError):
        await bus.publish({"event_type": "ShipmentDocked"})
