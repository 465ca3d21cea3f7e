"""Tests for the event bus."""
from dataclasses import dataclass

import pytest

from porttown.core.events import (
    EventBus, Event, GoodsChangedEvent, TownDataChangedEvent,
)


@dataclass
class PingEvent(Event):
    count: int = 0


class TestEventBus:
    """Tests for EventBus dispatch."""

    def test_publish_to_subscriber(self):
        """Test a subscriber receives published events of its type."""
        bus = EventBus()
        received = []
        bus.subscribe(TownDataChangedEvent, received.append)

        bus.publish(TownDataChangedEvent(town_name="Saltmarsh"))
        bus.publish(GoodsChangedEvent(town_name="Saltmarsh", good_id="fish", quantity=3))

        assert received == [TownDataChangedEvent(town_name="Saltmarsh")]

    def test_base_class_subscription(self):
        """Test handlers registered for Event receive every event."""
        bus = EventBus()
        received = []
        bus.subscribe(Event, received.append)

        bus.publish(TownDataChangedEvent(town_name="Saltmarsh"))
        bus.publish(PingEvent())

        assert len(received) == 2

    def test_unsubscribe(self):
        """Test unsubscribed handlers are not called."""
        bus = EventBus()
        received = []
        bus.subscribe(PingEvent, received.append)
        bus.unsubscribe(PingEvent, received.append)

        bus.publish(PingEvent())

        assert received == []

    def test_listener_events_delivered_after_current(self):
        """Test an event raised by a listener reaches everyone after the current event."""
        bus = EventBus()
        order = []

        def first(event):
            order.append(("first", event.count))
            if event.count < 2:
                bus.publish(PingEvent(count=event.count + 1))

        def second(event):
            order.append(("second", event.count))

        bus.subscribe(PingEvent, first)
        bus.subscribe(PingEvent, second)
        bus.publish(PingEvent(count=1))

        assert order == [("first", 1), ("second", 1), ("first", 2), ("second", 2)]

    def test_failing_listener_drops_queued_events(self):
        """Test a listener error does not leak queued events into the next publish."""
        bus = EventBus()
        received = []

        def explode(event):
            if event.count == 1:
                bus.publish(PingEvent(count=99))
                raise RuntimeError("boom")
            received.append(event.count)

        bus.subscribe(PingEvent, explode)
        with pytest.raises(RuntimeError):
            bus.publish(PingEvent(count=1))
        bus.publish(PingEvent(count=2))

        assert received == [2]

    def test_clear(self):
        """Test clear removes handlers."""
        bus = EventBus()
        received = []
        bus.subscribe(PingEvent, received.append)
        bus.clear()

        bus.publish(PingEvent())

        assert received == []
