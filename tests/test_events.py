"""
Tests for the event bus
"""

import pytest

from solar_gestures.core.events import EventBus, Events


@pytest.fixture
def bus():
    return EventBus(max_history=5)


class TestEventBus:

    def test_emit_to_subscriber(self, bus):
        received = []
        bus.subscribe(Events.GESTURE_CHANGED, lambda **kw: received.append(kw))
        bus.emit(Events.GESTURE_CHANGED, previous="IDLE", current="OPEN")
        assert received == [{"previous": "IDLE", "current": "OPEN"}]

    def test_priority_order(self, bus):
        order = []
        bus.subscribe("e", lambda **_: order.append("low"), priority=0)
        bus.subscribe("e", lambda **_: order.append("high"), priority=10)
        bus.emit("e")
        assert order == ["high", "low"]

    def test_unsubscribe(self, bus):
        calls = []

        def handler(**_):
            calls.append(1)

        bus.subscribe("e", handler)
        bus.unsubscribe("e", handler)
        bus.emit("e")
        assert calls == []

    def test_handler_error_does_not_propagate(self, bus):
        calls = []

        def broken(**_):
            raise ValueError("boom")

        bus.subscribe("e", broken, priority=1)
        bus.subscribe("e", lambda **_: calls.append(1))
        bus.emit("e")
        assert calls == [1]

    def test_disabled_bus_is_silent(self, bus):
        calls = []
        bus.subscribe("e", lambda **_: calls.append(1))
        bus.set_enabled(False)
        bus.emit("e")
        assert calls == []
        assert bus.get_history() == []

    def test_history_bounded(self, bus):
        for i in range(8):
            bus.emit("e", i=i)
        history = bus.get_history(100)
        assert len(history) == 5
        assert history[-1]["data"] == {"i": 7}

    def test_events_named(self, bus):
        bus.emit(Events.HAND_DETECTED)
        bus.emit(Events.HAND_LOST)
        bus.emit(Events.HAND_DETECTED)
        assert len(bus.events_named(Events.HAND_DETECTED)) == 2

    def test_clear_and_count(self, bus):
        bus.subscribe("a", lambda **_: None)
        bus.subscribe("b", lambda **_: None)
        assert bus.listener_count == 2
        bus.clear("a")
        assert bus.listener_count == 1
        bus.clear()
        assert bus.listener_count == 0

    def test_buses_are_independent(self):
        a, b = EventBus(), EventBus()
        a.subscribe("e", lambda **_: None)
        assert b.listener_count == 0
