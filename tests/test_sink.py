import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from datalayer.sink import (
    DataLayer,
    EventBus,
    apply_messages,
    create_event,
    create_pixel_bus,
)


class CountingSink:
    """Приёмник, который считает вызовы enqueue"""

    def __init__(self):
        self.calls = []

    def enqueue(self, payload):
        self.calls.append(payload)


def test_eventbus_immutability():
    """subscribe возвращает новую шину"""
    bus1 = EventBus()
    bus2 = bus1.subscribe(DataLayer())

    assert bus1.sinks == ()
    assert len(bus2.sinks) == 1
    assert bus1 is not bus2


def test_create_event_shape():
    raw = create_event("vtex:promoView", {"promotions": []}, "https://a.b")
    assert raw == {
        "origin": "https://a.b",
        "data": {"promotions": [], "eventName": "vtex:promoView"},
    }


def test_publish_pushes_into_every_sink():
    first, second = CountingSink(), CountingSink()
    bus = EventBus().subscribe(first).subscribe(second)

    result = bus.publish(create_event("vtex:promoView", {"promotions": [{"id": "p1"}]}))

    assert result.is_some()
    assert first.calls == [result.value]
    assert second.calls == [result.value]


def test_unknown_event_does_not_touch_sink():
    sink = CountingSink()
    bus = EventBus().subscribe(sink)

    assert bus.publish(create_event("vtex:somethingElse", {})).is_none()
    assert bus.publish({"garbage": True}).is_none()
    assert sink.calls == []


def test_user_data_reaches_sink_only_when_authenticated():
    sink = CountingSink()
    bus = EventBus().subscribe(sink)

    bus.publish(create_event("vtex:userData", {"isAuthenticated": False, "id": "u1"}))
    assert sink.calls == []

    bus.publish(create_event("vtex:userData", {"isAuthenticated": True, "id": "u1"}))
    assert sink.calls == [{"event": "userData", "userId": "u1"}]


def test_apply_messages_in_order():
    layer = DataLayer()
    bus = create_pixel_bus(layer)
    messages = (
        create_event("vtex:pageView", {"pageUrl": "https://a.b/x"}, "https://a.b"),
        create_event("vtex:unknown", {}),
        create_event("vtex:promotionClick", {"promotions": []}),
    )

    pushed = apply_messages(bus, messages)

    assert tuple(p["event"] for p in pushed) == ("pageViewVirtual", "promotionClick")
    assert layer.events() == ("pageViewVirtual", "promotionClick")
    assert len(layer) == 2


def test_create_pixel_bus_default_sink():
    bus = create_pixel_bus()
    assert len(bus.sinks) == 1
    assert isinstance(bus.sinks[0], DataLayer)
