from scrollspy.services.event_bus import EventBus, SpyEvent


def test_subscribe_publish_basic():
    bus = EventBus()
    received = []

    def handler(evt):
        received.append((evt.name, evt.payload))

    bus.subscribe(SpyEvent.ACTIVE_CHANGED, handler)
    bus.publish(SpyEvent.ACTIVE_CHANGED, {"id": "api"})
    assert received == [(SpyEvent.ACTIVE_CHANGED.value, {"id": "api"})]


def test_enum_and_string_names_are_interchangeable():
    bus = EventBus()
    received = []
    bus.subscribe("section_entered", received.append)
    bus.publish(SpyEvent.SECTION_ENTERED, "usage")
    assert [e.payload for e in received] == ["usage"]


def test_once_subscription():
    bus = EventBus()
    count = 0

    def incr(_):
        nonlocal count
        count += 1

    bus.subscribe(SpyEvent.SCROLL_ENDED, incr, once=True)
    bus.publish(SpyEvent.SCROLL_ENDED)
    bus.publish(SpyEvent.SCROLL_ENDED)
    assert count == 1
    assert bus.subscriber_count(SpyEvent.SCROLL_ENDED) == 0


def test_unsubscribe():
    bus = EventBus()
    received = []
    sub = bus.subscribe("custom", received.append)
    bus.unsubscribe(sub)
    bus.publish("custom", 1)
    assert received == []
    assert not sub.active
    assert "custom" not in bus.list_events()


def test_error_isolation():
    bus = EventBus()
    order = []

    def bad(_):
        order.append("bad")
        raise RuntimeError("boom")

    def good(_):
        order.append("good")

    bus.subscribe("custom", bad)
    bus.subscribe("custom", good)
    bus.publish("custom", 123)
    # Both handlers executed despite error
    assert order == ["bad", "good"]
    assert len(bus.errors) == 1
    bus.clear()
    assert bus.errors == []
