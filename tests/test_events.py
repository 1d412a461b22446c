import pytest

from tessera.events import EventDispatcher, LifecycleEvents


@pytest.fixture
def events():
    return EventDispatcher()


def test_listeners_are_called_in_subscription_order(events):
    calls = []
    events.subscribe("app.ready", lambda payload: calls.append(("first", payload)))
    events.subscribe("app.ready", lambda payload: calls.append(("second", payload)))

    events.dispatch("app.ready", {"name": "Dino"})

    assert calls == [("first", {"name": "Dino"}), ("second", {"name": "Dino"})]


def test_dispatch_without_payload_passes_empty_mapping(events):
    calls = []
    events.subscribe("app.ready", calls.append)

    events.dispatch("app.ready")

    assert calls == [{}]


def test_dispatch_without_listeners_does_nothing(events):
    events.dispatch("nobody.listens", {"x": 1})

    assert not events.has_listeners("nobody.listens")
    assert events.listeners("nobody.listens") == []


def test_listeners_cannot_change_the_payload_seen_by_others(events):
    seen = []

    def greedy(payload):
        payload["stolen"] = True

    events.subscribe("app.ready", greedy)
    events.subscribe("app.ready", seen.append)
    payload = {"name": "Dino"}

    events.dispatch("app.ready", payload)

    assert seen == [{"name": "Dino"}]
    assert payload == {"name": "Dino"}


def test_unsubscribe_removes_listener(events):
    calls = []

    def listener(payload):
        calls.append(payload)

    events.subscribe(LifecycleEvents.CACHE_HIT, listener)
    events.unsubscribe(LifecycleEvents.CACHE_HIT, listener)
    events.unsubscribe(LifecycleEvents.CACHE_HIT, listener)
    events.unsubscribe("never.subscribed", listener)

    events.dispatch(LifecycleEvents.CACHE_HIT, {"path": "app.json"})

    assert calls == []
    assert not events.has_listeners(LifecycleEvents.CACHE_HIT)


def test_listeners_returns_a_copy(events):
    events.subscribe("app.ready", print)

    events.listeners("app.ready").clear()

    assert events.listeners("app.ready") == [print]


def test_listener_errors_propagate(events):
    def broken(payload):
        raise RuntimeError("boom")

    events.subscribe("app.ready", broken)

    with pytest.raises(RuntimeError, match="boom"):
        events.dispatch("app.ready")
