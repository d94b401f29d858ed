"""
Tests for EventChannel: ordering, handler isolation, once-subscriptions, cleanup.
"""

from __future__ import annotations

import pytest

from storefront.services.events import EventChannel


def test_publish_without_subscribers_is_noop(events: EventChannel) -> None:
    events.publish("nobody:listens", {"x": 1})
    assert events.count("nobody:listens") == 0


def test_handlers_run_in_subscription_order(events: EventChannel) -> None:
    seen: list[str] = []
    events.subscribe("order", lambda p: seen.append("a"))
    events.subscribe("order", lambda p: seen.append("b"))
    events.subscribe("order", lambda p: seen.append("c"))
    events.publish("order")
    assert seen == ["a", "b", "c"]


def test_raising_handler_does_not_stop_siblings(events: EventChannel) -> None:
    """A handler that raises is logged; the others still run and the publisher sees nothing."""
    counter = {"n": 0}

    def good(_: object) -> None:
        counter["n"] += 1

    def bad(_: object) -> None:
        counter["n"] += 1
        raise RuntimeError("boom")

    events.subscribe("evt", good)
    events.subscribe("evt", bad)
    events.subscribe("evt", good)
    events.publish("evt", None)
    assert counter["n"] == 3


def test_unsubscribe_removes_empty_channel(events: EventChannel) -> None:
    off = events.subscribe("temp", lambda p: None)
    assert events.count("temp") == 1
    assert "temp" in events.channels()
    off()
    assert events.count("temp") == 0
    assert "temp" not in events.channels()
    off()  # second call is harmless


def test_subscribe_once_fires_once(events: EventChannel) -> None:
    calls: list[object] = []
    events.subscribe_once("login", calls.append)
    events.publish("login", 1)
    events.publish("login", 2)
    assert calls == [1]
    assert events.count("login") == 0


def test_subscribe_once_can_resubscribe_inside_handler(events: EventChannel) -> None:
    calls: list[object] = []

    def handler(payload: object) -> None:
        calls.append(payload)
        events.subscribe_once("ping", handler)

    events.subscribe_once("ping", handler)
    events.publish("ping", "first")
    assert calls == ["first"]
    assert events.count("ping") == 1
    events.publish("ping", "second")
    assert calls == ["first", "second"]


def test_subscription_added_during_publish_is_not_invoked(events: EventChannel) -> None:
    late: list[object] = []

    def adder(_: object) -> None:
        events.subscribe("grow", late.append)

    events.subscribe("grow", adder)
    events.publish("grow", "x")
    assert late == []
    events.publish("grow", "y")
    assert late == ["y"]


def test_subscription_removed_during_publish_is_skipped(events: EventChannel) -> None:
    seen: list[str] = []
    offs: dict[str, object] = {}

    def first(_: object) -> None:
        seen.append("first")
        offs["second"]()  # type: ignore[operator]

    events.subscribe("rm", first)
    offs["second"] = events.subscribe("rm", lambda p: seen.append("second"))
    events.publish("rm")
    assert seen == ["first"]


def test_unsubscribe_all_and_clear(events: EventChannel) -> None:
    events.subscribe("a", lambda p: None)
    events.subscribe("a", lambda p: None)
    events.subscribe("b", lambda p: None)
    events.unsubscribe_all("a")
    assert events.count("a") == 0
    assert events.count("b") == 1
    events.clear()
    assert events.channels() == []


def test_non_callable_handler_rejected(events: EventChannel) -> None:
    with pytest.raises(TypeError):
        events.subscribe("x", "not callable")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        events.subscribe_once("x", None)  # type: ignore[arg-type]
