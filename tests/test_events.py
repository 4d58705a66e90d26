from __future__ import annotations

import logging

import pytest

from vacsite.cache.events import ALL_RESOURCES, Broadcaster


def test_throwing_listener_does_not_block_others(broadcaster: Broadcaster, caplog: pytest.LogCaptureFixture) -> None:
    calls: list[str] = []

    def explode() -> None:
        raise RuntimeError("boom")

    broadcaster.subscribe("site_settings", explode)
    broadcaster.subscribe("site_settings", lambda: calls.append("second"))

    with caplog.at_level(logging.ERROR, logger="vacsite.cache.events"):
        assert broadcaster.emit("site_settings") == 2
        assert broadcaster.emit("site_settings") == 2

    assert calls == ["second", "second"]
    assert "Invalidation listener for site_settings raised" in caplog.text


def test_unsubscribe_is_idempotent_and_scoped(broadcaster: Broadcaster) -> None:
    calls: list[str] = []

    def listener() -> None:
        calls.append("x")

    unsubscribe_first = broadcaster.subscribe("footer", listener)
    broadcaster.subscribe("footer", listener)
    assert broadcaster.listener_count("footer") == 2

    unsubscribe_first()
    unsubscribe_first()

    assert broadcaster.listener_count("footer") == 1
    broadcaster.emit("footer")
    assert calls == ["x"]


def test_unsubscribing_last_listener_leaves_nothing_behind(broadcaster: Broadcaster) -> None:
    unsubscribe = broadcaster.subscribe("hero_banner:home", lambda: None)
    unsubscribe()
    assert broadcaster.listener_count() == 0
    assert broadcaster.emit("hero_banner:home") == 0


def test_signals_are_scoped_to_resource(broadcaster: Broadcaster) -> None:
    calls: list[str] = []
    broadcaster.subscribe("footer:legal", lambda: calls.append("legal"))
    broadcaster.subscribe("footer:quick_links", lambda: calls.append("quick"))

    broadcaster.emit("footer:legal")

    assert calls == ["legal"]


def test_wildcard_listener_hears_every_resource(broadcaster: Broadcaster) -> None:
    calls: list[str] = []
    broadcaster.subscribe(ALL_RESOURCES, lambda: calls.append("any"))

    broadcaster.emit("site_settings")
    broadcaster.receive("testimonials")

    assert calls == ["any", "any"]


def test_local_and_external_signals_reach_the_same_listener(broadcaster: Broadcaster) -> None:
    calls: list[str] = []
    broadcaster.subscribe("site_settings", lambda: calls.append("x"))

    broadcaster.emit("site_settings")
    broadcaster.receive("site_settings")

    assert calls == ["x", "x"]


def test_listener_unsubscribing_during_delivery(broadcaster: Broadcaster) -> None:
    calls: list[str] = []
    unsubscribers: list = []

    def first() -> None:
        calls.append("first")
        unsubscribers[1]()

    unsubscribers.append(broadcaster.subscribe("footer", first))
    unsubscribers.append(broadcaster.subscribe("footer", lambda: calls.append("second")))

    broadcaster.emit("footer")
    broadcaster.emit("footer")

    assert calls == ["first", "first"]
