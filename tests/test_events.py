"""
Tests for the event bus.
"""

import pytest

from player_api import set_debug
from player_api.events import DispatchPolicy, EventBus, PlayerEvent


class TestSubscription:
    """on / once / off."""

    def test_on_delivers_in_registration_order(self):
        bus = EventBus()
        order = []

        bus.on("x", lambda p: order.append("first"))
        bus.on("x", lambda p: order.append("second"))
        bus.trigger("x", {})

        assert order == ["first", "second"]

    def test_non_callable_rejected(self):
        bus = EventBus()
        with pytest.raises(TypeError):
            bus.on("x", "not callable")

    def test_once_fires_a_single_time(self):
        bus = EventBus()
        calls = []

        bus.once("x", calls.append)
        bus.trigger("x", 1)
        bus.trigger("x", 2)

        assert calls == [1]
        assert not bus.has_listeners("x")

    def test_off_with_no_arguments_clears_everything(self):
        bus = EventBus()
        calls = []
        bus.on("a", calls.append)
        bus.on("b", calls.append)
        bus.on("all", lambda name, p: calls.append(name))

        assert bus.off() == 3
        bus.trigger("a", 1)
        bus.trigger("b", 2)

        assert calls == []
        assert not bus.has_listeners()

    def test_off_by_name(self):
        bus = EventBus()
        calls = []
        bus.on("a", calls.append)
        bus.on("a", calls.append)
        bus.on("b", calls.append)

        assert bus.off("a") == 2
        bus.trigger("a", "a")
        bus.trigger("b", "b")

        assert calls == ["b"]

    def test_off_by_name_and_callback(self):
        bus = EventBus()
        kept, dropped = [], []
        bus.on("a", kept.append)
        bus.on("a", dropped.append)

        bus.off("a", dropped.append)
        bus.trigger("a", 1)

        assert kept == [1]
        assert dropped == []

    def test_off_by_context_only(self):
        bus = EventBus()
        owner, other = object(), object()
        calls = []
        bus.on("a", lambda p: calls.append("owner-a"), owner)
        bus.on("b", lambda p: calls.append("owner-b"), owner)
        bus.on("a", lambda p: calls.append("other"), other)

        assert bus.off(context=owner) == 2
        bus.trigger("a", None)
        bus.trigger("b", None)

        assert calls == ["other"]

    def test_off_callback_removes_once_subscription(self):
        bus = EventBus()
        calls = []
        bus.once("a", calls.append)

        bus.off("a", calls.append)
        bus.trigger("a", 1)

        assert calls == []

    def test_enum_and_string_names_are_interchangeable(self):
        bus = EventBus()
        calls = []
        bus.on(PlayerEvent.READY, calls.append)

        bus.trigger("ready", "payload")

        assert calls == ["payload"]


class TestWildcard:
    """The "all" channel."""

    def test_all_receives_name_and_payload_after_named(self):
        bus = EventBus()
        order = []
        bus.on("all", lambda name, p: order.append(("all", name, p)))
        bus.on("x", lambda p: order.append(("x", p)))

        bus.trigger("x", 7)

        assert order == [("x", 7), ("all", "x", 7)]

    def test_triggering_all_does_not_double_deliver(self):
        bus = EventBus()
        calls = []
        bus.on("all", lambda *args: calls.append(args))

        bus.trigger("all", 1)

        assert calls == [(1,)]


class TestFaultIsolation:
    """trigger vs trigger_safe."""

    def test_trigger_propagates(self):
        bus = EventBus()

        def boom(payload):
            raise ValueError("boom")

        bus.on("x", boom)
        with pytest.raises(ValueError):
            bus.trigger("x", {})

    def test_trigger_safe_continues_after_fault(self):
        reported = []
        bus = EventBus(reporter=lambda e, name, sub: reported.append((type(e), name)))
        calls = []

        def boom(payload):
            raise ValueError("boom")

        bus.on("x", boom)
        bus.on("x", calls.append)
        bus.trigger_safe("x", {})

        assert calls == [{}]
        assert reported == [(ValueError, "x")]

    def test_trigger_safe_isolates_wildcard_faults(self):
        bus = EventBus(reporter=lambda *a: None)
        calls = []
        bus.on("all", lambda name, p: 1 / 0)
        bus.on("all", lambda name, p: calls.append(name))

        bus.trigger_safe("x", {})

        assert calls == ["x"]

    def test_subscription_removed_mid_dispatch_is_skipped(self):
        bus = EventBus()
        calls = []

        def second(payload):
            calls.append("second")

        def first(payload):
            calls.append("first")
            bus.off("x", second)

        bus.on("x", first)
        bus.on("x", second)
        bus.trigger("x", None)

        assert calls == ["first"]

    def test_subscribing_mid_dispatch_waits_for_next_trigger(self):
        bus = EventBus()
        calls = []

        def first(payload):
            calls.append("first")
            bus.on("x", lambda p: calls.append("late"))

        bus.on("x", first)
        bus.trigger("x", None)
        assert calls == ["first"]

        bus.off("x", first)
        bus.trigger("x", None)
        assert calls == ["first", "late"]


class TestDispatchPolicy:
    """emit() follows the injected policy."""

    def boom(self, payload):
        raise RuntimeError("boom")

    def test_safe_policy_contains(self):
        bus = EventBus(policy=DispatchPolicy.SAFE, reporter=lambda *a: None)
        bus.on("x", self.boom)
        bus.emit("x", {})

    def test_unsafe_policy_raises(self):
        bus = EventBus(policy=DispatchPolicy.UNSAFE)
        bus.on("x", self.boom)
        with pytest.raises(RuntimeError):
            bus.emit("x", {})

    def test_auto_follows_debug_flag(self):
        bus = EventBus(reporter=lambda *a: None)
        bus.on("x", self.boom)

        bus.emit("x", {})

        set_debug(True)
        with pytest.raises(RuntimeError):
            bus.emit("x", {})

        set_debug(False)
        bus.emit("x", {})

    def test_auto_resolution(self):
        assert DispatchPolicy.AUTO.resolve() is DispatchPolicy.SAFE
        set_debug(True)
        assert DispatchPolicy.AUTO.resolve() is DispatchPolicy.UNSAFE
        assert DispatchPolicy.SAFE.resolve() is DispatchPolicy.SAFE
