"""
Event bus with wildcard delivery and fault isolation.

Each handle owns one EventBus. Subscriptions are kept per event name in
registration order; subscriptions under "all" receive every event as
``callback(name, *args)`` after the named subscribers have run.

Two dispatch modes:
    trigger       - callbacks run bare; an exception reaches the caller
    trigger_safe  - each callback runs inside its own error boundary;
                    faults are reported and dispatch continues

DispatchPolicy picks between them for ``emit``. AUTO reads the
process-wide debug flag at call time.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from player_api.config import get_settings
from player_api.events.names import ALL_EVENTS
from player_api.monitoring.logging import get_logger

ErrorReporter = Callable[[BaseException, str, "Subscription"], None]


class DispatchPolicy(Enum):
    """How ``EventBus.emit`` treats subscriber exceptions."""

    SAFE = "safe"
    """Contain and report faults; always reach every subscriber."""

    UNSAFE = "unsafe"
    """Let the first fault propagate to the caller."""

    AUTO = "auto"
    """UNSAFE when the process-wide debug flag is on, SAFE otherwise."""

    def resolve(self) -> "DispatchPolicy":
        if self is DispatchPolicy.AUTO:
            return DispatchPolicy.UNSAFE if get_settings().debug else DispatchPolicy.SAFE
        return self


@dataclass(eq=False)
class Subscription:
    """A registered (event, callback, context) triple.

    Attributes:
        event: Event name, or "all" for the wildcard channel.
        callback: Function to call when the event fires.
        context: Optional owner tag, used to remove subscriptions in bulk.
        once: Remove before the first invocation.
    """

    event: str
    callback: Callable[..., Any]
    context: Any = None
    once: bool = False
    active: bool = field(default=True, repr=False)

    def matches(self, callback: Callable[..., Any] | None, context: Any) -> bool:
        if callback is not None and self.callback != callback:
            return False
        if context is not None and self.context is not context:
            return False
        return True

    def __call__(self, *args: Any) -> Any:
        return self.callback(*args)


def _report_to_logger(error: BaseException, event: str, sub: Subscription) -> None:
    get_logger().subscriber_error(
        error,
        event_name=event,
        callback=getattr(sub.callback, "__qualname__", repr(sub.callback)),
    )


class EventBus:
    """Per-handle publish/subscribe.

    Example:
        bus = EventBus()
        bus.on("time", lambda payload: print(payload["position"]))
        bus.on("all", lambda name, payload: print(name))
        bus.trigger_safe("time", {"position": 3.2})
    """

    def __init__(
        self,
        policy: DispatchPolicy = DispatchPolicy.AUTO,
        reporter: ErrorReporter | None = None,
    ):
        """
        Args:
            policy: Dispatch mode used by ``emit``.
            reporter: Receives (error, event_name, subscription) for every
                fault contained by ``trigger_safe``. Defaults to the
                structured logger.
        """
        self.policy = policy
        self._reporter = reporter or _report_to_logger
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._lock = threading.Lock()

    def on(
        self,
        event: str,
        callback: Callable[..., Any],
        context: Any = None,
    ) -> Subscription:
        """Subscribe ``callback`` to ``event``.

        Raises:
            TypeError: If callback is not callable.
        """
        return self._add(event, callback, context, once=False)

    def once(
        self,
        event: str,
        callback: Callable[..., Any],
        context: Any = None,
    ) -> Subscription:
        """Subscribe ``callback`` for a single delivery of ``event``."""
        return self._add(event, callback, context, once=True)

    def _add(
        self,
        event: str,
        callback: Callable[..., Any],
        context: Any,
        once: bool,
    ) -> Subscription:
        if not callable(callback):
            raise TypeError(f"Callback for '{event}' must be callable")
        key = str(event)
        sub = Subscription(event=key, callback=callback, context=context, once=once)
        with self._lock:
            self._subscriptions.setdefault(key, []).append(sub)
        return sub

    def off(
        self,
        event: str | None = None,
        callback: Callable[..., Any] | None = None,
        context: Any = None,
    ) -> int:
        """Remove subscriptions.

        No arguments clears everything. ``event`` alone clears that name.
        ``callback`` and ``context`` narrow the match further, across all
        names when ``event`` is None.

        Returns:
            Number of subscriptions removed.
        """
        removed = 0
        with self._lock:
            if event is None and callback is None and context is None:
                for subs in self._subscriptions.values():
                    for sub in subs:
                        sub.active = False
                    removed += len(subs)
                self._subscriptions.clear()
                return removed

            names = [str(event)] if event is not None else list(self._subscriptions)
            for name in names:
                subs = self._subscriptions.get(name)
                if not subs:
                    continue
                keep = []
                for sub in subs:
                    if sub.matches(callback, context):
                        sub.active = False
                        removed += 1
                    else:
                        keep.append(sub)
                if keep:
                    self._subscriptions[name] = keep
                else:
                    del self._subscriptions[name]
        return removed

    def listeners(self, event: str) -> list[Subscription]:
        """Subscriptions currently registered under ``event``."""
        with self._lock:
            return list(self._subscriptions.get(str(event), []))

    def has_listeners(self, event: str | None = None) -> bool:
        with self._lock:
            if event is None:
                return any(self._subscriptions.values())
            return bool(self._subscriptions.get(str(event)))

    def _snapshot(self, event: str) -> list[tuple[Subscription, bool]]:
        """(subscription, is_wildcard) pairs in delivery order."""
        with self._lock:
            named = list(self._subscriptions.get(event, []))
            wildcard = (
                list(self._subscriptions.get(ALL_EVENTS, []))
                if event != ALL_EVENTS else []
            )
        return [(s, False) for s in named] + [(s, True) for s in wildcard]

    def _consume(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(sub.event)
            if subs and sub in subs:
                subs.remove(sub)
                if not subs:
                    del self._subscriptions[sub.event]
        sub.active = False

    def _dispatch(self, event: str, args: tuple, safe: bool) -> None:
        for sub, wildcard in self._snapshot(event):
            if not sub.active:
                continue
            if sub.once:
                self._consume(sub)
            call_args = (event, *args) if wildcard else args
            if not safe:
                sub(*call_args)
                continue
            try:
                sub(*call_args)
            except Exception as e:
                self._reporter(e, event, sub)

    def trigger(self, event: str, *args: Any) -> None:
        """Deliver ``event``; a subscriber exception propagates."""
        self._dispatch(str(event), args, safe=False)

    def trigger_safe(self, event: str, *args: Any) -> None:
        """Deliver ``event`` to every subscriber, containing faults."""
        self._dispatch(str(event), args, safe=True)

    def emit(self, event: str, *args: Any) -> None:
        """Deliver ``event`` using this bus's dispatch policy."""
        if self.policy.resolve() is DispatchPolicy.UNSAFE:
            self.trigger(event, *args)
        else:
            self.trigger_safe(event, *args)
