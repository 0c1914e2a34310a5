"""
Controller contract - the disposable engine behind a player handle.

CONTROLLER CONTRACT:
    Controllers MUST:
        - Provide on(event, handler) / off() with an "all" channel that
          receives (name, payload) for every event
        - Accept setup(options, handle) and emit "ready" when configured
    Controllers MAY:
        - Provide player_destroy(), called once on teardown
        - Provide any named operation (get, getConfig, setVolume, seek, ...);
          the handle reaches these only through its call forwarder, and
          names the controller lacks resolve to None

The handle replaces its controller on every setup(). Nothing outside the
handle may keep a reference to one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, runtime_checkable

from player_api.events.bus import DispatchPolicy, EventBus
from player_api.events.names import PlayerEvent, PlayerState

logger = logging.getLogger(__name__)


@runtime_checkable
class Controller(Protocol):
    """Protocol for playback controllers."""

    def on(self, event: str, handler: Callable[..., Any]) -> Any:
        ...

    def off(self, event: str | None = None, handler: Callable[..., Any] | None = None) -> Any:
        ...

    def setup(self, options: dict[str, Any], handle: Any) -> Any:
        ...


ControllerFactory = Callable[[Any], Controller]
"""Builds a controller bound to the handle's target element."""


class BaseController:
    """Minimal controller holding a model dict and its own event bus.

    Real engines subclass this and add playback operations. On its own it
    stores setup options as the model and announces "ready".

    Operation names follow the controller wire contract (camelCase).
    """

    def __init__(self, element: Any = None):
        self.element = element
        self.model: dict[str, Any] = {"state": PlayerState.IDLE.value}
        self.destroyed = False
        self._events = EventBus(policy=DispatchPolicy.SAFE)

    def on(self, event: str, handler: Callable[..., Any]) -> "BaseController":
        self._events.on(event, handler)
        return self

    def off(
        self,
        event: str | None = None,
        handler: Callable[..., Any] | None = None,
    ) -> "BaseController":
        self._events.off(event, handler)
        return self

    def trigger(self, event: str, payload: dict[str, Any] | None = None) -> None:
        """Emit an event to the handle (and any other listener)."""
        self._events.trigger(str(event), dict(payload or {}))

    def setup(self, options: dict[str, Any], handle: Any) -> None:
        self.model.update(options)
        self.trigger(PlayerEvent.READY)

    def player_destroy(self) -> None:
        logger.debug("Destroying %s", type(self).__name__)
        self.destroyed = True

    # Wire operations

    def get(self, key: str) -> Any:
        return self.model.get(key)

    def getConfig(self) -> dict[str, Any]:
        return dict(self.model)

    def getState(self) -> str:
        return self.model.get("state", PlayerState.IDLE.value)


def default_controller_factory(element: Any) -> BaseController:
    return BaseController(element)
