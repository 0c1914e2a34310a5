"""
Controller lifecycle - creating, wiring, replacing and tearing down
the controller behind a handle.

Handle lifecycle:
    UNINITIALIZED → ATTACHED → CONFIGURED → REMOVED

    attach()  wires the first controller at construction
    setup()   tears the live controller down, then wires a fresh one
    remove()  unregisters the handle, emits "remove", tears down

Teardown always completes (handle listeners cleared, controller
listeners cleared, destroy hook called) before the replacement is
allocated, so events from two controllers never interleave.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from player_api.config import resolve_binding
from player_api.errors import ControllerSetupError, InvalidTransitionError
from player_api.events.names import ALL_EVENTS, PlayerEvent
from player_api.forwarder import ControllerRef
from player_api.monitoring.logging import StructuredLogger, get_logger

if TYPE_CHECKING:
    from player_api.api import PlayerHandle
    from player_api.controller import ControllerFactory
    from player_api.qoe import QoETimer
    from player_api.registry import InstanceRegistry

logger = logging.getLogger(__name__)


class HandleState(Enum):
    """Handle lifecycle states."""

    UNINITIALIZED = "uninitialized"
    ATTACHED = "attached"
    CONFIGURED = "configured"
    REMOVED = "removed"


VALID_TRANSITIONS: dict[HandleState, set[HandleState]] = {
    HandleState.UNINITIALIZED: {HandleState.ATTACHED},
    HandleState.ATTACHED: {HandleState.CONFIGURED, HandleState.REMOVED},
    HandleState.CONFIGURED: {HandleState.CONFIGURED, HandleState.REMOVED},
    HandleState.REMOVED: set(),
}


def is_valid_transition(from_state: HandleState, to_state: HandleState) -> bool:
    """Check if a lifecycle transition is valid."""
    return to_state in VALID_TRANSITIONS.get(from_state, set())


class ControllerLifecycle:
    """Owns the controller reference cell of one handle."""

    def __init__(
        self,
        handle: "PlayerHandle",
        element: Any,
        factory: "ControllerFactory",
        registry: "InstanceRegistry",
        qoe: "QoETimer",
        ref: ControllerRef | None = None,
    ):
        self._handle = handle
        self._element = element
        self._factory = factory
        self._registry = registry
        self._qoe = qoe
        self.ref = ref or ControllerRef()
        self.state = HandleState.UNINITIALIZED

    @property
    def controller(self) -> Any:
        return self.ref.get()

    @property
    def _slog(self) -> StructuredLogger:
        return get_logger().bind(
            player_id=self._handle.id,
            unique_id=self._handle.unique_id,
        )

    def _advance(self, target: HandleState) -> None:
        if self.state is HandleState.REMOVED:
            # Not rejected: the handle keeps working, but it is no
            # longer registered and should not be reused.
            logger.warning(
                "Player %s was removed; %s is unsupported",
                self._handle.unique_id,
                target.value,
            )
            return
        if not is_valid_transition(self.state, target):
            raise InvalidTransitionError(self.state.value, target.value)
        self.state = target

    def attach(self) -> Any:
        """Wire the first controller (UNINITIALIZED → ATTACHED)."""
        self._advance(HandleState.ATTACHED)
        return self._wire()

    def _wire(self) -> Any:
        controller = self._factory(self._element)

        def stamp_ready(payload: Any = None, *args: Any) -> None:
            self._qoe.tick("ready")
            if isinstance(payload, dict):
                payload["setupTime"] = self._qoe.between("setup", "ready")

        controller.on(PlayerEvent.READY.value, stamp_ready)
        controller.on(ALL_EVENTS, self._handle.trigger)

        self.ref.set(controller)
        self._slog.controller_attached(controller)
        return controller

    def teardown(self) -> None:
        """Detach every listener and destroy the live controller."""
        controller = self.ref.set(None)
        self._handle.off()
        if controller is None:
            return
        controller.off()
        # Players can be removed before loading completes.
        destroy = getattr(controller, "player_destroy", None)
        if callable(destroy):
            destroy()
        self._slog.controller_destroyed(controller)

    def setup(self, options: dict[str, Any] | None) -> None:
        """Replace the controller and configure the new one.

        Controller faults are reported and emitted as "setupError";
        they never propagate.
        """
        self._advance(HandleState.CONFIGURED)
        options = dict(options or {})

        self._qoe.clear("ready")
        self._qoe.tick("setup")

        self.teardown()

        fault: Exception | None = None
        controller = None
        try:
            controller = self._wire()
        except Exception as e:
            fault = e

        # Applied even without a controller so configured setupError
        # subscribers hear about the fault.
        self._apply_event_bindings(options.get("events"))

        options["id"] = self._handle.id
        if controller is not None:
            try:
                controller.setup(options, self._handle)
            except Exception as e:
                fault = e

        if fault is not None:
            self._setup_failed(fault)

    def _setup_failed(self, cause: Exception) -> None:
        error = ControllerSetupError(cause, player_id=self._handle.id)
        self._slog.setup_error(cause)
        self._handle.trigger(
            PlayerEvent.SETUP_ERROR,
            {"message": error.message, "error": error},
        )

    def _apply_event_bindings(self, events: Any) -> None:
        if not events:
            return
        if not isinstance(events, dict):
            logger.warning("Ignoring non-mapping 'events' option: %r", events)
            return
        for key, value in events.items():
            method_name = resolve_binding(key)
            if method_name is None:
                logger.warning("Ignoring unknown 'events' key: %s", key)
                continue
            try:
                getattr(self._handle, method_name)(value)
            except Exception as e:
                self._slog.binding_error(e, option=key)

    def remove(self) -> None:
        """Unregister, emit "remove", then tear down (→ REMOVED)."""
        self._registry.unregister(self._handle)
        # "remove" fires while the controller is still live.
        self._handle.trigger(PlayerEvent.REMOVE)
        self.teardown()
        self._advance(HandleState.REMOVED)
        self._slog.handle_removed(self._handle.unique_id)
