"""
Player Errors - Facade-level error types.

Error hierarchy:
    PlayerError (base)
    ├── InvalidTransitionError
    ├── PluginVersionError
    ├── ConfigError
    └── ControllerSetupError

Missing controller capabilities and subscriber faults are NOT errors:
the first yields None, the second is contained by safe dispatch.
"""

from __future__ import annotations

from typing import Any


class PlayerError(Exception):
    """Base error for all player facade errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidTransitionError(PlayerError):
    """
    Raised for handle lifecycle transitions outside the transition table.

    Examples:
    - UNINITIALIZED → CONFIGURED (a controller must be attached first)
    - REMOVED → ATTACHED
    """

    def __init__(
        self,
        from_state: str,
        to_state: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        msg = message or f"Invalid transition: {from_state} → {to_state}"
        super().__init__(msg, details)
        self.from_state = from_state
        self.to_state = to_state


class PluginVersionError(PlayerError):
    """Raised when a plugin requires a newer player than the host."""

    def __init__(
        self,
        plugin_name: str,
        minimum_version: str,
        host_version: str,
    ):
        super().__init__(
            f"Plugin '{plugin_name}' requires player {minimum_version} "
            f"(host is {host_version})",
            details={
                "plugin": plugin_name,
                "minimum_version": minimum_version,
                "host_version": host_version,
            },
        )
        self.plugin_name = plugin_name
        self.minimum_version = minimum_version
        self.host_version = host_version


class ConfigError(PlayerError):
    """Raised when setup options cannot be loaded."""


class ControllerSetupError(PlayerError):
    """
    Wraps a fault raised by the controller during setup.

    Never propagates past the handle: it is reported and surfaced
    to subscribers as a ``setupError`` event.
    """

    def __init__(self, cause: BaseException, player_id: str = ""):
        super().__init__(
            str(cause) or type(cause).__name__,
            details={"error_type": type(cause).__name__, "player_id": player_id},
        )
        self.cause = cause
        self.player_id = player_id
