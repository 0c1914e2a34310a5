"""
player_api - stable public facade for a media player runtime.

Architecture:
    PlayerHandle → CallForwarder → (current) Controller
                 ↖ EventBus ← "all" channel ↙

Public API (stable):
    PlayerHandle        - Long-lived player object; survives setup() calls
    PlayerEvent         - Event names re-broadcast by the handle
    PlayerState         - Playback states reported by get_state()
    DispatchPolicy      - SAFE / UNSAFE / AUTO subscriber fault handling
    get_players         - Live handles, in construction order
    get_player          - Look up a live handle by index or id

Extension points:
    player_api.plugins     - PlayerPlugin, plugin decorator, PluginRegistry
    player_api.controller  - Controller protocol, BaseController
    player_api.testing     - MockController, MockControllerFactory

Example:
    from player_api import PlayerHandle, set_debug

    player = PlayerHandle("player-1")
    player.on_ready(lambda e: print("setup took", e["setupTime"], "ms"))
    player.setup({"file": "movie.m3u8", "events": {"setVolume": 50}})

    # Fail loud while developing
    set_debug(True)
"""

from __future__ import annotations

from player_api.version import __version__
from player_api.api import PlayerHandle
from player_api.config import (
    PlayerSettings,
    configure,
    get_settings,
    load_options,
    set_debug,
)
from player_api.controller import BaseController, Controller
from player_api.errors import (
    ConfigError,
    ControllerSetupError,
    InvalidTransitionError,
    PlayerError,
    PluginVersionError,
)
from player_api.events import (
    DispatchPolicy,
    EventBus,
    PlayerEvent,
    PlayerState,
)
from player_api.lifecycle import HandleState
from player_api.qoe import QoETimer
from player_api.registry import InstanceRegistry, get_instance_registry


def get_players() -> list[PlayerHandle]:
    """Live handles in the process-wide registry."""
    return get_instance_registry().list()


def get_player(query: int | str | None = None) -> PlayerHandle | None:
    """Find a live handle by index, id, or the first one when omitted."""
    return get_instance_registry().get(query)


__all__ = [
    "__version__",
    "PlayerHandle",
    "PlayerSettings",
    "configure",
    "get_settings",
    "load_options",
    "set_debug",
    "BaseController",
    "Controller",
    "ConfigError",
    "ControllerSetupError",
    "InvalidTransitionError",
    "PlayerError",
    "PluginVersionError",
    "DispatchPolicy",
    "EventBus",
    "PlayerEvent",
    "PlayerState",
    "HandleState",
    "QoETimer",
    "InstanceRegistry",
    "get_instance_registry",
    "get_players",
    "get_player",
]
