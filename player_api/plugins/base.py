"""
Base plugin class and registration decorator.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from player_api.api import PlayerHandle


PluginConstructor = Callable[..., Any]


@dataclass
class PluginMeta:
    """A process-wide plugin registration.

    Attributes:
        name: Unique identifier for the plugin.
        minimum_version: Oldest player version the plugin supports.
        constructor: Called as constructor(handle, config) to build an instance.
    """

    name: str
    minimum_version: str
    constructor: PluginConstructor
    registered_at: float = field(default_factory=time.time)


class PlayerPlugin:
    """Optional base class for player plugins.

    A plugin is any object; the handle looks for two hooks:

        add_to_player(payload)   bound to "ready"
        resize_handler(payload)  bound to "resize" when ``resize`` is truthy

    Example:
        class Watermark(PlayerPlugin):
            name = "watermark"
            minimum_version = "1.0"

            def add_to_player(self, payload=None):
                self.player.call_internal("addButton", "logo.png", "", None, "wm")
    """

    name: str = ""
    minimum_version: str = "0"
    resize: bool = False

    def __init__(self, player: "PlayerHandle | None" = None, config: dict[str, Any] | None = None):
        self.player = player
        self._config = config or {}

    @property
    def config(self) -> dict[str, Any]:
        return self._config

    def add_to_player(self, payload: dict[str, Any] | None = None) -> None:
        """Called on every "ready" of the owning handle."""

    def resize_handler(self, payload: dict[str, Any] | None = None) -> None:
        """Called on "resize" when ``resize`` is True."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}'>"


P = TypeVar("P", bound=type)


def plugin(name: str | None = None, minimum_version: str | None = None) -> Callable[[P], P]:
    """Class decorator registering a plugin constructor with the global registry.

    Example:
        @plugin("watermark", "1.0")
        class Watermark(PlayerPlugin):
            ...
    """
    def decorator(cls: P) -> P:
        plugin_name = name or getattr(cls, "name", "")
        if not plugin_name:
            raise ValueError(f"Plugin {cls.__name__} must define a name")
        version = minimum_version or getattr(cls, "minimum_version", "0")

        from player_api.plugins.registry import get_plugin_registry
        get_plugin_registry().register_plugin(plugin_name, version, cls)
        return cls

    return decorator
