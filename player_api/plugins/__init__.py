"""
Plugin architecture for the player facade.

Plugins are registered process-wide by name, then built per handle.
A plugin instance is bound to the handle's lifecycle through two hooks:
``add_to_player`` on "ready" and ``resize_handler`` on "resize".

Example:
    from player_api.plugins import plugin, PlayerPlugin

    @plugin("watermark", "1.0")
    class Watermark(PlayerPlugin):
        def add_to_player(self, payload=None):
            ...

    get_plugin_registry().instantiate("watermark", player)
"""

from player_api.plugins.base import (
    PlayerPlugin,
    PluginMeta,
    plugin,
)
from player_api.plugins.registry import (
    PluginRegistry,
    get_plugin_registry,
    is_compatible,
    parse_version,
)

__all__ = [
    "PlayerPlugin",
    "PluginMeta",
    "plugin",
    "PluginRegistry",
    "get_plugin_registry",
    "is_compatible",
    "parse_version",
]
