"""
Plugin registry - process-wide named plugin constructors.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, Iterator, TYPE_CHECKING

from player_api.errors import PluginVersionError
from player_api.plugins.base import PluginConstructor, PluginMeta

if TYPE_CHECKING:
    from player_api.api import PlayerHandle

logger = logging.getLogger(__name__)


def parse_version(version: str) -> tuple[int, ...]:
    """Numeric parts of a dotted version: "7.2.0-beta" -> (7, 2, 0)."""
    parts = []
    for piece in str(version).split("."):
        match = re.match(r"\d+", piece)
        if not match:
            break
        parts.append(int(match.group()))
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def is_compatible(minimum_version: str, host_version: str) -> bool:
    """True if ``host_version`` is at least ``minimum_version``."""
    return parse_version(host_version) >= parse_version(minimum_version)


class PluginRegistry:
    """Process-wide plugin constructors keyed by name.

    The last registration for a name wins. ``minimum_version`` is checked
    when an instance is built, not at registration.

    Example:
        registry = get_plugin_registry()
        registry.register_plugin("watermark", "1.0", Watermark)

        registry.instantiate("watermark", player)
        player.get_plugin("watermark")
    """

    def __init__(self):
        self._plugins: dict[str, PluginMeta] = {}
        self._lock = threading.Lock()

    def register_plugin(
        self,
        name: str,
        minimum_version: str,
        constructor: PluginConstructor,
    ) -> PluginMeta:
        """Store or overwrite the registration for ``name``."""
        meta = PluginMeta(
            name=name,
            minimum_version=str(minimum_version),
            constructor=constructor,
        )
        with self._lock:
            if name in self._plugins:
                logger.debug("Replacing plugin registration '%s'", name)
            self._plugins[name] = meta
        return meta

    def unregister(self, name: str) -> PluginMeta | None:
        with self._lock:
            return self._plugins.pop(name, None)

    def get(self, name: str) -> PluginMeta | None:
        with self._lock:
            return self._plugins.get(name)

    def list_plugins(self) -> Iterator[PluginMeta]:
        with self._lock:
            registrations = list(self._plugins.values())
        yield from registrations

    def instantiate(
        self,
        name: str,
        handle: "PlayerHandle",
        config: dict[str, Any] | None = None,
    ) -> Any:
        """Build the plugin for ``handle`` and add it to the handle.

        Raises:
            KeyError: If no plugin is registered under ``name``.
            PluginVersionError: If the handle's version is too old.
        """
        meta = self.get(name)
        if meta is None:
            raise KeyError(f"Plugin '{name}' is not registered")

        if not is_compatible(meta.minimum_version, handle.version):
            raise PluginVersionError(name, meta.minimum_version, handle.version)

        instance = meta.constructor(handle, config or {})
        handle.add_plugin(name, instance)
        return instance

    def clear(self) -> None:
        with self._lock:
            self._plugins.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._plugins

    def __len__(self) -> int:
        with self._lock:
            return len(self._plugins)


_global_registry: PluginRegistry | None = None


def get_plugin_registry() -> PluginRegistry:
    """Get the global plugin registry."""
    global _global_registry
    if _global_registry is None:
        _global_registry = PluginRegistry()
    return _global_registry
