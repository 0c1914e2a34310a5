"""
Instance registry - the process-wide list of live player handles.

Handles append themselves at construction and are removed at
``remove()``. Unique ids come from a counter owned by the registry,
so an id is never reused even after its handle is gone.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from player_api.api import PlayerHandle


class InstanceRegistry:
    """Ordered list of live handles plus the unique id counter.

    Example:
        registry = InstanceRegistry()
        a = PlayerHandle("a", registry=registry)
        b = PlayerHandle("b", registry=registry)
        a.remove()
        registry.list()  # [b]
    """

    def __init__(self):
        self._instances: list["PlayerHandle"] = []
        self._created = 0
        self._lock = threading.Lock()

    def next_unique_id(self) -> int:
        """Hand out the next id: 0, 1, 2, ... for the registry's lifetime."""
        with self._lock:
            unique_id = self._created
            self._created += 1
        return unique_id

    def register(self, handle: "PlayerHandle") -> None:
        """Append a handle to the live list."""
        with self._lock:
            self._instances.append(handle)

    def unregister(self, handle: "PlayerHandle") -> bool:
        """Remove the last entry whose unique_id matches ``handle``.

        Returns:
            True if an entry was removed. An absent handle is not an error.
        """
        with self._lock:
            for i in range(len(self._instances) - 1, -1, -1):
                if self._instances[i].unique_id == handle.unique_id:
                    del self._instances[i]
                    return True
        return False

    def list(self) -> list["PlayerHandle"]:
        """Snapshot of live handles in registration order."""
        with self._lock:
            return list(self._instances)

    def get(self, query: Union[int, str, None] = None) -> "PlayerHandle | None":
        """Look up a live handle.

        Args:
            query: None for the first live handle, an int index into the
                live list, or a str matched against ``handle.id``.
        """
        with self._lock:
            instances = list(self._instances)
        if not instances:
            return None
        if query is None:
            return instances[0]
        if isinstance(query, int):
            if 0 <= query < len(instances):
                return instances[query]
            return None
        for handle in instances:
            if handle.id == query:
                return handle
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)

    def __contains__(self, handle: object) -> bool:
        unique_id = getattr(handle, "unique_id", None)
        with self._lock:
            return any(h.unique_id == unique_id for h in self._instances)

    def reset(self) -> None:
        """Forget all handles and restart the id counter. Test isolation only."""
        with self._lock:
            self._instances.clear()
            self._created = 0


_global_registry: InstanceRegistry | None = None
_global_lock = threading.Lock()


def get_instance_registry() -> InstanceRegistry:
    """Get the process-wide instance registry."""
    global _global_registry
    if _global_registry is None:
        with _global_lock:
            if _global_registry is None:
                _global_registry = InstanceRegistry()
    return _global_registry
