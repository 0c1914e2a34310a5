"""
Event names and the per-handle event bus.
"""

from player_api.events.names import (
    ALL_EVENTS,
    PlayerEvent,
    PlayerState,
)
from player_api.events.bus import (
    DispatchPolicy,
    EventBus,
    Subscription,
)

__all__ = [
    "ALL_EVENTS",
    "PlayerEvent",
    "PlayerState",
    "DispatchPolicy",
    "EventBus",
    "Subscription",
]
