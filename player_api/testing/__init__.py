"""
Testing utilities for code built on player handles.

Components:
    MockController        - Call-recording controller
    MockControllerFactory - Factory keeping every controller it built
    CallRecord            - One recorded forwarded call

Example:
    from player_api import PlayerHandle
    from player_api.testing import MockControllerFactory

    factory = MockControllerFactory()
    player = PlayerHandle("test", controller_factory=factory)
    player.set_volume(20)
    assert factory.latest.last_call.args == (20,)
"""

from player_api.testing.mock import (
    DEFAULT_OPERATIONS,
    CallRecord,
    MockController,
    MockControllerFactory,
)

__all__ = [
    "DEFAULT_OPERATIONS",
    "CallRecord",
    "MockController",
    "MockControllerFactory",
]
