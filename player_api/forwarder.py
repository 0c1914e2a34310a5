"""
Call forwarder - name-based calls against whichever controller is live.

The handle's controller is replaced wholesale on every setup(), so no
public operation holds a controller method. Every call goes through
``CallForwarder.call``, which reads the reference cell at call time.
"""

from __future__ import annotations

from typing import Any


class ControllerRef:
    """Mutable cell holding the handle's current controller."""

    __slots__ = ("_controller",)

    def __init__(self, controller: Any = None):
        self._controller = controller

    def get(self) -> Any:
        return self._controller

    def set(self, controller: Any) -> Any:
        """Swap in ``controller`` and return the previous one."""
        previous, self._controller = self._controller, controller
        return previous


class CallForwarder:
    """Resolves operation names on the current controller.

    Example:
        ref = ControllerRef(controller)
        forward = CallForwarder(ref)
        forward.call("setVolume", 50)
        forward.call("notAnOperation")  # None, no error
    """

    def __init__(self, ref: ControllerRef):
        self._ref = ref

    def resolve(self, name: str) -> Any:
        """The bound operation for ``name`` on the live controller, or None."""
        controller = self._ref.get()
        if controller is None:
            return None
        operation = getattr(controller, name, None)
        if not callable(operation):
            return None
        return operation

    def call(self, name: str, *args: Any) -> Any:
        """Invoke ``name`` on the live controller.

        Returns:
            The operation's result, or None if the controller does not
            implement ``name``.
        """
        operation = self.resolve(name)
        if operation is None:
            return None
        return operation(*args)
