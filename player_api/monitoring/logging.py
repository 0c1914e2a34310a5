"""
Structured logging for the player facade.

This is the error channel for faults the facade contains rather than
raises: subscriber exceptions under safe dispatch, bad ``events``
bindings and controller failures during setup. Lifecycle transitions
are logged here too.

Unless configure_logging() pins a logger, the global logger follows
``PlayerSettings.log_level``.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO

from player_api.config import get_settings


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.name)


@dataclass
class LogRecord:
    """One JSON log line: level, event name, message, then flat context."""

    level: str
    event: str
    message: str = ""
    timestamp: float = field(default_factory=time.time)
    data: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(
            {
                "level": self.level,
                "event": self.event,
                "message": self.message,
                "timestamp": self.timestamp,
                **self.data,
            },
            default=str,
        )


class StructuredLogger:
    """JSON-lines logger with bound player context.

    Example:
        logger = get_logger().bind(player_id="player-1", unique_id=0)

        logger.subscriber_error(exc, event_name="time")
        # {"level": "error", "event": "subscriber_error",
        #  "message": "boom", "player_id": "player-1", ...}
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        output: TextIO | None = None,
    ):
        """
        Args:
            level: Minimum log level.
            output: Output stream (default: stderr at emit time).
        """
        self._level = level
        self._output = output
        self._context: dict[str, Any] = {}
        self._lock = threading.Lock()

    @property
    def level(self) -> LogLevel:
        return self._level

    def bind(self, **context: Any) -> "StructuredLogger":
        """New logger sharing this one's output, with extra context."""
        bound = StructuredLogger(level=self._level, output=self._output)
        bound._context = {**self._context, **context}
        bound._lock = self._lock
        return bound

    def _log(self, level: LogLevel, event: str, message: str = "", **data: Any) -> None:
        if level.numeric < self._level.numeric:
            return

        record = LogRecord(
            level=level.value,
            event=event,
            message=message,
            data={**self._context, **data},
        )
        with self._lock:
            print(record.to_json(), file=self._output or sys.stderr)

    def debug(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.DEBUG, event, message, **data)

    def info(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.INFO, event, message, **data)

    def warning(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.WARNING, event, message, **data)

    def error(self, event: str, message: str = "", **data: Any) -> None:
        self._log(LogLevel.ERROR, event, message, **data)

    # Facade events

    def subscriber_error(
        self,
        error: BaseException,
        event_name: str = "",
        **extra: Any,
    ) -> None:
        """Log an exception raised by an event subscriber."""
        self.error(
            "subscriber_error",
            str(error),
            error_type=type(error).__name__,
            event_name=event_name,
            **extra,
        )

    def setup_error(self, error: BaseException, **extra: Any) -> None:
        """Log a controller failure during setup."""
        self.error(
            "setup_error",
            str(error),
            error_type=type(error).__name__,
            **extra,
        )

    def binding_error(self, error: BaseException, option: str, **extra: Any) -> None:
        """Log an ``events`` option whose value the handle rejected."""
        self.warning(
            "binding_error",
            str(error),
            error_type=type(error).__name__,
            option=option,
            **extra,
        )

    def controller_attached(self, controller: Any) -> None:
        self.debug("controller_attached", controller=type(controller).__name__)

    def controller_destroyed(self, controller: Any) -> None:
        self.debug("controller_destroyed", controller=type(controller).__name__)

    def handle_removed(self, unique_id: int) -> None:
        self.info(
            "handle_removed",
            f"Player {unique_id} removed",
            unique_id=unique_id,
        )


_global_logger: StructuredLogger | None = None
_pinned = False


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
) -> StructuredLogger:
    """Pin the global logger to ``level`` and ``output``.

    A pinned logger ignores ``PlayerSettings.log_level`` until
    reset_logging().
    """
    global _global_logger, _pinned

    if isinstance(level, str):
        level = LogLevel(level)

    _global_logger = StructuredLogger(level=level, output=output)
    _pinned = True
    return _global_logger


def get_logger() -> StructuredLogger:
    """Get the global structured logger."""
    global _global_logger

    if _pinned:
        return _global_logger

    level = LogLevel(get_settings().log_level)
    if _global_logger is None or _global_logger.level is not level:
        _global_logger = StructuredLogger(level=level)
    return _global_logger


def reset_logging() -> None:
    """Unpin and drop the global logger."""
    global _global_logger, _pinned
    _global_logger = None
    _pinned = False
