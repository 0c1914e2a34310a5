"""
Monitoring for the player facade.

Components:
    StructuredLogger - JSON structured logging, used as the error
                       channel for contained subscriber and setup faults

Example:
    from player_api.monitoring import configure_logging

    logger = configure_logging("debug")
"""

from player_api.monitoring.logging import (
    StructuredLogger,
    LogLevel,
    LogRecord,
    configure_logging,
    get_logger,
    reset_logging,
)

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "LogRecord",
    "configure_logging",
    "get_logger",
    "reset_logging",
]
