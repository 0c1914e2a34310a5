"""
Shared fixtures for player facade tests.

Every test gets a clean process-wide instance registry, plugin
registry, settings object, and a structured logger writing to an
in-memory stream.
"""

from __future__ import annotations

import io
import json

import pytest

from player_api import PlayerHandle
from player_api.config import reset_settings
from player_api.monitoring.logging import configure_logging, reset_logging
from player_api.plugins.registry import get_plugin_registry
from player_api.registry import InstanceRegistry, get_instance_registry
from player_api.testing import MockControllerFactory


@pytest.fixture(autouse=True)
def isolated_globals():
    get_instance_registry().reset()
    get_plugin_registry().clear()
    reset_settings()
    yield
    get_instance_registry().reset()
    get_plugin_registry().clear()
    reset_settings()
    reset_logging()


@pytest.fixture
def log_stream() -> io.StringIO:
    """Captures structured log output as JSON lines."""
    stream = io.StringIO()
    configure_logging(level="debug", output=stream)
    return stream


@pytest.fixture
def log_records(log_stream):
    """Returns a callable parsing the captured log lines."""
    def read() -> list[dict]:
        return [json.loads(line) for line in log_stream.getvalue().splitlines() if line]
    return read


@pytest.fixture
def factory() -> MockControllerFactory:
    return MockControllerFactory()


@pytest.fixture
def registry() -> InstanceRegistry:
    return InstanceRegistry()


@pytest.fixture
def player(factory, registry, log_stream) -> PlayerHandle:
    return PlayerHandle("player-1", controller_factory=factory, registry=registry)
