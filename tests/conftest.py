"""Pytest configuration and shared fixtures.

No test talks to a real database: driver connections are MagicMock
doubles injected through the registry.
"""
from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from db.connection import ConnectionRegistry
from tests.helpers import make_config_source


@pytest.fixture
def fake_handle() -> MagicMock:
    """A psycopg2-connection double whose cursor works as a context manager."""
    handle = MagicMock(name="pg_connection")
    handle.autocommit = True
    cursor_cm = handle.cursor.return_value
    cursor_cm.__exit__.return_value = False
    cursor = cursor_cm.__enter__.return_value
    cursor.description = None
    cursor.rowcount = 0
    return handle


@pytest.fixture
def fake_cursor(fake_handle) -> MagicMock:
    return fake_handle.cursor.return_value.__enter__.return_value


@pytest.fixture
def connect() -> MagicMock:
    return MagicMock(name="connect")


@pytest.fixture
def registry(connect) -> ConnectionRegistry:
    registry = ConnectionRegistry(config_source=make_config_source(), connect=connect)
    yield registry
    registry.clear_all()


@pytest.fixture
def connection(registry, fake_handle):
    return registry.get_instance("test_db", handle=fake_handle)
