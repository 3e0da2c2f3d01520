"""Shared test helpers: configuration sources and fake cursor results."""

from __future__ import annotations

from unittest.mock import MagicMock

from exceptions import ConfigError

DB_CONFIG = {
    "test_db": {
        "host": "db.example.org",
        "username": "tac",
        "password": "secret",
        "dbname": "tac_test",
    },
    "troublelog": {
        "host": "db.example.org",
        "username": "tac",
        "password": "secret",
        "dbname": "troublelog",
        "port": 6543,
    },
}


def make_config_source(db_config: dict | None = None):
    sets = {"db_config": DB_CONFIG if db_config is None else db_config}

    def _source(name: str):
        if name not in sets:
            raise ConfigError(f"Configuration file '{name}' not found.")
        return sets[name]

    return _source


def set_result(cursor: MagicMock, columns: list[str], rows: list[tuple]) -> None:
    """Make the fake cursor report a result set."""
    cursor.description = [(c, None, None, None, None, None, None) for c in columns]
    cursor.fetchall.return_value = rows
    cursor.rowcount = len(rows)


def set_affected(cursor: MagicMock, count: int) -> None:
    """Make the fake cursor report a statement without a result set."""
    cursor.description = None
    cursor.rowcount = count
