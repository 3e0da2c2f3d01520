"""
config.py
---------
Central configuration module. Loads environment variables from the .env
file, exposes them as typed constants, and serves named configuration sets
(e.g. ``db_config``) stored as JSON files under ``CONFIG_DIR``.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from exceptions import ConfigError

load_dotenv()


# ── Application ───────────────────────────────────────────
APP_ENV: str = os.getenv("APP_ENV", "")
BASE_DIR: Path = Path(__file__).resolve().parent
CONFIG_DIR: Path = Path(os.getenv("CONFIG_DIR", str(BASE_DIR / "configs")))

# ── Logging / Debug ───────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG_MODE: bool = os.getenv("DEBUG_MODE", "false").lower() in ("1", "true", "yes")

# ── PostgreSQL ────────────────────────────────────────────
DB_DEFAULT_PORT: int = int(os.getenv("DB_DEFAULT_PORT", "5432"))


# In-memory cache of loaded configuration sets: {name: dict}
_cache: dict[str, dict] = {}


def get_environment() -> str:
    """Return the deployment environment name, or 'unknown' if unset."""
    return APP_ENV or "unknown"


def load(name: str) -> dict:
    """
    Load a named configuration set from ``CONFIG_DIR/<name>.json``.

    Sets are cached after the first read.

    Raises:
        ConfigError: If the file is missing or does not hold a JSON object.
    """
    if name in _cache:
        return _cache[name]

    file_path = CONFIG_DIR / f"{name}.json"
    if not file_path.exists():
        raise ConfigError(f"Configuration file '{name}' not found at '{file_path}'.")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Configuration file '{name}' is not valid JSON.") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file '{name}' must contain a JSON object.")

    _cache[name] = data
    return data


def get(name: str, key: Optional[str] = None) -> Any:
    """
    Get a whole configuration set, or a single key from it.

    Args:
        name: Configuration set name (file stem), e.g. ``db_config``.
        key: Optional top-level key inside the set.

    Raises:
        ConfigError: If the set cannot be loaded or the key is absent.
    """
    config = load(name)
    if key is None:
        return config
    if key not in config:
        raise ConfigError(f"Key '{key}' not found in configuration '{name}'.")
    return config[key]


def clear_cache() -> None:
    """Forget every cached configuration set."""
    _cache.clear()
