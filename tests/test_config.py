"""Tests for the JSON-backed configuration source."""

from __future__ import annotations

import json

import pytest

import config
from exceptions import ConfigError


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "CONFIG_DIR", tmp_path)
    config.clear_cache()
    yield tmp_path
    config.clear_cache()


def _write(path, name, data):
    (path / f"{name}.json").write_text(json.dumps(data), encoding="utf-8")


class TestLoad:
    def test_loads_named_set(self, config_dir):
        _write(config_dir, "db_config", {"main": {"host": "h"}})
        assert config.load("db_config") == {"main": {"host": "h"}}

    def test_missing_file(self):
        with pytest.raises(ConfigError, match="Configuration file 'db_config' not found"):
            config.load("db_config")

    def test_rejects_non_object(self, config_dir):
        _write(config_dir, "db_config", ["not", "a", "mapping"])
        with pytest.raises(ConfigError, match="must contain a JSON object"):
            config.load("db_config")

    def test_rejects_invalid_json(self, config_dir):
        (config_dir / "db_config.json").write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigError, match="not valid JSON"):
            config.load("db_config")

    def test_cached_until_cleared(self, config_dir):
        _write(config_dir, "db_config", {"a": 1})
        config.load("db_config")
        _write(config_dir, "db_config", {"a": 2})
        assert config.load("db_config") == {"a": 1}
        config.clear_cache()
        assert config.load("db_config") == {"a": 2}


class TestGet:
    def test_whole_set_and_key(self, config_dir):
        _write(config_dir, "debug_config", {"colors": {"db": "orange"}})
        assert config.get("debug_config") == {"colors": {"db": "orange"}}
        assert config.get("debug_config", "colors") == {"db": "orange"}

    def test_missing_key(self, config_dir):
        _write(config_dir, "debug_config", {})
        with pytest.raises(ConfigError) as exc_info:
            config.get("debug_config", "colors")
        assert str(exc_info.value) == "Key 'colors' not found in configuration 'debug_config'."


def test_environment_defaults_to_unknown(monkeypatch):
    monkeypatch.setattr(config, "APP_ENV", "")
    assert config.get_environment() == "unknown"
    monkeypatch.setattr(config, "APP_ENV", "production")
    assert config.get_environment() == "production"
