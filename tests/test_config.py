"""
Tests for configuration models and loader.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from lru_engine import Cache
from lru_engine.config.models import CacheConfig, EnvSettings


def test_cache_config_defaults():
    """Test default config values."""
    cfg = CacheConfig()
    assert cfg.capacity == 128
    assert cfg.monitor is False
    assert cfg.monitored_keys == []


def test_cache_config_rejects_negative_capacity():
    """Test capacity validation."""
    with pytest.raises(ValidationError):
        CacheConfig(capacity=-1)


def test_cache_config_load(tmp_path: Path):
    """Test loading config from a JSON file."""
    path = tmp_path / "cache.json"
    path.write_text(json.dumps({"capacity": 3, "monitor": True, "monitored_keys": ["a"]}))
    cfg = CacheConfig.load(path)
    assert cfg.capacity == 3
    assert cfg.monitor is True
    assert cfg.monitored_keys == ["a"]


def test_cache_from_config_attaches_statistics():
    """Test from_config builds a monitored cache when requested."""
    cache = Cache.from_config(CacheConfig(capacity=2, monitor=True, monitored_keys=["a"]))
    assert cache.capacity == 2
    assert cache.is_monitoring
    cache.contains("a")
    assert cache.statistics.misses_for("a") == 1


def test_cache_from_config_unmonitored():
    """Test from_config leaves monitoring off by default."""
    cache = Cache.from_config(CacheConfig(capacity=4))
    assert not cache.is_monitoring


def test_env_settings_from_environment(monkeypatch):
    """Test env prefix LRU_ENGINE_ is honored."""
    monkeypatch.setenv("LRU_ENGINE_DEFAULT_CAPACITY", "42")
    monkeypatch.setenv("LRU_ENGINE_LOG_LEVEL", "DEBUG")
    settings = EnvSettings()
    assert settings.default_capacity == 42
    assert settings.log_level == "DEBUG"
