"""Tests for environment-driven engine settings."""

import pytest
from pydantic import ValidationError

from allelejoin.config import (
    DEFAULT_CACHE_CAPACITY,
    CacheKeying,
    CachePolicy,
    EngineSettings,
    get_default_cache_capacity,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("ALLELEJOIN_CACHE_CAPACITY", "ALLELEJOIN_CACHE_POLICY", "ALLELEJOIN_CACHE_KEYS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = EngineSettings()
    assert settings.cache_capacity == DEFAULT_CACHE_CAPACITY == 20
    assert settings.cache_policy == CachePolicy.FIFO
    assert settings.cache_keys == CacheKeying.CONTENT


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ALLELEJOIN_CACHE_CAPACITY", "64")
    monkeypatch.setenv("ALLELEJOIN_CACHE_POLICY", "LRU")
    monkeypatch.setenv("ALLELEJOIN_CACHE_KEYS", "identity")
    settings = EngineSettings()
    assert settings.cache_capacity == 64
    assert settings.cache_policy == CachePolicy.LRU
    assert settings.cache_keys == CacheKeying.IDENTITY


@pytest.mark.parametrize("value", ["zero", "0", "-3"])
def test_invalid_capacity_falls_back(monkeypatch: pytest.MonkeyPatch, value: str):
    monkeypatch.setenv("ALLELEJOIN_CACHE_CAPACITY", value)
    assert get_default_cache_capacity() == DEFAULT_CACHE_CAPACITY


def test_explicit_values_win(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ALLELEJOIN_CACHE_POLICY", "lru")
    assert EngineSettings(cache_policy="fifo").cache_policy == CachePolicy.FIFO


def test_explicit_capacity_validated():
    with pytest.raises(ValidationError):
        EngineSettings(cache_capacity=0)
