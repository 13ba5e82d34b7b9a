"""Typed smoke tests for the settings loader.

These tests verify three guarantees:
1) Importing the module-level `settings` yields a `Settings` instance.
2) Environment variables override defaults after clearing the loader cache.
3) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from bragi_probe.core.settings import (
    Settings,
    get_logger,
    load_settings,
    settings,
)


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _fresh_settings() -> Any:
    """Rebuild the cached settings before and after each test."""
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_settings_instance_type() -> None:
    """`settings` should be an instance of the typed `Settings` model."""
    assert isinstance(settings, Settings)


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.environments_file == Path("env.json")
    assert s.default_index_prefix == "munin"
    assert s.port == 8080
    assert s.probe_timeout_seconds > 0
    assert s.probe_deadline_seconds > 0


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("BRAGI_PROBE_ENV", "prod")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("BRAGI_PROBE_ENVIRONMENTS_FILE", "/etc/bragi/envs.json")
    monkeypatch.setenv("BRAGI_PROBE_TIMEOUT", "2.5")
    monkeypatch.setenv("BRAGI_PROBE_DEADLINE", "9")
    monkeypatch.setenv("BRAGI_PROBE_INDEX_PREFIX", "mimir")

    load_settings.cache_clear()
    s = load_settings()

    assert s.environment == "prod"
    assert s.log_level == "DEBUG"
    assert s.environments_file == Path("/etc/bragi/envs.json")
    assert s.probe_timeout_seconds == 2.5
    assert s.probe_deadline_seconds == 9.0
    assert s.default_index_prefix == "mimir"


def test_invalid_timeout_is_rejected(monkeypatch: Any) -> None:
    monkeypatch.setenv("BRAGI_PROBE_TIMEOUT", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()

    logger = get_logger("bragi_probe.tests.settings")

    assert logger.level == logging.ERROR
    assert logger.handlers, "Expected at least one StreamHandler to be attached."
    assert logger.propagate is False
