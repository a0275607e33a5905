# tests/test_settings.py
"""Tests for the typed settings and the logger factory."""

from __future__ import annotations

import logging
import os

import pytest

from chronologicon.core.settings import Settings, get_logger, load_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CHRONOLOGICON_DATABASE_URL",
        "CHRONOLOGICON_BATCH_SIZE",
        "CHRONOLOGICON_ERROR_LOG_CAP",
        "CHRONOLOGICON_INGEST_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.batch_size == 500
    assert s.error_log_cap == 100
    assert s.ingest_workers == 4
    assert s.database_url.startswith("sqlite:///")


def test_env_overrides_are_read(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("CHRONOLOGICON_BATCH_SIZE", "25")
    monkeypatch.setenv("CHRONOLOGICON_DATABASE_URL", "sqlite:///:memory:")
    load_settings.cache_clear()

    s = load_settings()
    assert s.log_level_numeric() == logging.WARNING
    assert s.batch_size == 25
    assert s.database_url == "sqlite:///:memory:"


def test_fields_can_be_set_by_name() -> None:
    s = Settings(batch_size=2, error_log_cap=3, _env_file=None)
    assert (s.batch_size, s.error_log_cap) == (2, 3)


def test_get_logger_is_idempotent() -> None:
    first = get_logger("chronologicon.test-logger")
    second = get_logger("chronologicon.test-logger")
    assert first is second
    assert len(first.handlers) == 1
    assert first.propagate is False


def test_loading_settings_leaves_the_environment_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings are read lazily and never written back into `os.environ`."""
    monkeypatch.delenv("CHRONOLOGICON_ENV", raising=False)
    monkeypatch.setenv("CHRONOLOGICON_INGEST_WORKERS", "7")
    load_settings.cache_clear()

    assert load_settings().ingest_workers == 7
    assert "CHRONOLOGICON_ENV" not in os.environ
