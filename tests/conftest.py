# tests/conftest.py
"""Shared pytest fixtures: a throwaway SQLite event store and a fresh job store."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from chronologicon.core.settings import load_settings
from chronologicon.jobs.job_store import InMemoryJobStore
from chronologicon.storage.repository import EventRepository


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _fresh_settings() -> Iterator[None]:
    """Drop any settings a test built from a patched environment."""
    yield
    load_settings.cache_clear()


@pytest.fixture  # type: ignore[misc]
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'events.db'}"


@pytest.fixture  # type: ignore[misc]
def repository(database_url: str) -> EventRepository:
    """An empty event store with its schema created."""
    return EventRepository.from_url(database_url)


@pytest.fixture  # type: ignore[misc]
def job_store() -> InMemoryJobStore:
    """A private job store, isolated from the process-wide singleton."""
    return InMemoryJobStore()
