"""Relational event store (SQLAlchemy; SQLite and PostgreSQL dialects)."""

from __future__ import annotations

from .db import Base, get_engine, get_session_factory, init_db
from .repository import EventRepository

__all__ = ["Base", "EventRepository", "get_engine", "get_session_factory", "init_db"]
