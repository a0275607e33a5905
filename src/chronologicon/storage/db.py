"""Engine and session plumbing for the event store.

Engines are cached per URL so the CLI, the background ingestion workers and
the analytics services share one connection pool per database.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


@lru_cache(maxsize=None)
def get_engine(url: str) -> Engine:
    """Create (once per URL) the engine for `url`."""
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Ingestion runs on worker threads.
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def get_session_factory(url: str) -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(url), autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create the schema if it does not exist yet."""
    # Registers the mapped tables on Base.metadata.
    from . import models  # noqa: F401

    Base.metadata.create_all(engine)


__all__ = ["Base", "get_engine", "get_session_factory", "init_db"]
