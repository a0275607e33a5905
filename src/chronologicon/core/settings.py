"""Centralized application configuration using Pydantic Settings (v2).

`load_settings()` returns a cached `Settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local

Ingestion knobs (batch size, error-log cap, worker count) live here as well so
tests can shrink them without touching the pipeline code.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    database_url : str
        SQLAlchemy URL of the event store; maps from `CHRONOLOGICON_DATABASE_URL`.
    batch_size : int
        Rows per multi-row insert during ingestion.
    error_log_cap : int
        Number of diagnostics kept on an ingestion job (all are still counted).
    ingest_workers : int
        Size of the background thread pool running ingestion jobs.
    """

    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    database_url: str = Field(
        default="sqlite:///chronologicon.db", alias="CHRONOLOGICON_DATABASE_URL"
    )
    batch_size: int = Field(default=500, ge=1, alias="CHRONOLOGICON_BATCH_SIZE")
    error_log_cap: int = Field(default=100, ge=0, alias="CHRONOLOGICON_ERROR_LOG_CAP")
    ingest_workers: int = Field(default=4, ge=1, alias="CHRONOLOGICON_INGEST_WORKERS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    return Settings()


def get_logger(name: str = "chronologicon") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
