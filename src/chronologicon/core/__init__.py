"""Core package initializer for Chronologicon.

Settings, time helpers, error types and the typed contracts live here so that
ingestion, storage and analytics can share them without import cycles.
"""

from __future__ import annotations

__all__ = ["__doc__"]
