"""Chronologicon: historical event ingestion and temporal analytics.

The package is split into a streaming ingestion pipeline
(:mod:`chronologicon.ingestion`) and a read-only analytics engine
(:mod:`chronologicon.analytics`), glued to a relational store
(:mod:`chronologicon.storage`) and a process-scoped job registry
(:mod:`chronologicon.jobs`).
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
