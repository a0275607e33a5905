"""Query services composed from the store and the analytics engine."""

from __future__ import annotations

from .insights import InsightService
from .search import search_events
from .timeline import build_tree, get_timeline

__all__ = ["InsightService", "build_tree", "get_timeline", "search_events"]
