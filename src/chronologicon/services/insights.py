"""
Insight service: binds the event store to the analytics engine.

Every query reads whatever is committed at the moment it runs (no stronger
isolation), works on read-only copies, and is safe to call concurrently with
ingestion and with other queries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from chronologicon.analytics.gaps import find_largest_gap
from chronologicon.analytics.graph import GraphNode, build_event_graph
from chronologicon.analytics.influence import find_influence_path
from chronologicon.analytics.overlaps import find_overlapping_pairs
from chronologicon.core.contracts.event import HistoricalEvent
from chronologicon.core.contracts.insight import GapReport, InfluencePath, OverlapPair
from chronologicon.core.settings import get_logger

logger = get_logger("chronologicon.insights")


class InsightSource(Protocol):
    """The reads the analytics need from the store."""

    def events_in_range(self, start: datetime, end: datetime) -> list[HistoricalEvent]: ...

    def graph_rows(self) -> list[GraphNode]: ...


class InsightService:
    """Overlap, gap and influence queries over an :class:`InsightSource`."""

    def __init__(self, source: InsightSource) -> None:
        self.source = source

    def overlapping_events(self, start: datetime, end: datetime) -> list[OverlapPair]:
        """All intersecting pairs fully inside ``[start, end]``, largest first."""
        events = self.source.events_in_range(start, end)
        pairs = find_overlapping_pairs(events, start, end)
        logger.debug("overlaps: %d events in range, %d pairs", len(events), len(pairs))
        return pairs

    def temporal_gaps(self, start: datetime, end: datetime) -> GapReport:
        """Largest uncovered span of ``[start, end]``."""
        return find_largest_gap(self.source.events_in_range(start, end), start, end)

    def event_influence(self, source_event_id: str, target_event_id: str) -> InfluencePath:
        """Cheapest node-weighted path between two events."""
        graph = build_event_graph(self.source.graph_rows())
        logger.debug("influence: graph with %d nodes, %d edges", len(graph), graph.edge_count())
        return find_influence_path(graph, source_event_id, target_event_id)


__all__ = ["InsightService", "InsightSource"]
