"""Typed contracts (Pydantic v2) shared by ingestion, storage and analytics."""

from __future__ import annotations

from .common import UUID_PATTERN, EventId, Timestamp
from .event import EventMetadata, HistoricalEvent, SearchPage
from .insight import (
    GapReport,
    InfluencePath,
    OverlapEvent,
    OverlapPair,
    PathNode,
    PrecedingEvent,
    SucceedingEvent,
    TemporalGap,
)
from .job import IngestionJob, JobStatus
from .timeline import TimelineNode

__all__ = [
    "EventId",
    "EventMetadata",
    "GapReport",
    "HistoricalEvent",
    "InfluencePath",
    "IngestionJob",
    "JobStatus",
    "OverlapEvent",
    "OverlapPair",
    "PathNode",
    "PrecedingEvent",
    "SearchPage",
    "SucceedingEvent",
    "TemporalGap",
    "Timestamp",
    "TimelineNode",
    "UUID_PATTERN",
]
