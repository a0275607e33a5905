"""Streaming ingestion: line parsing and batched, fault-tolerant loading."""

from __future__ import annotations

from .ingestor import (
    BatchIngestor,
    EventSink,
    IngestionProgress,
    IngestionReport,
    iter_source_lines,
)
from .parser import ParsedLine, is_valid_uuid, parse_line

__all__ = [
    "BatchIngestor",
    "EventSink",
    "IngestionProgress",
    "IngestionReport",
    "ParsedLine",
    "is_valid_uuid",
    "iter_source_lines",
    "parse_line",
]
