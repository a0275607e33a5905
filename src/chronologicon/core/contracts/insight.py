"""Result payloads for the temporal-analytics queries.

Each query answers with data, never with an exception: an empty path, a
``None`` gap or an empty pair list, accompanied by a human-readable `message`
where a caller needs to tell "nothing found" apart from "input not found".
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .common import Timestamp

# --------------------------------------------------------------------------- #
# Influence path
# --------------------------------------------------------------------------- #


class PathNode(BaseModel):
    """One hop on an influence path, with the node's own duration."""

    event_id: str
    event_name: str
    duration_minutes: int


class InfluencePath(BaseModel):
    """Cheapest source -> target walk over the bidirectional event graph."""

    source_event_id: str
    target_event_id: str
    shortest_path: list[PathNode] = Field(default_factory=list)
    total_duration_minutes: int = Field(default=0)
    message: str

    @property
    def found(self) -> bool:
        return bool(self.shortest_path)


# --------------------------------------------------------------------------- #
# Temporal gaps
# --------------------------------------------------------------------------- #


class PrecedingEvent(BaseModel):
    """The event whose end opened a gap."""

    event_id: str
    event_name: str
    end_date: Timestamp


class SucceedingEvent(BaseModel):
    """The event whose start closed a gap."""

    event_id: str
    event_name: str
    start_date: Timestamp


class TemporalGap(BaseModel):
    start_of_gap: Timestamp
    end_of_gap: Timestamp
    duration_minutes: int = Field(gt=0)
    preceding_event: PrecedingEvent | None = Field(
        default=None, description="None for a gap that opens at the query start"
    )
    succeeding_event: SucceedingEvent | None = Field(
        default=None, description="None for a gap that runs to the query end"
    )


class GapReport(BaseModel):
    largest_gap: TemporalGap | None = None
    message: str


# --------------------------------------------------------------------------- #
# Overlaps
# --------------------------------------------------------------------------- #


class OverlapEvent(BaseModel):
    event_id: str
    event_name: str
    start_date: Timestamp
    end_date: Timestamp


class OverlapPair(BaseModel):
    """Two intersecting events, ordered by event id, and their shared minutes."""

    overlapping_event_pairs: tuple[OverlapEvent, OverlapEvent]
    overlap_duration_minutes: int = Field(ge=0)


__all__ = [
    "GapReport",
    "InfluencePath",
    "OverlapEvent",
    "OverlapPair",
    "PathNode",
    "PrecedingEvent",
    "SucceedingEvent",
    "TemporalGap",
]
