"""HistoricalEvent and its ingestion provenance.

A historical event is an interval ``[start_date, end_date]`` with an optional
parent reference; parent links form a forest that may contain orphans (a
parent id that was never ingested). Events are created by ingestion only and
are never updated in place, so the model is frozen.

`duration_minutes` is derived from the interval and exposed as a computed
field: it is dumped (and persisted by the store) but can never be supplied.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from chronologicon.core.timeutil import whole_minutes_between

from .common import EventId, Timestamp


class EventMetadata(BaseModel):
    """Where an event came from: source file, line, and parse time."""

    model_config = ConfigDict(frozen=True)

    source_file: str | None = Field(default=None, description="Source identifier (file name)")
    line_number: int | None = Field(default=None, ge=1, description="1-based originating line")
    parsed_at: Timestamp | None = Field(default=None, description="UTC parse time")


class HistoricalEvent(BaseModel):
    """A single dated interval in the event forest."""

    model_config = ConfigDict(frozen=True)

    event_id: EventId
    event_name: str = Field(min_length=1)
    description: str | None = Field(default=None)
    start_date: Timestamp
    end_date: Timestamp
    parent_event_id: EventId | None = Field(default=None)
    metadata: EventMetadata = Field(default_factory=EventMetadata)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> HistoricalEvent:
        if self.end_date < self.start_date:
            raise ValueError("end_date is before start_date")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_minutes(self) -> int:
        """Interval length in whole minutes, rounded half-up."""
        return whole_minutes_between(self.start_date, self.end_date)


class SearchPage(BaseModel):
    """One page of an event search."""

    total_events: int = Field(ge=0)
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    events: list[HistoricalEvent] = Field(default_factory=list)


__all__ = ["EventMetadata", "HistoricalEvent", "SearchPage"]
