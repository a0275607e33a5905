"""TimelineNode: an event with its children nested, for hierarchical views."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .common import Timestamp


class TimelineNode(BaseModel):
    """A node of a hierarchical timeline; `children` keep store order."""

    event_id: str
    event_name: str
    description: str | None = Field(default=None)
    start_date: Timestamp
    end_date: Timestamp
    duration_minutes: int
    parent_event_id: str | None = Field(default=None)
    children: list[TimelineNode] = Field(default_factory=list)


__all__ = ["TimelineNode"]
