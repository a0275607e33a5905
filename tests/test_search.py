# tests/test_search.py
"""Tests for the event search service."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from factories import at, make_event, uid

from chronologicon.core.contracts.event import HistoricalEvent
from chronologicon.services.search import MAX_LIMIT, search_events
from chronologicon.storage.repository import EventRepository


class SpySource:
    """Captures the arguments the service forwards."""

    def __init__(self) -> None:
        self.kwargs: dict[str, Any] = {}

    def search(self, **kwargs: Any) -> tuple[int, list[HistoricalEvent]]:
        self.kwargs = kwargs
        return 0, []


def test_page_and_limit_are_clamped() -> None:
    spy = SpySource()
    page = search_events(spy, page=-3, limit=5000)

    assert (page.page, page.limit) == (1, MAX_LIMIT)
    assert spy.kwargs["page"] == 1
    assert spy.kwargs["limit"] == MAX_LIMIT
    assert page.total_events == 0
    assert page.events == []


def test_filters_are_forwarded() -> None:
    spy = SpySource()
    after = datetime(2023, 1, 1)
    search_events(spy, name="war", start_date_after=after, sort_by="event_name", sort_order="desc")
    assert spy.kwargs["name"] == "war"
    assert spy.kwargs["start_date_after"] == after
    assert spy.kwargs["sort_by"] == "event_name"
    assert spy.kwargs["sort_order"] == "desc"


def test_search_page_over_a_real_store(repository: EventRepository) -> None:
    repository.insert_if_absent(
        [make_event(n, name=f"Council {n}", start=at(n)) for n in range(1, 8)]
    )
    page = search_events(repository, name="council", page=2, limit=3)

    assert page.total_events == 7
    assert [e.event_id for e in page.events] == [uid(4), uid(5), uid(6)]
    dumped = page.model_dump(mode="json")
    assert dumped["events"][0]["start_date"] == "2023-01-04T00:00:00.000Z"
    assert dumped["events"][0]["duration_minutes"] == 60
