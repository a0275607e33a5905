"""Event search with filters, sorting and pagination."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from chronologicon.core.contracts.event import HistoricalEvent, SearchPage

MAX_LIMIT = 100


class SearchSource(Protocol):
    def search(
        self,
        *,
        name: str | None = None,
        start_date_after: datetime | None = None,
        end_date_before: datetime | None = None,
        sort_by: str = "start_date",
        sort_order: str = "asc",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[int, list[HistoricalEvent]]: ...


def search_events(
    source: SearchSource,
    *,
    name: str | None = None,
    start_date_after: datetime | None = None,
    end_date_before: datetime | None = None,
    sort_by: str = "start_date",
    sort_order: str = "asc",
    page: int = 1,
    limit: int = 10,
) -> SearchPage:
    """Return one page of matching events.

    `page` is at least 1 and `limit` is clamped to ``[1, 100]``; the clamped
    values are echoed back on the page.
    """
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_LIMIT)
    total, events = source.search(
        name=name,
        start_date_after=start_date_after,
        end_date_before=end_date_before,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return SearchPage(total_events=total, page=page, limit=limit, events=events)


__all__ = ["MAX_LIMIT", "search_events"]
