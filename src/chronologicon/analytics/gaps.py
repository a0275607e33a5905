"""
Largest temporal gap inside a query window (sweep line).

Algorithm
---------
Events are scanned in ascending start order while a *frontier* tracks the
rightmost instant covered so far (initially the query start).

1. If an event starts strictly after the frontier, ``[frontier, start)`` is a
   candidate gap. The largest candidate wins; on ties the earliest is kept.
2. If the event ends after the frontier, the frontier moves to that end and
   the event becomes the *preceding event* for any later gap. Events nested
   inside already-covered time advance nothing and never become the marker.
3. After the scan, ``[frontier, query_end)`` is a trailing candidate with no
   succeeding event.

Only gaps of at least one whole minute (after half-up rounding) are reported;
otherwise the result says explicitly that no significant gap exists.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from chronologicon.core.contracts.insight import (
    GapReport,
    PrecedingEvent,
    SucceedingEvent,
    TemporalGap,
)
from chronologicon.core.timeutil import normalize, whole_minutes_between

MSG_GAP_FOUND = "Largest temporal gap identified."
MSG_NO_GAP = (
    "No significant temporal gaps found within the specified range, or too few events."
)


class IntervalRow(Protocol):
    @property
    def event_id(self) -> str: ...
    @property
    def event_name(self) -> str: ...
    @property
    def start_date(self) -> datetime: ...
    @property
    def end_date(self) -> datetime: ...


@dataclass(slots=True)
class _Candidate:
    start: datetime
    end: datetime
    preceding: IntervalRow | None
    succeeding: IntervalRow | None

    @property
    def span(self) -> timedelta:
        return self.end - self.start


def _to_gap(candidate: _Candidate) -> TemporalGap:
    preceding = candidate.preceding
    succeeding = candidate.succeeding
    return TemporalGap(
        start_of_gap=candidate.start,
        end_of_gap=candidate.end,
        duration_minutes=whole_minutes_between(candidate.start, candidate.end),
        preceding_event=(
            PrecedingEvent(
                event_id=preceding.event_id,
                event_name=preceding.event_name,
                end_date=preceding.end_date,
            )
            if preceding is not None
            else None
        ),
        succeeding_event=(
            SucceedingEvent(
                event_id=succeeding.event_id,
                event_name=succeeding.event_name,
                start_date=succeeding.start_date,
            )
            if succeeding is not None
            else None
        ),
    )


def find_largest_gap(
    events: Iterable[IntervalRow], query_start: datetime, query_end: datetime
) -> GapReport:
    """Return the largest uncovered span of ``[query_start, query_end]``.

    Parameters
    ----------
    events:
        Events intersecting the window. They are expected in ascending start
        order; a stable sort is applied anyway.
    query_start, query_end:
        The window bounds (naive values are read as UTC).
    """
    ordered = sorted(events, key=lambda e: normalize(e.start_date))
    if not ordered:
        return GapReport(largest_gap=None, message=MSG_NO_GAP)

    frontier = normalize(query_start)
    window_end = normalize(query_end)
    preceding: IntervalRow | None = None
    largest: _Candidate | None = None

    for event in ordered:
        start = normalize(event.start_date)
        end = normalize(event.end_date)

        if start > frontier:
            candidate = _Candidate(frontier, start, preceding, event)
            if largest is None or candidate.span > largest.span:
                largest = candidate

        if end > frontier:
            frontier = end
            preceding = event

    if window_end > frontier:
        candidate = _Candidate(frontier, window_end, preceding, None)
        if largest is None or candidate.span > largest.span:
            largest = candidate

    if largest is None or whole_minutes_between(largest.start, largest.end) <= 0:
        return GapReport(largest_gap=None, message=MSG_NO_GAP)

    return GapReport(largest_gap=_to_gap(largest), message=MSG_GAP_FOUND)


__all__ = ["MSG_GAP_FOUND", "MSG_NO_GAP", "find_largest_gap"]
