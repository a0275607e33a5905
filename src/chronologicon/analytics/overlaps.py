"""
Pairwise interval intersections inside a window (sort and scan).

Two events ``a`` and ``b`` overlap when ``a.start < b.end and b.start < a.end``.
Only events lying fully inside ``[window_start, window_end]`` are considered.
Each unordered pair is reported once, ordered by event id, with

    overlap = min(a.end, b.end) - max(a.start, b.start)

in minutes, rounded half-up. Pairs come back sorted by descending overlap.

Implementation: sort by start, then for each event scan forward only while
the next start is before its end. Worst case is quadratic in the number of
mutually overlapping events, which is inherent to listing every pair.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from chronologicon.core.contracts.insight import OverlapEvent, OverlapPair
from chronologicon.core.timeutil import normalize, whole_minutes_between

from .gaps import IntervalRow


def _as_overlap_event(row: IntervalRow) -> OverlapEvent:
    return OverlapEvent(
        event_id=row.event_id,
        event_name=row.event_name,
        start_date=row.start_date,
        end_date=row.end_date,
    )


def find_overlapping_pairs(
    events: Iterable[IntervalRow], window_start: datetime, window_end: datetime
) -> list[OverlapPair]:
    """Return every intersecting pair inside the window, largest overlap first."""
    lo = normalize(window_start)
    hi = normalize(window_end)

    contained = [
        e for e in events if normalize(e.start_date) >= lo and normalize(e.end_date) <= hi
    ]
    contained.sort(key=lambda e: (normalize(e.start_date), e.event_id))

    found: list[tuple[timedelta, str, str, OverlapPair]] = []
    for i, a in enumerate(contained):
        a_start, a_end = normalize(a.start_date), normalize(a.end_date)
        for b in contained[i + 1 :]:
            b_start, b_end = normalize(b.start_date), normalize(b.end_date)
            if b_start >= a_end:
                break
            if a.event_id == b.event_id or not (a_start < b_end and b_start < a_end):
                continue

            first, second = (a, b) if a.event_id < b.event_id else (b, a)
            shared_start = max(a_start, b_start)
            shared_end = min(a_end, b_end)
            pair = OverlapPair(
                overlapping_event_pairs=(_as_overlap_event(first), _as_overlap_event(second)),
                overlap_duration_minutes=whole_minutes_between(shared_start, shared_end),
            )
            found.append((shared_end - shared_start, first.event_id, second.event_id, pair))

    found.sort(key=lambda item: (-item[0], item[1], item[2]))
    return [item[3] for item in found]


__all__ = ["find_overlapping_pairs"]
