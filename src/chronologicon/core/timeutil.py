"""UTC timestamp helpers shared by the parser, the store and the analytics.

Every timestamp leaving the system is UTC, millisecond precision, rendered as
ISO-8601 with a trailing ``"Z"`` (e.g. ``"2023-01-02T12:00:00.000Z"``).
Durations are whole minutes rounded half-up, so 90.5 minutes becomes 91.
"""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime

# A date immediately followed by a time component; date-only strings are rejected.
_DATE_TIME_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}")


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime truncated to milliseconds."""
    return truncate_ms(datetime.now(UTC))


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def truncate_ms(value: datetime) -> datetime:
    """Drop sub-millisecond precision."""
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def normalize(value: datetime) -> datetime:
    """UTC + millisecond precision, the canonical in-memory form."""
    return truncate_ms(to_utc(value))


def isoformat_ms(value: datetime) -> str:
    """Render ``value`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return to_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime | None:
    """Parse an ISO-8601 date-time string, returning ``None`` when invalid.

    The string must carry an explicit time component; ``"2023-01-01"`` is
    rejected. Offsets are honoured, and strings without one are read as UTC.
    """
    candidate = text.strip()
    if not _DATE_TIME_PREFIX.match(candidate):
        return None
    if candidate.endswith("z"):
        candidate = candidate[:-1] + "Z"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    return normalize(parsed)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def minutes_between(start: datetime, end: datetime) -> float:
    """Exact (fractional) minutes from ``start`` to ``end``."""
    return (to_utc(end) - to_utc(start)).total_seconds() / 60.0


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Minutes from ``start`` to ``end`` rounded half-up."""
    return round_half_up(minutes_between(start, end))


__all__ = [
    "isoformat_ms",
    "minutes_between",
    "normalize",
    "parse_timestamp",
    "round_half_up",
    "to_utc",
    "truncate_ms",
    "utcnow",
    "whole_minutes_between",
]
