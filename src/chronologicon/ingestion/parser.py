"""Line parser: one pipe-delimited record -> a typed event or a diagnostic.

Record format
-------------
``EVENT_ID|EVENT_NAME|START_DATE_ISO|END_DATE_ISO|PARENT_ID_OR_NULL|DESCRIPTION``

Contract
--------
`parse_line(raw, line_number)` never raises for bad input. It returns a
:class:`ParsedLine` that is one of:

- ``(None, None)``   blank or whitespace-only line, skip silently;
- ``(None, "...")``  the record is invalid, the string says why and where;
- ``(event, None)``  a validated :class:`HistoricalEvent`.

Callers can therefore keep consuming the stream unconditionally.

Examples
--------
>>> parse_line("   ", 3)
ParsedLine(event=None, error=None)
>>> parse_line("a|b", 7).error
"Line 7: Malformed entry (expected 6 fields, got 2): 'a|b'"
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import ValidationError

from chronologicon.core.contracts.common import UUID_PATTERN
from chronologicon.core.contracts.event import HistoricalEvent
from chronologicon.core.timeutil import parse_timestamp

FIELD_COUNT = 6
NULL_TOKEN = "NULL"

_UUID = re.compile(UUID_PATTERN)
# Malformed lines are echoed back, but only this much of them.
_ECHO_LIMIT = 120


@dataclass(frozen=True, slots=True)
class ParsedLine:
    """Outcome of parsing one line: at most one of the two fields is set."""

    event: HistoricalEvent | None = None
    error: str | None = None

    @property
    def is_blank(self) -> bool:
        return self.event is None and self.error is None


def is_valid_uuid(text: str) -> bool:
    """Return True if `text` has the 8-4-4-4-12 hex shape (any case)."""
    return bool(_UUID.match(text))


def parse_line(raw: str | None, line_number: int) -> ParsedLine:
    """Validate and normalize one raw record.

    Parameters
    ----------
    raw : str | None
        The line as read from the source, without its line terminator.
    line_number : int
        1-based position of the line, used to prefix diagnostics.

    Returns
    -------
    ParsedLine
        See the module docstring for the three possible shapes.
    """
    if raw is None or not raw.strip():
        return ParsedLine()

    prefix = f"Line {line_number}"
    parts = raw.split("|")
    if len(parts) != FIELD_COUNT:
        return ParsedLine(
            error=(
                f"{prefix}: Malformed entry (expected {FIELD_COUNT} fields, "
                f"got {len(parts)}): '{raw[:_ECHO_LIMIT]}'"
            )
        )

    event_id, event_name, start_raw, end_raw, parent_raw, description = (p.strip() for p in parts)

    if not is_valid_uuid(event_id):
        return ParsedLine(error=f"{prefix}: Invalid UUID for event_id: '{event_id}'")

    if not event_name:
        return ParsedLine(error=f"{prefix}: Missing event_name for event '{event_id}'")

    start_date = parse_timestamp(start_raw)
    if start_date is None:
        return ParsedLine(
            error=(
                f"{prefix}: Invalid date format for start_date of event "
                f"'{event_id}': '{start_raw}'"
            )
        )

    end_date = parse_timestamp(end_raw)
    if end_date is None:
        return ParsedLine(
            error=(
                f"{prefix}: Invalid date format for end_date of event '{event_id}': '{end_raw}'"
            )
        )

    if end_date < start_date:
        return ParsedLine(
            error=f"{prefix}: end_date is before start_date for event '{event_id}'"
        )

    parent_event_id: str | None = None
    if parent_raw and parent_raw.upper() != NULL_TOKEN:
        if not is_valid_uuid(parent_raw):
            return ParsedLine(
                error=f"{prefix}: Invalid UUID for parent_event_id: '{parent_raw}'"
            )
        parent_event_id = parent_raw

    try:
        event = HistoricalEvent(
            event_id=event_id,
            event_name=event_name,
            description=description or None,
            start_date=start_date,
            end_date=end_date,
            parent_event_id=parent_event_id,
        )
    except ValidationError as exc:
        # The checks above mirror the model; this only guards drift between them.
        first = exc.errors()[0]
        return ParsedLine(error=f"{prefix}: Invalid event '{event_id}': {first['msg']}")

    return ParsedLine(event=event)


__all__ = ["FIELD_COUNT", "NULL_TOKEN", "ParsedLine", "is_valid_uuid", "parse_line"]
