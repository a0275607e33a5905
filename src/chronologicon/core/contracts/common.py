"""Shared small types for the Chronologicon contracts.

`Timestamp` is the one datetime type every contract uses: values are coerced
to aware UTC with millisecond precision on the way in and rendered as
``YYYY-MM-DDTHH:MM:SS.mmmZ`` when dumped in JSON mode.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, Field, PlainSerializer

from chronologicon.core.timeutil import isoformat_ms, normalize

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

Timestamp = Annotated[
    datetime,
    AfterValidator(normalize),
    PlainSerializer(isoformat_ms, return_type=str, when_used="json"),
]

EventId = Annotated[str, Field(pattern=UUID_PATTERN, description="UUID-shaped event id")]

__all__ = ["EventId", "Timestamp", "UUID_PATTERN"]
