from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Integer, String, Text
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

from chronologicon.core.timeutil import to_utc

from .db import Base


class UTCDateTime(TypeDecorator[datetime]):
    """Stores naive UTC, hands back aware UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        return to_utc(value).replace(tzinfo=None)

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return to_utc(value)


class HistoricalEventRecord(Base):
    __tablename__ = "historical_events"

    event_id = Column(String(36), primary_key=True)
    event_name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    start_date = Column(UTCDateTime, nullable=False, index=True)
    end_date = Column(UTCDateTime, nullable=False)
    # Persisted copy of the derived duration, for sorting and graph projection.
    duration_minutes = Column(Integer, nullable=False)
    # No foreign key: orphaned parent references are legal.
    parent_event_id = Column(String(36), nullable=True, index=True)
    meta = Column("metadata", JSON, nullable=True)  # {source_file, line_number, parsed_at}

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_historical_events_interval"),
    )
