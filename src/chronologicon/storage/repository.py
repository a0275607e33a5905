"""
Event repository: the storage collaborator behind ingestion and analytics.

Operations
----------
- ``insert_if_absent(events)``  multi-row insert keyed by ``event_id``; rows
  whose id already exists are skipped (``ON CONFLICT DO NOTHING``).
- ``get_by_id(event_id)``        point lookup.
- ``get_subtree(root_id)``       root plus all descendants (recursive CTE).
- ``get_ancestors(leaf_id)``     leaf plus its whole parent chain (recursive CTE).
- ``events_in_range(lo, hi)``    events fully inside ``[lo, hi]``, by start.
- ``graph_rows()``               (id, name, parent, duration) for every event.
- ``search(...)``                filtered, sorted, paginated listing.

Recursive walks use ``UNION`` rather than ``UNION ALL`` over (id, parent)
pairs, so a parent cycle in the data terminates instead of looping.

Every SQLAlchemy failure is re-raised as :class:`StorageError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from chronologicon.analytics.graph import GraphNode
from chronologicon.core.contracts.event import EventMetadata, HistoricalEvent
from chronologicon.core.errors import StorageError
from chronologicon.core.settings import get_logger

from .db import get_engine, get_session_factory, init_db
from .models import HistoricalEventRecord

logger = get_logger("chronologicon.storage")

events_table = HistoricalEventRecord.__table__

SORTABLE_COLUMNS: frozenset[str] = frozenset(
    {"start_date", "end_date", "event_name", "duration_minutes"}
)
MAX_PAGE_SIZE = 100


def _to_row(event: HistoricalEvent) -> dict[str, Any]:
    return {
        "event_id": event.event_id,
        "event_name": event.event_name,
        "description": event.description,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "duration_minutes": event.duration_minutes,
        "parent_event_id": event.parent_event_id,
        "metadata": event.metadata.model_dump(mode="json"),
    }


def _to_event(mapping: Any) -> HistoricalEvent:
    meta = mapping["metadata"] or {}
    return HistoricalEvent(
        event_id=mapping["event_id"],
        event_name=mapping["event_name"],
        description=mapping["description"],
        start_date=mapping["start_date"],
        end_date=mapping["end_date"],
        parent_event_id=mapping["parent_event_id"],
        metadata=EventMetadata.model_validate(meta),
    )


def _insert_ignoring_conflicts(dialect_name: str) -> Any:
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise StorageError(f"insert-if-absent is not supported on dialect '{dialect_name}'")
    return insert(events_table).on_conflict_do_nothing(index_elements=["event_id"])


class EventRepository:
    """SQLAlchemy-backed store of :class:`HistoricalEvent` records."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, url: str, *, create_schema: bool = True) -> EventRepository:
        """Build a repository for `url`, creating the schema unless told not to."""
        if create_schema:
            init_db(get_engine(url))
        return cls(get_session_factory(url))

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def insert_if_absent(self, events: Sequence[HistoricalEvent]) -> None:
        """Insert `events` in one transaction, skipping ids that already exist."""
        if not events:
            return
        rows = [_to_row(e) for e in events]
        with self._session_factory() as session:
            try:
                stmt = _insert_ignoring_conflicts(session.get_bind().dialect.name)
                session.execute(stmt, rows)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.debug("insert of %d rows rolled back: %s", len(rows), exc)
                raise StorageError(str(exc)) from exc

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def _fetch(self, stmt: Select[Any]) -> list[HistoricalEvent]:
        with self._session_factory() as session:
            try:
                rows = session.execute(stmt).mappings().all()
            except SQLAlchemyError as exc:
                raise StorageError(str(exc)) from exc
        return [_to_event(r) for r in rows]

    def get_by_id(self, event_id: str) -> HistoricalEvent | None:
        found = self._fetch(select(events_table).where(events_table.c.event_id == event_id))
        return found[0] if found else None

    def get_subtree(self, root_id: str) -> list[HistoricalEvent]:
        """Return the root and all of its descendants, ordered by start."""
        tree = (
            select(events_table.c.event_id)
            .where(events_table.c.event_id == root_id)
            .cte("event_tree", recursive=True)
        )
        tree = tree.union(
            select(events_table.c.event_id).join(
                tree, events_table.c.parent_event_id == tree.c.event_id
            )
        )
        stmt = (
            select(events_table)
            .where(events_table.c.event_id.in_(select(tree.c.event_id)))
            .order_by(events_table.c.start_date, events_table.c.event_id)
        )
        return self._fetch(stmt)

    def get_ancestors(self, leaf_id: str) -> list[HistoricalEvent]:
        """Return the leaf and every ancestor reachable through parent links."""
        chain = (
            select(events_table.c.event_id, events_table.c.parent_event_id)
            .where(events_table.c.event_id == leaf_id)
            .cte("ancestor_chain", recursive=True)
        )
        chain = chain.union(
            select(events_table.c.event_id, events_table.c.parent_event_id).join(
                chain, events_table.c.event_id == chain.c.parent_event_id
            )
        )
        stmt = (
            select(events_table)
            .where(events_table.c.event_id.in_(select(chain.c.event_id)))
            .order_by(events_table.c.start_date, events_table.c.event_id)
        )
        return self._fetch(stmt)

    def events_in_range(self, start: datetime, end: datetime) -> list[HistoricalEvent]:
        """Events lying fully inside ``[start, end]``, ascending by start."""
        stmt = (
            select(events_table)
            .where(events_table.c.start_date >= start, events_table.c.end_date <= end)
            .order_by(events_table.c.start_date, events_table.c.event_id)
        )
        return self._fetch(stmt)

    def graph_rows(self) -> list[GraphNode]:
        """Unfiltered (id, name, parent, duration) projection for graph building."""
        stmt = select(
            events_table.c.event_id,
            events_table.c.event_name,
            events_table.c.parent_event_id,
            events_table.c.duration_minutes,
        )
        with self._session_factory() as session:
            try:
                rows = session.execute(stmt).all()
            except SQLAlchemyError as exc:
                raise StorageError(str(exc)) from exc
        return [
            GraphNode(
                event_id=r.event_id,
                event_name=r.event_name,
                duration_minutes=r.duration_minutes or 0,
                parent_event_id=r.parent_event_id,
            )
            for r in rows
        ]

    def count(self) -> int:
        with self._session_factory() as session:
            return int(session.execute(select(func.count()).select_from(events_table)).scalar_one())

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
    ) -> tuple[int, list[HistoricalEvent]]:
        """Return ``(total_matches, page_of_events)``.

        `sort_by` outside :data:`SORTABLE_COLUMNS` falls back to ``start_date``;
        any `sort_order` other than ``"desc"`` sorts ascending.
        """
        filters = []
        if name:
            filters.append(events_table.c.event_name.ilike(f"%{name}%"))
        if start_date_after is not None:
            filters.append(events_table.c.start_date > start_date_after)
        if end_date_before is not None:
            filters.append(events_table.c.end_date < end_date_before)

        column = events_table.c[sort_by if sort_by in SORTABLE_COLUMNS else "start_date"]
        ordering = column.desc() if sort_order == "desc" else column.asc()

        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        count_stmt = select(func.count()).select_from(events_table).where(*filters)
        page_stmt = (
            select(events_table)
            .where(*filters)
            .order_by(ordering, events_table.c.event_id)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        with self._session_factory() as session:
            try:
                total = int(session.execute(count_stmt).scalar_one())
            except SQLAlchemyError as exc:
                raise StorageError(str(exc)) from exc
        return total, self._fetch(page_stmt)


__all__ = ["EventRepository", "MAX_PAGE_SIZE", "SORTABLE_COLUMNS"]
