"""
Batch ingestor: stream lines -> validated events -> batched, fault-tolerant writes.

Lifecycle
---------
One call to :meth:`BatchIngestor.run` is one job pass. The report it returns
carries the terminal status:

- ``COMPLETED`` when the whole source was consumed (row-level problems are
  only counted, they never abort the pass);
- ``FAILED`` when the source itself could not be read. Counts reflect the
  work committed so far and a final ``"Fatal error: <cause>"`` diagnostic is
  appended after the capped log.

There is no retry of the whole pass; a failed job is resubmitted as a new one.

Write policy
------------
Valid events are collected into a batch of fixed capacity. A full batch (and
the trailing partial batch) is written with a single insert-if-absent call.
If that call raises, every row of the batch is retried on its own so that a
poison row costs one error instead of the whole batch. After each flush a
:class:`IngestionProgress` snapshot is handed to the optional observer.

Counting rules
--------------
- blank lines: ignored entirely;
- parser diagnostics: ``error_count += 1`` and logged into the capped list;
- rows written (batch or individual fallback): ``processed_count += n``,
  including ids that already existed (insert-if-absent skips them silently);
- rows whose individual fallback insert failed: ``error_count += 1``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Protocol

from chronologicon.core.contracts.event import EventMetadata, HistoricalEvent
from chronologicon.core.contracts.job import JobStatus
from chronologicon.core.errors import SourceReadError
from chronologicon.core.settings import get_logger
from chronologicon.core.timeutil import utcnow

from .parser import parse_line

DEFAULT_BATCH_SIZE = 500
DEFAULT_ERROR_LOG_CAP = 100

logger = get_logger("chronologicon.ingestion")


class EventSink(Protocol):
    """Anything that can write events with insert-if-absent semantics."""

    def insert_if_absent(self, events: Sequence[HistoricalEvent]) -> None: ...


@dataclass(frozen=True, slots=True)
class IngestionProgress:
    """Snapshot published after every flush."""

    processed_count: int
    error_count: int
    total_lines: int
    errors: tuple[str, ...]

    def as_fields(self) -> dict[str, object]:
        """Field mapping suitable for a partial job-store update."""
        return {
            "processed_count": self.processed_count,
            "error_count": self.error_count,
            "total_lines": self.total_lines,
            "errors": list(self.errors),
        }


ProgressCallback = Callable[[IngestionProgress], None]


@dataclass(slots=True)
class IngestionReport:
    """Final outcome of one pass."""

    status: JobStatus
    processed_count: int
    error_count: int
    total_lines: int
    errors: list[str]
    started_at: datetime
    finished_at: datetime

    def as_fields(self) -> dict[str, object]:
        return {
            "status": self.status,
            "processed_count": self.processed_count,
            "error_count": self.error_count,
            "total_lines": self.total_lines,
            "errors": list(self.errors),
            "end_time": self.finished_at,
        }


@dataclass(slots=True)
class _Tally:
    """Mutable counters for a single pass."""

    error_log_cap: int
    processed_count: int = 0
    error_count: int = 0
    line_number: int = 0
    errors: list[str] = field(default_factory=list)

    def record_error(self, message: str) -> None:
        self.error_count += 1
        if len(self.errors) < self.error_log_cap:
            self.errors.append(message)

    def snapshot(self) -> IngestionProgress:
        return IngestionProgress(
            processed_count=self.processed_count,
            error_count=self.error_count,
            total_lines=self.line_number,
            errors=tuple(self.errors),
        )


def iter_source_lines(path: Path | str) -> Iterator[str]:
    """Yield the lines of a UTF-8 text file without their terminators.

    The file is opened lazily on first iteration, so a missing or unreadable
    file surfaces while the ingestor is consuming the stream and is handled
    as a fatal source failure. Invalid UTF-8 bytes decode to U+FFFD and the
    affected line is parsed like any other.
    """
    with Path(path).open("r", encoding="utf-8", errors="replace", newline=None) as handle:
        for line in handle:
            yield line.rstrip("\n")


class BatchIngestor:
    """Consume a line stream and load valid events into an :class:`EventSink`.

    Parameters
    ----------
    sink:
        Destination store; must implement insert-if-absent.
    batch_size:
        Capacity of the in-memory batch (rows per multi-row insert).
    error_log_cap:
        Number of diagnostics kept; all of them are still counted.
    on_progress:
        Optional observer called with a snapshot after every flush.
    """

    def __init__(
        self,
        sink: EventSink,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        error_log_cap: int = DEFAULT_ERROR_LOG_CAP,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.sink = sink
        self.batch_size = batch_size
        self.error_log_cap = error_log_cap
        self.on_progress = on_progress

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def run(self, lines: Iterable[str], *, source_name: str) -> IngestionReport:
        """Ingest every line of `lines` and return the terminal report."""
        started_at = utcnow()
        tally = _Tally(error_log_cap=self.error_log_cap)
        batch: list[HistoricalEvent] = []

        try:
            for raw in self._read(lines):
                tally.line_number += 1
                parsed = parse_line(raw, tally.line_number)

                if parsed.error is not None:
                    logger.warning(parsed.error)
                    tally.record_error(parsed.error)
                    continue
                if parsed.event is None:
                    continue

                batch.append(self._with_provenance(parsed.event, source_name, tally.line_number))
                if len(batch) >= self.batch_size:
                    self._flush(batch, tally)
                    batch = []

            if batch:
                self._flush(batch, tally)
                batch = []

        except SourceReadError as exc:
            logger.exception("Ingestion of %s aborted at line %d", source_name, tally.line_number)
            return IngestionReport(
                status=JobStatus.FAILED,
                processed_count=tally.processed_count,
                error_count=tally.error_count,
                total_lines=tally.line_number,
                errors=[*tally.errors, f"Fatal error: {exc}"],
                started_at=started_at,
                finished_at=utcnow(),
            )

        logger.info(
            "Ingestion of %s completed: %d processed, %d errors, %d total lines",
            source_name,
            tally.processed_count,
            tally.error_count,
            tally.line_number,
        )
        return IngestionReport(
            status=JobStatus.COMPLETED,
            processed_count=tally.processed_count,
            error_count=tally.error_count,
            total_lines=tally.line_number,
            errors=list(tally.errors),
            started_at=started_at,
            finished_at=utcnow(),
        )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    @staticmethod
    def _read(lines: Iterable[str]) -> Iterator[str]:
        """Re-raise any failure of the source as :class:`SourceReadError`.

        Only the line iterator is guarded; sink failures propagate unchanged.
        """
        try:
            iterator = iter(lines)
        except Exception as exc:
            raise SourceReadError(str(exc)) from exc
        while True:
            try:
                raw = next(iterator)
            except StopIteration:
                return
            except Exception as exc:
                raise SourceReadError(str(exc)) from exc
            yield raw

    @staticmethod
    def _with_provenance(
        event: HistoricalEvent, source_name: str, line_number: int
    ) -> HistoricalEvent:
        metadata = EventMetadata(
            source_file=source_name,
            line_number=line_number,
            parsed_at=utcnow(),
        )
        return event.model_copy(update={"metadata": metadata})

    def _flush(self, batch: list[HistoricalEvent], tally: _Tally) -> None:
        """Write one batch, falling back to row-by-row inserts on failure."""
        try:
            self.sink.insert_if_absent(batch)
            tally.processed_count += len(batch)
        except Exception as exc:
            logger.error(
                "Batch insert of %d rows failed near line %d: %s",
                len(batch),
                tally.line_number,
                exc,
            )
            for event in batch:
                try:
                    self.sink.insert_if_absent([event])
                    tally.processed_count += 1
                except Exception as row_exc:
                    tally.record_error(
                        f"Line ~{event.metadata.line_number or tally.line_number}: "
                        f"DB insert error for event '{event.event_id}': {row_exc}"
                    )

        if self.on_progress is not None:
            self.on_progress(tally.snapshot())


__all__ = [
    "BatchIngestor",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_ERROR_LOG_CAP",
    "EventSink",
    "IngestionProgress",
    "IngestionReport",
    "ProgressCallback",
    "iter_source_lines",
]
