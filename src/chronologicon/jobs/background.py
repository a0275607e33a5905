"""
Background runner for ingestion jobs.

`submit_ingestion` registers a job and schedules `run_ingestion_task` on a
process-wide thread pool, returning the PENDING job immediately. Callers
follow progress by polling the job store; nothing is pushed to them.

`run_ingestion_task` never raises to its caller. Anything the ingestor itself
does not turn into a report is captured here and the job is marked FAILED.

Jobs cannot be cancelled once submitted and do not survive a restart.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from threading import Lock

from chronologicon.core.contracts.job import IngestionJob, JobStatus
from chronologicon.core.settings import Settings, get_logger, load_settings
from chronologicon.core.timeutil import utcnow
from chronologicon.ingestion.ingestor import BatchIngestor, EventSink, iter_source_lines

from .job_store import JobRegistry, get_job_store

logger = get_logger("chronologicon.jobs")

_executor: ThreadPoolExecutor | None = None
_executor_lock = Lock()


def get_executor() -> ThreadPoolExecutor:
    """Return the shared ingestion thread pool, creating it on first use."""
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=load_settings().ingest_workers,
                thread_name_prefix="ingest",
            )
        return _executor


def run_ingestion_task(
    job_id: str,
    path: Path | str,
    *,
    sink: EventSink,
    store: JobRegistry | None = None,
    settings: Settings | None = None,
) -> None:
    """
    Ingest `path` into `sink` and keep job `job_id` up to date.

    Parameters
    ----------
    job_id:
        Id of a PENDING job in `store`.
    path:
        UTF-8 file of pipe-delimited records.
    sink:
        Destination store (insert-if-absent).
    store:
        Job registry; defaults to the process-wide in-memory store.
    settings:
        Batch size and error-log cap; defaults to the loaded settings.
    """
    store = store or get_job_store()
    settings = settings or load_settings()
    source = Path(path)

    # 1. Transition to PROCESSING
    store.update(job_id, status=JobStatus.PROCESSING, start_time=utcnow())
    logger.info("Ingestion job %s started for %s", job_id, source)

    try:
        # 2. Stream the file through the ingestor, publishing progress per flush
        ingestor = BatchIngestor(
            sink,
            batch_size=settings.batch_size,
            error_log_cap=settings.error_log_cap,
            on_progress=lambda progress: store.update(job_id, **progress.as_fields()),
        )
        report = ingestor.run(iter_source_lines(source), source_name=source.name)

        # 3. Terminal transition (COMPLETED, or FAILED on a source read error)
        store.update(job_id, **report.as_fields())
        logger.info(
            "Ingestion job %s %s: %d processed, %d errors, %d total lines",
            job_id,
            report.status.value,
            report.processed_count,
            report.error_count,
            report.total_lines,
        )

    except Exception as exc:
        # 4. Anything else: keep partial counts, append the fatal diagnostic
        logger.exception("Ingestion job %s failed", job_id)
        current = store.get(job_id)
        errors = list(current.errors) if current is not None else []
        store.update(
            job_id,
            status=JobStatus.FAILED,
            errors=[*errors, f"Fatal error: {exc}"],
            end_time=utcnow(),
        )


def submit_ingestion(
    path: Path | str,
    *,
    sink: EventSink,
    store: JobRegistry | None = None,
    executor: ThreadPoolExecutor | None = None,
    settings: Settings | None = None,
) -> tuple[IngestionJob, Future[None]]:
    """
    Create a job for `path` and schedule it in the background.

    Returns
    -------
    tuple[IngestionJob, Future[None]]
        The PENDING job record and the future of its worker. The future is
        only useful to wait on; results are read from the job store.
    """
    store = store or get_job_store()
    job = store.create(source=str(path))
    future = (executor or get_executor()).submit(
        run_ingestion_task,
        job.job_id,
        path,
        sink=sink,
        store=store,
        settings=settings,
    )
    return job, future


__all__ = ["get_executor", "run_ingestion_task", "submit_ingestion"]
