"""
In-Memory Job Store for ingestion jobs.

This module implements a small, lock-guarded store for tracking the lifecycle
of ingestion jobs behind the :class:`JobRegistry` interface.

Responsibilities
----------------
- **Create**: Generate ids for new jobs and mark them PENDING.
- **Read**: Return a snapshot of a job's current state by id.
- **Update**: Apply partial field updates, refusing status regressions and
  any transition out of COMPLETED/FAILED.

Note on Persistence
-------------------
This is a volatile memory store scoped to the process. If the process
restarts, all job history is lost, and records are never evicted. A durable
implementation only has to satisfy :class:`JobRegistry`.
"""

from __future__ import annotations

import threading
import uuid
from typing import Any, ClassVar, Protocol

from chronologicon.core.contracts.job import IngestionJob, JobStatus
from chronologicon.core.errors import JobStateError
from chronologicon.core.timeutil import utcnow


class JobRegistry(Protocol):
    """Keyed store of :class:`IngestionJob` records."""

    def create(self, source: str | None = None) -> IngestionJob: ...

    def get(self, job_id: str) -> IngestionJob | None: ...

    def update(self, job_id: str, **fields: Any) -> IngestionJob | None: ...


class InMemoryJobStore:
    """
    A dictionary-backed :class:`JobRegistry`.

    `get` and `update` hand out copies, so a poller never observes a record
    while the owning worker is halfway through changing it.
    """

    # Singleton instance placeholder (created on first access)
    _instance: ClassVar[InMemoryJobStore | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._jobs: dict[str, IngestionJob] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> InMemoryJobStore:
        """Accessor for the process-wide singleton instance."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def create(self, source: str | None = None) -> IngestionJob:
        """
        Register a new job and initialize its state to PENDING.

        Returns
        -------
        IngestionJob
            A copy of the freshly created record; its id looks like
            ``ingest-job-<uuid4>``.
        """
        job = IngestionJob(
            job_id=f"ingest-job-{uuid.uuid4()}",
            status=JobStatus.PENDING,
            source=source,
            created_at=utcnow(),
        )
        with self._lock:
            self._jobs[job.job_id] = job
        return job.model_copy(deep=True)

    def get(self, job_id: str) -> IngestionJob | None:
        """Return a snapshot of the job, or None if not found."""
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy(deep=True) if job is not None else None

    def update(self, job_id: str, **fields: Any) -> IngestionJob | None:
        """
        Merge `fields` into the job and return the updated snapshot.

        Returns None for an unknown id.

        Raises
        ------
        JobStateError
            If the update would move a terminal job, or move any job backwards.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None

            if "status" in fields:
                target = JobStatus(fields["status"])
                if target != job.status and (job.status.is_terminal or target.rank < job.status.rank):
                    raise JobStateError(
                        f"Job {job_id} cannot move from {job.status.value} to {target.value}"
                    )
            elif job.status.is_terminal and fields:
                raise JobStateError(f"Job {job_id} is {job.status.value} and can no longer change")

            updated = IngestionJob.model_validate({**job.model_dump(), **fields})
            self._jobs[job_id] = updated
            return updated.model_copy(deep=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def clear(self) -> None:
        """Forget every job (test helper; nothing else evicts records)."""
        with self._lock:
            self._jobs.clear()


# Global accessor for convenience
def get_job_store() -> InMemoryJobStore:
    return InMemoryJobStore.get_instance()


__all__ = ["InMemoryJobStore", "JobRegistry", "get_job_store"]
