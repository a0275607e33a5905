# tests/test_job_store.py
"""Tests for the in-memory job registry and its lifecycle rules."""

from __future__ import annotations

import pytest

from chronologicon.core.contracts.job import JobStatus
from chronologicon.core.errors import JobStateError
from chronologicon.jobs.job_store import InMemoryJobStore, get_job_store


def test_create_registers_a_pending_job(job_store: InMemoryJobStore) -> None:
    job = job_store.create(source="events.txt")

    assert job.job_id.startswith("ingest-job-")
    assert job.status == JobStatus.PENDING
    assert job.source == "events.txt"
    assert (job.processed_count, job.error_count, job.total_lines) == (0, 0, 0)
    assert job.start_time is None and job.end_time is None
    assert len(job_store) == 1


def test_ids_are_unique(job_store: InMemoryJobStore) -> None:
    ids = {job_store.create().job_id for _ in range(20)}
    assert len(ids) == 20


def test_get_returns_a_copy(job_store: InMemoryJobStore) -> None:
    job = job_store.create()
    snapshot = job_store.get(job.job_id)
    assert snapshot is not None
    snapshot.errors.append("tampered")

    again = job_store.get(job.job_id)
    assert again is not None
    assert again.errors == []


def test_unknown_ids(job_store: InMemoryJobStore) -> None:
    assert job_store.get("ingest-job-missing") is None
    assert job_store.update("ingest-job-missing", processed_count=1) is None


def test_partial_updates_merge(job_store: InMemoryJobStore) -> None:
    job = job_store.create()
    job_store.update(job.job_id, status=JobStatus.PROCESSING)
    updated = job_store.update(job.job_id, processed_count=10, errors=["Line 1: x"])

    assert updated is not None
    assert updated.status == JobStatus.PROCESSING
    assert updated.processed_count == 10
    assert updated.errors == ["Line 1: x"]


def test_forward_lifecycle(job_store: InMemoryJobStore) -> None:
    job = job_store.create()
    job_store.update(job.job_id, status=JobStatus.PROCESSING)
    done = job_store.update(job.job_id, status="COMPLETED", processed_count=3)
    assert done is not None
    assert done.status == JobStatus.COMPLETED


@pytest.mark.parametrize(  # type: ignore[misc]
    "terminal", [JobStatus.COMPLETED, JobStatus.FAILED]
)
def test_terminal_jobs_cannot_change(job_store: InMemoryJobStore, terminal: JobStatus) -> None:
    job = job_store.create()
    job_store.update(job.job_id, status=JobStatus.PROCESSING)
    job_store.update(job.job_id, status=terminal)

    with pytest.raises(JobStateError):
        job_store.update(job.job_id, status=JobStatus.PROCESSING)
    other = JobStatus.FAILED if terminal == JobStatus.COMPLETED else JobStatus.COMPLETED
    with pytest.raises(JobStateError):
        job_store.update(job.job_id, status=other)
    with pytest.raises(JobStateError):
        job_store.update(job.job_id, processed_count=99)


def test_status_cannot_move_backwards(job_store: InMemoryJobStore) -> None:
    job = job_store.create()
    job_store.update(job.job_id, status=JobStatus.PROCESSING)
    with pytest.raises(JobStateError):
        job_store.update(job.job_id, status=JobStatus.PENDING)


def test_pending_may_fail_directly(job_store: InMemoryJobStore) -> None:
    job = job_store.create()
    failed = job_store.update(job.job_id, status=JobStatus.FAILED)
    assert failed is not None
    assert failed.status.is_terminal


def test_clear(job_store: InMemoryJobStore) -> None:
    job_store.create()
    job_store.clear()
    assert len(job_store) == 0


def test_global_store_is_a_singleton() -> None:
    assert get_job_store() is get_job_store()
    assert get_job_store() is InMemoryJobStore.get_instance()
