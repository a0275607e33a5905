"""IngestionJob: the process-scoped record of one ingestion run.

Jobs move through ``PENDING -> PROCESSING -> {COMPLETED, FAILED}``. The two
last states are terminal. Records live only as long as the process does;
nothing here is persisted.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from .common import Timestamp


class JobStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        """True for COMPLETED and FAILED."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

    @property
    def rank(self) -> int:
        """Position in the lifecycle; statuses may only move forward."""
        return _RANKS[self]


_RANKS = {
    JobStatus.PENDING: 0,
    JobStatus.PROCESSING: 1,
    JobStatus.COMPLETED: 2,
    JobStatus.FAILED: 2,
}


class IngestionJob(BaseModel):
    """Progress and outcome of a single ingestion job.

    `errors` holds at most the first N diagnostics (N = the configured error
    log cap) plus, for a failed job, one trailing ``"Fatal error: ..."`` entry.
    `error_count` always reflects the true number of rejected lines/rows.
    """

    job_id: str
    status: JobStatus = Field(default=JobStatus.PENDING)
    source: str | None = Field(default=None, description="What is being ingested")
    processed_count: int = Field(default=0, ge=0)
    error_count: int = Field(default=0, ge=0)
    total_lines: int = Field(default=0, ge=0)
    errors: list[str] = Field(default_factory=list)
    created_at: Timestamp
    start_time: Timestamp | None = Field(default=None)
    end_time: Timestamp | None = Field(default=None)


__all__ = ["IngestionJob", "JobStatus"]
