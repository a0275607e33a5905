"""Ingestion job registry and background execution."""

from __future__ import annotations

from .background import get_executor, run_ingestion_task, submit_ingestion
from .job_store import InMemoryJobStore, JobRegistry, get_job_store

__all__ = [
    "InMemoryJobStore",
    "JobRegistry",
    "get_executor",
    "get_job_store",
    "run_ingestion_task",
    "submit_ingestion",
]
