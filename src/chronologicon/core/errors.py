"""Exception types raised across Chronologicon.

Only failures that cross a component boundary get a class here. Row-level
validation problems are *not* exceptions: the line parser reports them as
diagnostic strings so ingestion can keep going, and "not found" answers from
the analytics layer are structured negative results.
"""

from __future__ import annotations


class ChronologiconError(Exception):
    """Base class for all project-specific errors."""


class StorageError(ChronologiconError):
    """The event store rejected a read or write."""


class SourceReadError(ChronologiconError):
    """The ingestion source could not be opened or read; fatal to a job."""


class JobStateError(ChronologiconError):
    """An ingestion job was asked to make an illegal status transition."""


__all__ = ["ChronologiconError", "JobStateError", "SourceReadError", "StorageError"]
