"""Job store interface and in-memory implementation."""

import logging
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from app.jobs.models import HeadshotStyle, JobRecord, new_id

logger = logging.getLogger(__name__)

JobMutation = Callable[[JobRecord], None]


class JobStore(ABC):
    """Abstract interface for job storage (in-memory or external)."""

    @abstractmethod
    def create(self, style: HeadshotStyle, file_id: Optional[str] = None) -> str:
        """Insert a new processing job. Returns job_id."""
        ...

    @abstractmethod
    def get(self, job_id: str) -> Optional[JobRecord]:
        """Look up a job. No side effects."""
        ...

    @abstractmethod
    def mutate(self, job_id: str, fn: JobMutation) -> Optional[JobRecord]:
        """Apply ``fn`` to the stored job in place. Returns the job, or None if unknown."""
        ...

    @abstractmethod
    def cleanup_expired(self, ttl: timedelta) -> int:
        """Drop terminal jobs finished longer than ``ttl`` ago. Returns count removed."""
        ...


class InMemoryJobStore(JobStore):
    """Process-local job store. Lifetime is the process lifetime.

    max_jobs: capacity bound. When exceeded, the least-recently-completed
        terminal jobs are evicted; jobs still processing are never dropped,
        so the bound can be overshot while many jobs are in flight.
        None disables the bound.
    """

    def __init__(self, max_jobs: Optional[int] = None):
        self._jobs: Dict[str, JobRecord] = {}
        self._finished: OrderedDict[str, None] = OrderedDict()
        self._max_jobs = max_jobs

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._jobs

    def create(self, style: HeadshotStyle, file_id: Optional[str] = None) -> str:
        job_id = new_id("job")
        while job_id in self._jobs:
            job_id = new_id("job")

        self._jobs[job_id] = JobRecord(id=job_id, style=style, file_id=file_id)
        self._enforce_capacity()
        return job_id

    def get(self, job_id: str) -> Optional[JobRecord]:
        return self._jobs.get(job_id)

    def mutate(self, job_id: str, fn: JobMutation) -> Optional[JobRecord]:
        job = self._jobs.get(job_id)
        if job is None:
            return None
        was_terminal = job.is_terminal
        fn(job)
        if job.is_terminal and not was_terminal:
            if job.completed_at is None:
                job.completed_at = datetime.utcnow()
            self._finished[job_id] = None
        return job

    def cleanup_expired(self, ttl: timedelta) -> int:
        cutoff = datetime.utcnow() - ttl
        removed = 0
        # _finished is ordered by completion time, oldest first
        for job_id in list(self._finished):
            job = self._jobs.get(job_id)
            if job is not None and job.completed_at and job.completed_at > cutoff:
                break
            self._finished.pop(job_id, None)
            self._jobs.pop(job_id, None)
            removed += 1
        return removed

    def _enforce_capacity(self) -> None:
        if self._max_jobs is None:
            return
        while len(self._jobs) > self._max_jobs and self._finished:
            oldest_id, _ = self._finished.popitem(last=False)
            self._jobs.pop(oldest_id, None)
            logger.debug("Evicted job %s (capacity %d)", oldest_id, self._max_jobs)
