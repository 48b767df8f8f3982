"""Timer-driven progress simulator for mock generation jobs.

Each job gets its own asyncio task that walks the progress steps, plus an
optional failure task decided by a coin flip at start time. Both timelines
race for the job's terminal state; the first one to reach it wins and
cancels the other. Every write re-checks the job's status first, so a
timeline that wakes up after the job is already terminal changes nothing
even if its cancellation arrived too late.
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set

from app.jobs.models import JobRecord, JobStatus, new_id
from app.jobs.store import JobStore

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_STEPS = (10, 25, 50, 75, 90, 100)


def _advance_to(value: int):
    def apply(job: JobRecord) -> None:
        if job.is_terminal:
            return
        job.progress = max(job.progress, value)
    return apply


def _complete(job: JobRecord) -> None:
    if job.is_terminal:
        return
    job.status = JobStatus.COMPLETED
    job.progress = 100
    job.result_id = new_id("result")
    job.completed_at = datetime.utcnow()


def _fail(job: JobRecord) -> None:
    if job.is_terminal:
        return
    job.status = JobStatus.FAILED
    job.progress = 0
    job.completed_at = datetime.utcnow()


class ProgressSimulator:
    """Advances jobs in a JobStore through a scripted progress sequence."""

    def __init__(
        self,
        store: JobStore,
        progress_steps: Sequence[int] = DEFAULT_PROGRESS_STEPS,
        interval_seconds: float = 2.0,
        failure_probability: float = 0.05,
        failure_delay_seconds: float = 3.0,
        rng: Optional[random.Random] = None,
    ):
        steps = list(progress_steps)
        if any(not 0 <= s <= 100 for s in steps):
            raise ValueError(f"Progress steps must lie in [0, 100], got {steps}")
        if steps != sorted(steps):
            raise ValueError(f"Progress steps must be non-decreasing, got {steps}")
        if not 0.0 <= failure_probability <= 1.0:
            raise ValueError(f"failure_probability must be in [0, 1], got {failure_probability}")

        self._store = store
        self._steps: List[int] = steps
        self._interval = interval_seconds
        self._failure_probability = failure_probability
        self._failure_delay = failure_delay_seconds
        self._rng = rng or random.Random()
        self._tasks: Dict[str, Set[asyncio.Task]] = {}

    @classmethod
    def from_settings(cls, store: JobStore, settings, rng: Optional[random.Random] = None) -> "ProgressSimulator":
        return cls(
            store,
            progress_steps=settings.progress_steps,
            interval_seconds=settings.progress_interval_ms / 1000,
            failure_probability=settings.failure_probability,
            failure_delay_seconds=settings.failure_delay_ms / 1000,
            rng=rng,
        )

    @property
    def in_flight(self) -> int:
        """Number of jobs that still have a running timer."""
        return len(self._tasks)

    def should_fail(self) -> bool:
        """Roll the failure die once for a new job."""
        return self._rng.random() < self._failure_probability

    def start(self, job_id: str) -> None:
        """Begin simulating a job. Must be called from inside the event loop.

        Returns immediately; all progress happens in background tasks.
        """
        self._track(job_id, asyncio.create_task(self._run_progress(job_id)))
        if self.should_fail():
            logger.debug("Job %s scheduled to fail after %.1fs", job_id, self._failure_delay)
            self._track(job_id, asyncio.create_task(self._run_failure(job_id)))

    async def stop(self) -> None:
        """Cancel every running timer (shutdown)."""
        tasks = [t for group in self._tasks.values() for t in group]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def _run_progress(self, job_id: str) -> None:
        step = 0
        while True:
            await asyncio.sleep(self._interval)

            if step >= len(self._steps):
                job = self._store.mutate(job_id, _complete)
                if job is not None and job.status == JobStatus.COMPLETED:
                    logger.info("Job %s completed (result %s)", job_id, job.result_id)
                self._cancel_siblings(job_id)
                return

            job = self._store.mutate(job_id, _advance_to(self._steps[step]))
            step += 1
            if job is None or job.is_terminal:
                return

    async def _run_failure(self, job_id: str) -> None:
        await asyncio.sleep(self._failure_delay)
        job = self._store.mutate(job_id, _fail)
        if job is not None and job.status == JobStatus.FAILED:
            logger.info("Job %s failed (simulated)", job_id)
            self._cancel_siblings(job_id)

    def _track(self, job_id: str, task: asyncio.Task) -> None:
        self._tasks.setdefault(job_id, set()).add(task)
        task.add_done_callback(lambda t: self._untrack(job_id, t))

    def _untrack(self, job_id: str, task: asyncio.Task) -> None:
        group = self._tasks.get(job_id)
        if group is None:
            return
        group.discard(task)
        if not group:
            del self._tasks[job_id]

    def _cancel_siblings(self, job_id: str) -> None:
        current = asyncio.current_task()
        for task in list(self._tasks.get(job_id, ())):
            if task is not current:
                task.cancel()
