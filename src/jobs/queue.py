"""Job queues that carry notification jobs from the mutation path to workers.

``enqueue`` is cheap and synchronous so it can run inside the commit
mutation path. An identical job that is still waiting to start is not
enqueued a second time.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Awaitable, Callable, Protocol

from src.database import async_session
from src.models.webhook_job import WebhookJob
from src.schemas.notifications import NotificationJob, TargetKind

logger = logging.getLogger(__name__)

JobRunner = Callable[[NotificationJob], Awaitable[int]]


class JobQueue(Protocol):
    def enqueue(self, kind: TargetKind, commit_id: int) -> bool:
        """Queue a job; return False if an identical job is already pending."""
        ...


class InMemoryJobQueue:
    """Collects jobs without running them."""

    def __init__(self) -> None:
        self.jobs: deque[NotificationJob] = deque()

    def enqueue(self, kind: TargetKind, commit_id: int) -> bool:
        job = NotificationJob(target_kind=kind, commit_id=commit_id)
        if job in self.jobs:
            logger.debug("Job %s already pending, skipping", job)
            return False
        self.jobs.append(job)
        return True

    def clear(self) -> None:
        self.jobs.clear()

    async def run_pending(self, runner: JobRunner) -> list[int]:
        """Run queued jobs in FIFO order; the first failure propagates."""
        results = []
        while self.jobs:
            job = self.jobs.popleft()
            results.append(await runner(job))
        return results


class BackgroundJobQueue:
    """Runs each job as its own asyncio task and records the outcome."""

    def __init__(self, runner: JobRunner) -> None:
        self._runner = runner
        self._pending: set[NotificationJob] = set()
        self._tasks: set[asyncio.Task] = set()

    def enqueue(self, kind: TargetKind, commit_id: int) -> bool:
        job = NotificationJob(target_kind=kind, commit_id=commit_id)
        if job in self._pending:
            logger.debug("Job %s already pending, skipping", job)
            return False
        self._pending.add(job)
        task = asyncio.get_running_loop().create_task(self._run(job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("Enqueued %s ping for commit %d", kind.value, commit_id)
        return True

    async def _run(self, job: NotificationJob) -> None:
        self._pending.discard(job)
        try:
            sent = await self._runner(job)
        except Exception as exc:
            logger.exception(
                "%s ping for commit %d failed", job.target_kind.value, job.commit_id
            )
            await self._record(job, "failed", getattr(exc, "attempts", 0), str(exc)[:500])
            return
        await self._record(job, "succeeded", sent, None)

    async def _record(
        self, job: NotificationJob, status: str, attempts: int, error: str | None
    ) -> None:
        try:
            async with async_session() as db:
                db.add(
                    WebhookJob(
                        target_kind=job.target_kind.value,
                        commit_id=job.commit_id,
                        status=status,
                        attempts=attempts,
                        error=error,
                    )
                )
                await db.commit()
        except Exception:
            logger.exception(
                "Could not record %s outcome of %s ping for commit %d (%d attempts, error=%s)",
                status,
                job.target_kind.value,
                job.commit_id,
                attempts,
                error,
            )

    async def join(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
