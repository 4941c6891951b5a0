"""Entry point the job queue invokes to run one notification job."""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.webhook_client import WebhookClient
from src.config import settings
from src.database import async_session
from src.handlers.webhook_notifier import WebhookNotifier, require_repository
from src.models.commit import Commit
from src.schemas.notifications import NotificationJob, TargetKind

logger = logging.getLogger(__name__)


def _target_config(kind: TargetKind, project) -> tuple[str | None, int]:
    if kind is TargetKind.STASH:
        return project.stash_webhook_url, settings.stash_repeat_count
    return project.github_webhook_url, settings.github_repeat_count


async def perform(
    db: AsyncSession,
    kind: TargetKind,
    commit_id: int,
    client: WebhookClient | None = None,
    **notifier_options,
) -> int:
    """Ping ``kind``'s webhook for ``commit_id``; return the number of pings sent.

    The project configuration is read at execution time: a target URL cleared
    since enqueue skips the job, a repository URL cleared since enqueue fails it.
    """
    result = await db.execute(select(Commit).where(Commit.id == commit_id))
    commit = result.scalar_one_or_none()
    if commit is None:
        raise LookupError(f"Commit {commit_id} not found")

    require_repository(commit)

    url, repeat_count = _target_config(kind, commit.project)
    if not url:
        logger.info(
            "No %s webhook configured for project %s; skipping commit %d",
            kind.value,
            commit.project.slug,
            commit_id,
        )
        return 0

    owns_client = client is None
    if client is None:
        client = WebhookClient()
    try:
        notifier = WebhookNotifier(db, client, target=kind.value, **notifier_options)
        return await notifier.notify(
            url, commit, repeat_count, settings.webhook_retry_delay_seconds
        )
    finally:
        if owns_client:
            with suppress(Exception):
                await client.close()


async def run_job(job: NotificationJob) -> int:
    """Run ``job`` in its own session; used as the background queue's runner."""
    async with async_session() as db:
        return await perform(db, job.target_kind, job.commit_id)
