"""Decides which webhook targets to notify after a commit is saved.

Stash reflects both progress and regress, so it is pinged on creation and on
any flip of ``ready`` or ``loading``. GitHub is only told when a commit
becomes ready. A target is enabled only when its webhook URL and the
project's repository URL are both configured.
"""

from __future__ import annotations

import logging

from src.jobs.queue import JobQueue
from src.observers.transitions import just_became_ready, loading_changed, ready_changed
from src.schemas.commits import CommitSnapshot
from src.schemas.notifications import NotificationJob, TargetKind

logger = logging.getLogger(__name__)


def _stash_fires(before: CommitSnapshot | None, after: CommitSnapshot) -> bool:
    if before is None:
        return True
    return ready_changed(before, after) or loading_changed(before, after)


def _github_fires(before: CommitSnapshot | None, after: CommitSnapshot) -> bool:
    if before is None:
        return False
    return just_became_ready(before, after)


class NotificationDispatcher:
    def __init__(self, queue: JobQueue) -> None:
        self._queue = queue

    def commit_saved(
        self,
        before: CommitSnapshot | None,
        after: CommitSnapshot,
    ) -> list[NotificationJob]:
        """Enqueue jobs for every enabled target whose trigger matches.

        ``before`` is None when the commit was just created. Queue errors
        propagate to the caller.
        """
        project = after.project
        if not project.repository_url:
            if project.stash_webhook_url or project.github_webhook_url:
                logger.info(
                    "Project %s has no repository_url; not notifying for commit %d",
                    project.slug,
                    after.id,
                )
            return []

        rules = (
            (TargetKind.STASH, project.stash_webhook_url, _stash_fires),
            (TargetKind.GITHUB, project.github_webhook_url, _github_fires),
        )
        enqueued = []
        for kind, url, fires in rules:
            if not url or not fires(before, after):
                continue
            if self._queue.enqueue(kind, after.id):
                enqueued.append(NotificationJob(target_kind=kind, commit_id=after.id))
        return enqueued
