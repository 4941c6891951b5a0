"""Repeated build-status delivery to a single webhook target.

A delivery POSTs the commit's status a fixed number of times with a fixed
delay in between. Targets get redundant pings rather than an acknowledged
retry: every 2xx response continues the loop, and the first non-2xx response
(or transport error) aborts the whole delivery.

The commit is reloaded before every attempt, so a status change that lands
while the delivery is in progress is reported by the later attempts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.clients.webhook_client import WebhookClient
from src.models.commit import Commit
from src.templates.status_templates import build_status_payload, webhook_target_url
from src.urls import project_commit_url

logger = logging.getLogger(__name__)


class MissingRepositoryError(RuntimeError):
    """The commit's project is not linked to a source repository."""

    def __init__(self, commit_id: int, project_slug: str) -> None:
        self.commit_id = commit_id
        self.project_slug = project_slug
        super().__init__(
            f"Project {project_slug!r} is not linked to a repository "
            f"(commit {commit_id})"
        )


class WebhookDeliveryError(RuntimeError):
    """A webhook target rejected or never answered a status ping."""

    def __init__(
        self,
        commit_id: int,
        revision: str,
        status_code: int | None,
        target: str = "webhook",
        attempts: int = 0,
    ) -> None:
        self.commit_id = commit_id
        self.revision = revision
        self.status_code = status_code
        self.target = target
        # POSTs issued before giving up, the failing one included.
        self.attempts = attempts
        code = status_code if status_code is not None else "no response"
        super().__init__(
            f"[WebhookNotifier] Failed to ping {target} for commit {commit_id}, "
            f"revision: {revision}, code: {code}"
        )


def require_repository(commit) -> None:
    if not commit.project.repository_url:
        raise MissingRepositoryError(commit.id, commit.project.slug)


class WebhookNotifier:
    def __init__(
        self,
        db: AsyncSession,
        client: WebhookClient,
        url_for: Callable = project_commit_url,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        target: str = "webhook",
    ) -> None:
        self._db = db
        self._client = client
        self._url_for = url_for
        self._sleep = sleep
        self._target = target

    async def _reload(self, commit_id: int) -> Commit:
        result = await self._db.execute(
            select(Commit)
            .options(selectinload(Commit.project))
            .where(Commit.id == commit_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def notify(
        self,
        target_url_base: str,
        commit: Commit,
        repeat_count: int,
        retry_delay: float,
    ) -> int:
        """Ping ``target_url_base`` ``repeat_count`` times; return the number sent."""
        require_repository(commit)

        commit_id = commit.id
        sent = 0
        for attempt in range(1, repeat_count + 1):
            commit = await self._reload(commit_id)
            require_repository(commit)

            url = webhook_target_url(target_url_base, commit)
            payload = build_status_payload(commit, self._url_for(commit.project, commit))
            logger.info(
                "Pinging %s for commit %d (%s), attempt %d/%d: %s",
                self._target,
                commit_id,
                commit.revision,
                attempt,
                repeat_count,
                payload.state,
            )
            try:
                resp = await self._client.post(url, payload.model_dump())
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.error("Transport error pinging %s at %s: %s", self._target, url, exc)
                raise WebhookDeliveryError(
                    commit_id, commit.revision, None, self._target, attempts=attempt
                ) from exc

            if not resp.is_success:
                logger.error(
                    "%s rejected ping for commit %d with HTTP %d",
                    self._target,
                    commit_id,
                    resp.status_code,
                )
                raise WebhookDeliveryError(
                    commit_id, commit.revision, resp.status_code, self._target, attempts=attempt
                )
            sent += 1

            if attempt < repeat_count:
                await self._sleep(retry_delay)

        return sent
