"""Project and commit mutations, with webhook dispatch on every commit save.

Dispatch runs after the transaction commits so a job never observes
uncommitted state. Queue failures propagate to the caller.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.commit import Commit
from src.models.project import Project
from src.observers.commit_observer import NotificationDispatcher
from src.schemas.commits import (
    CommitCreate,
    CommitSnapshot,
    CommitUpdate,
    ProjectCreate,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    pass


class ConflictError(ValueError):
    pass


async def get_project(db: AsyncSession, slug: str) -> Project:
    result = await db.execute(select(Project).where(Project.slug == slug))
    project = result.scalar_one_or_none()
    if project is None:
        raise NotFoundError(f"Project {slug!r} not found")
    return project


async def get_commit(db: AsyncSession, commit_id: int) -> Commit:
    result = await db.execute(select(Commit).where(Commit.id == commit_id))
    commit = result.scalar_one_or_none()
    if commit is None:
        raise NotFoundError(f"Commit {commit_id} not found")
    return commit


async def create_project(db: AsyncSession, data: ProjectCreate) -> Project:
    project = Project(**data.model_dump())
    db.add(project)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError(f"Project {data.slug!r} already exists") from exc
    logger.info("Project %s created", project.slug)
    return project


async def update_project(db: AsyncSession, slug: str, data: ProjectUpdate) -> Project:
    project = await get_project(db, slug)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(project, field, value or None)
    await db.commit()
    logger.info("Project %s updated", project.slug)
    return project


async def create_commit(
    db: AsyncSession,
    dispatcher: NotificationDispatcher,
    slug: str,
    data: CommitCreate,
) -> Commit:
    project = await get_project(db, slug)
    commit = Commit(project=project, **data.model_dump())
    db.add(commit)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError(
            f"Commit {data.revision} already exists in project {slug!r}"
        ) from exc
    logger.info("Commit %d (%s) created in %s", commit.id, commit.revision, slug)

    dispatcher.commit_saved(None, CommitSnapshot.from_model(commit))
    return commit


async def update_commit(
    db: AsyncSession,
    dispatcher: NotificationDispatcher,
    commit_id: int,
    data: CommitUpdate,
) -> Commit:
    commit = await get_commit(db, commit_id)
    before = CommitSnapshot.from_model(commit)

    changes = data.model_dump(exclude_unset=True)
    for field in ("ready", "loading"):
        if changes.get(field) is None:
            changes.pop(field, None)
    for field, value in changes.items():
        setattr(commit, field, value)
    await db.commit()

    after = CommitSnapshot.from_model(commit)
    jobs = dispatcher.commit_saved(before, after)
    logger.info(
        "Commit %d updated (ready=%s, loading=%s); %d notification job(s) enqueued",
        commit.id,
        commit.ready,
        commit.loading,
        len(jobs),
    )
    return commit
