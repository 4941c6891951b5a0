"""Routes for projects, commits and webhook job records."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.handlers import commits as commit_handlers
from src.handlers.commits import ConflictError, NotFoundError
from src.jobs.queue import JobQueue
from src.models.webhook_job import WebhookJob
from src.observers.commit_observer import NotificationDispatcher
from src.schemas.commits import (
    CommitCreate,
    CommitResponse,
    CommitUpdate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    WebhookJobResponse,
)

router = APIRouter(tags=["commits"])


def get_job_queue(request: Request) -> JobQueue:
    return request.app.state.job_queue


def get_dispatcher(queue: JobQueue = Depends(get_job_queue)) -> NotificationDispatcher:
    return NotificationDispatcher(queue)


@router.post("/projects", response_model=ProjectResponse, status_code=201)
async def create_project(
    data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    try:
        project = await commit_handlers.create_project(db, data)
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ProjectResponse.model_validate(project)


@router.patch("/projects/{slug}", response_model=ProjectResponse)
async def update_project(
    slug: str,
    data: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProjectResponse:
    try:
        project = await commit_handlers.update_project(db, slug, data)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ProjectResponse.model_validate(project)


@router.post("/projects/{slug}/commits", response_model=CommitResponse, status_code=201)
async def create_commit(
    slug: str,
    data: CommitCreate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> CommitResponse:
    """Track a new commit.

    Projects with a Stash webhook get an in-progress ping right away.
    """
    try:
        commit = await commit_handlers.create_commit(db, dispatcher, slug, data)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return CommitResponse.from_model(commit)


@router.get("/commits/{commit_id}", response_model=CommitResponse)
async def get_commit(
    commit_id: int,
    db: AsyncSession = Depends(get_db),
) -> CommitResponse:
    try:
        commit = await commit_handlers.get_commit(db, commit_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return CommitResponse.from_model(commit)


@router.patch("/commits/{commit_id}", response_model=CommitResponse)
async def update_commit(
    commit_id: int,
    data: CommitUpdate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> CommitResponse:
    """Update a commit's flags or message; status changes notify webhook targets."""
    try:
        commit = await commit_handlers.update_commit(db, dispatcher, commit_id, data)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return CommitResponse.from_model(commit)


@router.get("/webhook-jobs", response_model=list[WebhookJobResponse])
async def list_webhook_jobs(
    commit_id: int | None = None,
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> list[WebhookJobResponse]:
    query = select(WebhookJob).order_by(WebhookJob.id.desc()).limit(limit)
    if commit_id is not None:
        query = query.where(WebhookJob.commit_id == commit_id)
    result = await db.execute(query)
    return [WebhookJobResponse.model_validate(row) for row in result.scalars().all()]
