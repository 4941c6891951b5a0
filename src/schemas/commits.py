"""Pydantic models for projects, commits and their mutation snapshots."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    slug: str
    repository_url: Optional[str] = None
    stash_webhook_url: Optional[str] = None
    github_webhook_url: Optional[str] = None


class CommitSnapshot(BaseModel):
    """Immutable view of a commit taken before or after a mutation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    revision: str
    ready: bool = False
    loading: bool = False
    project: ProjectSnapshot

    @classmethod
    def from_model(cls, commit) -> CommitSnapshot:
        return cls.model_validate(commit)


class ProjectCreate(BaseModel):
    slug: str = Field(min_length=1, pattern=r"^[A-Za-z0-9_\-]+$")
    repository_url: Optional[str] = None
    stash_webhook_url: Optional[str] = None
    github_webhook_url: Optional[str] = None


class ProjectUpdate(BaseModel):
    repository_url: Optional[str] = None
    stash_webhook_url: Optional[str] = None
    github_webhook_url: Optional[str] = None


class ProjectResponse(ProjectSnapshot):
    id: int
    created_at: datetime


class CommitCreate(BaseModel):
    revision: str = Field(min_length=1, max_length=40)
    message: Optional[str] = None
    ready: bool = False
    loading: bool = False


class CommitUpdate(BaseModel):
    message: Optional[str] = None
    ready: Optional[bool] = None
    loading: Optional[bool] = None


class CommitResponse(BaseModel):
    id: int
    revision: str
    revision_prefix: str
    message: Optional[str] = None
    ready: bool
    loading: bool
    project_slug: str
    created_at: datetime

    @classmethod
    def from_model(cls, commit) -> CommitResponse:
        return cls(
            id=commit.id,
            revision=commit.revision,
            revision_prefix=commit.revision_prefix,
            message=commit.message,
            ready=commit.ready,
            loading=commit.loading,
            project_slug=commit.project.slug,
            created_at=commit.created_at,
        )


class WebhookJobResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    target_kind: str
    commit_id: int
    status: str
    attempts: int
    error: Optional[str] = None
    finished_at: datetime
