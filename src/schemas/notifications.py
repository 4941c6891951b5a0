"""Pydantic models for notification jobs and the status wire payload."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class TargetKind(str, Enum):
    """External webhook consumer a notification job is addressed to."""

    STASH = "stash"
    GITHUB = "github"


class NotificationJob(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_kind: TargetKind
    commit_id: int


class StatusPayload(BaseModel):
    """Body POSTed to a webhook target.

    The ``state`` vocabulary is fixed by the Stash build-status API.
    """

    key: str
    name: str
    url: str
    state: Literal["INPROGRESS", "SUCCESSFUL"]
    description: str
