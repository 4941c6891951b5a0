"""Build-status payloads reported to webhook targets."""

from __future__ import annotations

from src.config import settings
from src.schemas.notifications import StatusPayload

STATE_IN_PROGRESS = "INPROGRESS"
STATE_SUCCESSFUL = "SUCCESSFUL"


def status_for(loading: bool, ready: bool) -> tuple[str, str]:
    """Map a commit's flags to the target's ``(state, description)`` pair.

    Loading dominates readiness: a commit still importing is reported as
    loading even if it is flagged ready.
    """
    if loading:
        return STATE_IN_PROGRESS, "Currently loading"
    if not ready:
        return STATE_IN_PROGRESS, "Currently translating"
    return STATE_SUCCESSFUL, "Translations completed"


def build_status_payload(commit, commit_url: str) -> StatusPayload:
    prefix = settings.status_key_prefix
    slug = commit.project.slug
    state, description = status_for(bool(commit.loading), bool(commit.ready))
    return StatusPayload(
        key=f"{prefix}-{slug}",
        name=f"{prefix}-{slug}-{commit.revision_prefix}",
        url=commit_url,
        state=state,
        description=description,
    )


def webhook_target_url(base_url: str, commit) -> str:
    return f"{base_url.rstrip('/')}/{commit.revision}"
