"""Canonical web URLs for projects and commits."""

from __future__ import annotations

from src.config import settings


def _base_url() -> str:
    protocol = settings.default_url_protocol or "http"
    netloc = settings.default_url_host
    if settings.default_url_port:
        netloc = f"{netloc}:{settings.default_url_port}"
    return f"{protocol}://{netloc}"


def project_commit_url(project, commit) -> str:
    return f"{_base_url()}/projects/{project.slug}/commits/{commit.revision}"
