"""Tests for the build-status payload mapping."""

from types import SimpleNamespace

import pytest

from src.config import settings
from src.templates.status_templates import build_status_payload, status_for, webhook_target_url
from src.urls import project_commit_url


def _commit(ready: bool = False, loading: bool = False) -> SimpleNamespace:
    return SimpleNamespace(
        id=7,
        revision="a82cf69f11618883e534189dea61f234da914462",
        revision_prefix="a82cf6",
        ready=ready,
        loading=loading,
        project=SimpleNamespace(slug="mobile-app"),
    )


@pytest.mark.parametrize(
    ("loading", "ready", "state", "description"),
    [
        (True, False, "INPROGRESS", "Currently loading"),
        (True, True, "INPROGRESS", "Currently loading"),
        (False, False, "INPROGRESS", "Currently translating"),
        (False, True, "SUCCESSFUL", "Translations completed"),
    ],
)
def test_status_for(loading, ready, state, description):
    assert status_for(loading, ready) == (state, description)


def test_payload_fields(monkeypatch):
    monkeypatch.setattr(settings, "status_key_prefix", "SHUTTLE")
    payload = build_status_payload(_commit(ready=True), "http://shuttle.test/c/1")

    assert payload.model_dump() == {
        "key": "SHUTTLE-mobile-app",
        "name": "SHUTTLE-mobile-app-a82cf6",
        "url": "http://shuttle.test/c/1",
        "state": "SUCCESSFUL",
        "description": "Translations completed",
    }


def test_target_url_appends_revision():
    commit = _commit()
    assert webhook_target_url("http://stash.test/rest/build-status/1.0/commits/", commit) == (
        "http://stash.test/rest/build-status/1.0/commits/a82cf69f11618883e534189dea61f234da914462"
    )


def test_project_commit_url_uses_configured_defaults(monkeypatch):
    commit = _commit()
    monkeypatch.setattr(settings, "default_url_protocol", "https")
    monkeypatch.setattr(settings, "default_url_host", "shuttle.example.com")
    monkeypatch.setattr(settings, "default_url_port", None)
    assert project_commit_url(commit.project, commit) == (
        "https://shuttle.example.com/projects/mobile-app/commits/"
        "a82cf69f11618883e534189dea61f234da914462"
    )

    monkeypatch.setattr(settings, "default_url_port", 3000)
    assert project_commit_url(commit.project, commit).startswith(
        "https://shuttle.example.com:3000/projects/"
    )
