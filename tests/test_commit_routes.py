"""End-to-end tests for the commit API and the webhook jobs it enqueues."""

from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from src.config import settings
from src.database import async_session
from src.handlers.webhook_jobs import perform
from src.handlers.webhook_notifier import MissingRepositoryError
from src.jobs.queue import InMemoryJobQueue
from src.main import app
from src.routes.commits import get_job_queue
from src.schemas.notifications import TargetKind

REPO = "git@git.example.com:mobile/app.git"
REVISION = "a82cf69f11618883e534189dea61f234da914462"


@pytest.fixture
def queue():
    queue = InMemoryJobQueue()
    app.dependency_overrides[get_job_queue] = lambda: queue
    yield queue
    app.dependency_overrides.pop(get_job_queue, None)


@pytest.fixture
async def client(queue):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _create_project(client, **fields) -> dict:
    body = {"slug": "mobile-app", "repository_url": REPO}
    body.update(fields)
    resp = await client.post("/api/v1/projects", json=body)
    assert resp.status_code == 201
    return resp.json()


async def _create_commit(client, **fields) -> dict:
    body = {"revision": REVISION, "ready": False, "loading": False}
    body.update(fields)
    resp = await client.post("/api/v1/projects/mobile-app/commits", json=body)
    assert resp.status_code == 201
    return resp.json()


def _kinds(queue) -> list[TargetKind]:
    return [job.target_kind for job in queue.jobs]


async def test_github_only_fires_when_commit_becomes_ready(client, queue):
    await _create_project(client, github_webhook_url="http://example.com")

    commit = await _create_commit(client)
    assert _kinds(queue) == []

    resp = await client.patch(f"/api/v1/commits/{commit['id']}", json={"ready": True})
    assert resp.status_code == 200
    assert resp.json()["ready"] is True
    assert _kinds(queue) == [TargetKind.GITHUB]
    queue.clear()

    await client.patch(f"/api/v1/commits/{commit['id']}", json={"ready": False})
    assert _kinds(queue) == []


async def test_stash_fires_on_create_but_not_on_unrelated_update(client, queue):
    await _create_project(client, stash_webhook_url="http://example.com")

    commit = await _create_commit(client)
    assert _kinds(queue) == [TargetKind.STASH]
    queue.clear()

    resp = await client.patch(f"/api/v1/commits/{commit['id']}", json={"message": "some message"})
    assert resp.json()["message"] == "some message"
    assert _kinds(queue) == []


async def test_no_jobs_without_webhook_urls(client, queue):
    await _create_project(client)
    commit = await _create_commit(client)
    await client.patch(f"/api/v1/commits/{commit['id']}", json={"loading": True})
    await client.patch(f"/api/v1/commits/{commit['id']}", json={"loading": False, "ready": True})

    assert _kinds(queue) == []


async def test_no_jobs_without_repository_url(client, queue):
    await _create_project(client, repository_url=None, stash_webhook_url="http://example.com")
    commit = await _create_commit(client)
    await client.patch(f"/api/v1/commits/{commit['id']}", json={"ready": True})

    assert _kinds(queue) == []


async def test_queued_job_fails_after_repository_url_is_cleared(client, queue):
    await _create_project(client, stash_webhook_url="http://example.com")
    await _create_commit(client)
    assert _kinds(queue) == [TargetKind.STASH]

    resp = await client.patch("/api/v1/projects/mobile-app", json={"repository_url": None})
    assert resp.json()["repository_url"] is None

    http = AsyncMock()

    async def _runner(job):
        async with async_session() as db:
            return await perform(db, job.target_kind, job.commit_id, client=http)

    with pytest.raises(MissingRepositoryError):
        await queue.run_pending(_runner)
    assert http.post.await_count == 0


async def test_stash_pings_follow_commit_progress(client, queue, monkeypatch):
    monkeypatch.setattr(settings, "stash_repeat_count", 2)
    await _create_project(client, stash_webhook_url="http://stash.example.com")
    http = AsyncMock()
    http.post.return_value = httpx.Response(204)

    async def _runner(job):
        async with async_session() as db:
            return await perform(
                db, job.target_kind, job.commit_id, client=http, sleep=AsyncMock()
            )

    commit = await _create_commit(client, loading=True)
    await queue.run_pending(_runner)
    await client.patch(f"/api/v1/commits/{commit['id']}", json={"loading": False})
    await queue.run_pending(_runner)
    await client.patch(f"/api/v1/commits/{commit['id']}", json={"ready": True})
    await queue.run_pending(_runner)

    descriptions = [call.args[1]["description"] for call in http.post.await_args_list]
    assert descriptions == [
        "Currently loading",
        "Currently loading",
        "Currently translating",
        "Currently translating",
        "Translations completed",
        "Translations completed",
    ]
    assert {call.args[0] for call in http.post.await_args_list} == {
        f"http://stash.example.com/{REVISION}"
    }


async def test_unknown_project_and_duplicate_revision(client, queue):
    resp = await client.post("/api/v1/projects/nope/commits", json={"revision": REVISION})
    assert resp.status_code == 404

    await _create_project(client)
    await _create_commit(client)
    resp = await client.post("/api/v1/projects/mobile-app/commits", json={"revision": REVISION})
    assert resp.status_code == 409


async def test_get_commit(client, queue):
    await _create_project(client)
    commit = await _create_commit(client)

    resp = await client.get(f"/api/v1/commits/{commit['id']}")
    assert resp.status_code == 200
    assert resp.json()["revision_prefix"] == "a82cf6"
    assert resp.json()["project_slug"] == "mobile-app"

    resp = await client.get("/api/v1/commits/999")
    assert resp.status_code == 404


async def test_webhook_jobs_listing_starts_empty(client, queue):
    resp = await client.get("/api/v1/webhook-jobs")
    assert resp.status_code == 200
    assert resp.json() == []


async def test_health_endpoint(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_webhook_jobs_listing_rejects_out_of_range_limit(client, queue):
    assert (await client.get("/api/v1/webhook-jobs", params={"limit": -1})).status_code == 422
    assert (await client.get("/api/v1/webhook-jobs", params={"limit": 0})).status_code == 422
    assert (await client.get("/api/v1/webhook-jobs", params={"limit": 501})).status_code == 422
    assert (await client.get("/api/v1/webhook-jobs", params={"limit": 500})).status_code == 200
