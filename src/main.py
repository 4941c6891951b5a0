"""FastAPI application for commit-status-webhooks."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.config import settings
from src.database import close_db, init_db
from src.handlers.webhook_jobs import run_job
from src.jobs.queue import BackgroundJobQueue
from src.routes.commits import router as commits_router

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("commit-status-webhooks starting up")
    await init_db()
    app.state.job_queue = BackgroundJobQueue(run_job)
    yield
    logger.info("commit-status-webhooks shutting down")
    await app.state.job_queue.join()
    await close_db()


app = FastAPI(
    title="Commit Status Webhooks",
    description="Reports translation status of tracked commits to Stash and GitHub webhooks",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(commits_router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "commit-status-webhooks"}
