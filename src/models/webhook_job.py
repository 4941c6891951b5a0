"""Execution record for notification jobs run by the background queue."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from src.database import Base


class WebhookJob(Base):
    __tablename__ = "webhook_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    target_kind = Column(String, nullable=False)
    commit_id = Column(Integer, nullable=False, index=True)
    status = Column(String, nullable=False)
    attempts = Column(Integer, default=0, nullable=False)
    error = Column(Text, nullable=True)
    finished_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
