"""Translation project and its webhook target configuration."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    repository_url = Column(String, nullable=True)
    stash_webhook_url = Column(String, nullable=True)
    github_webhook_url = Column(String, nullable=True)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    commits = relationship("Commit", back_populates="project", lazy="raise")
