"""Tracked source-control commit and its translation status flags."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from src.database import Base

REVISION_PREFIX_LENGTH = 6


class Commit(Base):
    __tablename__ = "commits"
    __table_args__ = (UniqueConstraint("project_id", "revision"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    revision = Column(String(40), nullable=False)
    message = Column(Text, nullable=True)
    ready = Column(Boolean, default=False, nullable=False)
    loading = Column(Boolean, default=False, nullable=False)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    project = relationship("Project", back_populates="commits", lazy="selectin")

    @property
    def revision_prefix(self) -> str:
        return self.revision[:REVISION_PREFIX_LENGTH]
