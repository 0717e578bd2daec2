"""ORM model for blog posts."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.models.base import Base

# Ids outside a signed 64-bit integer can never be stored.
MAX_POST_ID = 2**63 - 1


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Post(Base):
    """
    A published blog post.

    id and created_at never change after insert; edits touch title, body and updated_at.
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
