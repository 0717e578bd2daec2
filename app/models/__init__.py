"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.post import Post
from app.models.revoked_token import RevokedToken
from app.models.user import User

__all__ = ["Base", "Post", "RevokedToken", "User"]
