"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser, RegisterForm
from app.schemas.health import HealthResponse
from app.schemas.post import PostForm

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "PostForm",
    "RegisterForm",
]
