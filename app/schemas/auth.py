"""Form and identity schemas for the admin area."""

from pydantic import BaseModel, ConfigDict, Field

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class RegisterForm(BaseModel):
    """Credentials submitted on the registration page."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class CurrentUser(BaseModel):
    """Authenticated user (id, username) injected by the session gate."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
