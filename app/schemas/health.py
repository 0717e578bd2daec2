"""Response body of GET /health."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness, database reachability and how much the blog holds."""

    status: Literal["ok"] = "ok"
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"] = Field(
        description="Whether SELECT 1 succeeded against DATABASE_URL",
    )
    posts: int | None = Field(
        default=None,
        description="Number of published posts; null when the database is unreachable",
    )
    last_published_at: datetime | None = Field(
        default=None,
        description="created_at of the newest post; null with no posts or no database",
    )
