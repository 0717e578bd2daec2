"""GET /health: liveness for the process plus a summary of the post store."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.posts import PostRepository

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Always 200 while the process is up; a dead database shows in the body, not the status."""
    if not check_db_connected(db):
        return HealthResponse(environment=settings.APP_ENV, database="disconnected")

    repo = PostRepository(db)
    try:
        newest = repo.newest()
        count = repo.count()
    except SQLAlchemyError:
        logger.warning("Health check could not read posts", exc_info=True)
        return HealthResponse(environment=settings.APP_ENV, database="disconnected")
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected",
        posts=count,
        last_published_at=newest.created_at if newest is not None else None,
    )
