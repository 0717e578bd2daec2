"""Session gate for admin routes (require_session) and the token signer dependency."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import AuthError
from app.core.security import SessionTokenSigner
from app.schemas.auth import CurrentUser
from app.services.auth import UserRepository, is_session_revoked

logger = logging.getLogger(__name__)


def get_token_signer(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionTokenSigner:
    """Dependency: signer built from the explicit settings object."""
    return SessionTokenSigner.from_settings(settings)


def _reject(reason: str) -> HTTPException:
    logger.info("Admin request rejected", extra={"reason": reason})
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
    )


def require_session(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    signer: Annotated[SessionTokenSigner, Depends(get_token_signer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """
    Dependency: require a valid session cookie and return the current user.

    Raises 401 before the route body runs if the cookie is missing, the token does
    not verify, it was revoked by logout, or its user no longer exists. Reads only.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise _reject("missing_cookie")
    try:
        claims = signer.decode(token)
    except AuthError as e:
        raise _reject("invalid_token") from e
    if is_session_revoked(db, claims.jti):
        raise _reject("revoked_token")
    user = UserRepository(db).find_by_id(claims.user_id)
    if user is None:
        raise _reject("unknown_user")
    return CurrentUser.model_validate(user)
