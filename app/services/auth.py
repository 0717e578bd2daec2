"""Admin accounts: registration, credential checks and session revocation."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AuthError, ConflictError, InternalError
from app.core.security import SessionClaims, hash_password, verify_password
from app.models import RevokedToken, User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def create(self, username: str, password_hash: str) -> User:
        """
        Insert a user. The unique index on username decides duplicates, so two
        concurrent registrations of the same name cannot both succeed.
        """
        user = User(username=username, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError.duplicate_username(cause=e) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalError("User insert failed.", cause=e) from e
        self.db.refresh(user)
        return user


def register_user(db: Session, username: str, password: str) -> User:
    """Hash the password and store a new user. Raises ConflictError on a taken username."""
    password_hash = hash_password(password)
    user = UserRepository(db).create(username, password_hash)
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Return the user whose credentials match.

    Unknown username and wrong password both raise AuthError (bad_credentials) but
    are logged separately. Hashing faults propagate as PasswordHashError.
    """
    user = UserRepository(db).find_by_username(username)
    if user is None:
        logger.info("Login rejected", extra={"reason": "unknown_user"})
        raise AuthError.bad_credentials()
    if not verify_password(password, user.password_hash):
        logger.info("Login rejected", extra={"reason": "password_mismatch", "user_id": user.id})
        raise AuthError.bad_credentials()
    logger.info("Login succeeded", extra={"user_id": user.id})
    return user


def revoke_session(db: Session, claims: SessionClaims) -> None:
    """Denylist a token's jti until its natural expiry. Revoking twice is a no-op."""
    if db.get(RevokedToken, claims.jti) is not None:
        return
    db.add(RevokedToken(jti=claims.jti, expires_at=claims.expires_at))
    try:
        db.commit()
    except IntegrityError:
        # Concurrent logout with the same token already stored the row.
        db.rollback()


def is_session_revoked(db: Session, jti: str) -> bool:
    return db.get(RevokedToken, jti) is not None


def _expired_revocations(db: Session, cutoff: datetime):
    return db.query(RevokedToken).filter(RevokedToken.expires_at < cutoff)


def count_expired_revocations(db: Session, now: datetime | None = None) -> int:
    """Denylist rows a purge at `now` would delete."""
    return _expired_revocations(db, now or datetime.now(UTC)).count()


def purge_expired_revocations(db: Session, now: datetime | None = None) -> int:
    """
    Delete denylist rows whose token has expired anyway.

    Returns the number of rows deleted. Idempotent: safe to run repeatedly.
    """
    cutoff = now or datetime.now(UTC)
    deleted_count = _expired_revocations(db, cutoff).delete(synchronize_session=False)
    db.commit()
    if deleted_count > 0:
        logger.info(
            "Revocation purge: cutoff=%s, rows_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
