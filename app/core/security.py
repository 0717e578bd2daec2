"""Password hashing and session token issuing/verification for the admin area."""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.errors import AuthError, PasswordHashError

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds).
BCRYPT_ROUNDS = 10

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def _password_bytes(plain_password: str) -> bytes:
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    return plain_password.encode("utf-8")[:72]


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    try:
        hashed = bcrypt.hashpw(_password_bytes(plain_password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    except (ValueError, TypeError) as e:
        raise PasswordHashError("Password hashing failed.", cause=e) from e
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash using bcrypt's own comparison.

    Returns False only on a genuine mismatch. A hash bcrypt cannot parse raises
    PasswordHashError so that it is never reported as bad credentials.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        raise PasswordHashError("Stored password hash could not be checked.", cause=e) from e


@dataclass(frozen=True)
class SessionClaims:
    """Decoded, verified contents of a session token."""

    user_id: int
    jti: str
    expires_at: datetime


class SessionTokenSigner:
    """Issue and verify the signed session token held in the admin cookie."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60) -> None:
        if not secret:
            raise ValueError("Session token secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SessionTokenSigner":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        )

    def issue(self, user_id: int, now: datetime | None = None) -> str:
        """Create a token with sub (user id), a random jti, iat and exp."""
        now = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str | None) -> SessionClaims:
        """
        Verify signature and expiry and return the claims.
        Raises AuthError (invalid_or_missing) for absent, malformed, expired or tampered tokens.
        """
        if not token:
            raise AuthError.invalid_or_missing()
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "jti", "exp"]},
            )
        except jwt.PyJWTError as e:
            raise AuthError.invalid_or_missing(cause=e) from e
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise AuthError.invalid_or_missing(cause=e) from e
        jti = payload.get("jti")
        if not isinstance(jti, str) or not jti:
            raise AuthError.invalid_or_missing()
        return SessionClaims(
            user_id=user_id,
            jti=jti,
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )

    def verify(self, token: str | None) -> int:
        """Return the user id carried by a valid token."""
        return self.decode(token).user_id
