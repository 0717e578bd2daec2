"""Error types raised by the auth and post services and mapped to responses by the routes."""

from enum import Enum


class BlogError(Exception):
    """Base class for expected application failures; carries a user-safe message."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class AuthErrorKind(str, Enum):
    INVALID_OR_MISSING = "invalid_or_missing"
    BAD_CREDENTIALS = "bad_credentials"


class AuthError(BlogError):
    """Authentication failed: bad/absent session token, or bad login credentials."""

    def __init__(self, kind: AuthErrorKind, message: str, cause: Exception | None = None) -> None:
        self.kind = kind
        super().__init__(message, cause=cause)

    @classmethod
    def invalid_or_missing(cls, cause: Exception | None = None) -> "AuthError":
        return cls(AuthErrorKind.INVALID_OR_MISSING, "Unauthorized", cause=cause)

    @classmethod
    def bad_credentials(cls) -> "AuthError":
        # Same message for unknown user and wrong password (no username enumeration).
        return cls(AuthErrorKind.BAD_CREDENTIALS, "Invalid credentials.")


class ConflictErrorKind(str, Enum):
    DUPLICATE_USERNAME = "duplicate_username"


class ConflictError(BlogError):
    """A unique constraint was violated."""

    def __init__(self, kind: ConflictErrorKind, message: str, cause: Exception | None = None) -> None:
        self.kind = kind
        super().__init__(message, cause=cause)

    @classmethod
    def duplicate_username(cls, cause: Exception | None = None) -> "ConflictError":
        return cls(ConflictErrorKind.DUPLICATE_USERNAME, "User already in use.", cause=cause)


class InternalError(BlogError):
    """Persistence or hashing fault; logged in full, shown to the user as a generic message."""

    def __init__(self, message: str = "Internal server error.", cause: Exception | None = None) -> None:
        super().__init__(message, cause=cause)


class PasswordHashError(InternalError):
    """bcrypt could not hash or check a password (e.g. a corrupt stored hash)."""


class PostNotFoundError(BlogError):
    def __init__(self, post_id: int) -> None:
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found.")
