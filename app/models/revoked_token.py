"""Session tokens revoked before their expiry (logout)."""

from sqlalchemy import Column, DateTime, String

from app.models.base import Base


class RevokedToken(Base):
    """
    A logged-out session token identified by its jti claim.

    Rows are created on logout and purged once expires_at has passed.
    """

    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
