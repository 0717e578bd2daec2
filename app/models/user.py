"""ORM model for admin accounts."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base


class User(Base):
    """
    Someone allowed into the admin area.

    Registration inserts the row; nothing updates or deletes it. The unique index
    on username is what turns a second registration into a conflict.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    # bcrypt output, salt and cost included.
    password_hash = Column(String(60), nullable=False)
