"""Test environment: required settings and a fresh in-memory schema per test."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from app.core.database import engine
from app.models import Base


@pytest.fixture(autouse=True)
def fresh_schema():
    """Create all tables before each test and drop them afterwards."""
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)
