"""Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database with the full schema, so
nothing needs a running PostgreSQL server.
"""

import os

# Must be set before groupware modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from groupware.api.deps import get_db
from groupware.api.main import app
from groupware.core.security import create_access_token
from groupware.db.base import Base
from groupware.db import models  # noqa: F401

from tests import factories


@pytest.fixture
def engine():
    """Fresh in-memory database with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Database session bound to the per-test engine."""
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def role_factory(db_session):
    def _create(**kwargs):
        return factories.create_role(db_session, **kwargs)
    return _create


@pytest.fixture
def user_factory(db_session):
    def _create(**kwargs):
        return factories.create_user(db_session, **kwargs)
    return _create


@pytest.fixture
def template_factory(db_session):
    def _create(**kwargs):
        return factories.create_template(db_session, **kwargs)
    return _create


@pytest.fixture
def approval_factory(db_session):
    def _create(**kwargs):
        return factories.create_approval(db_session, **kwargs)
    return _create


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def client(db_session):
    """TestClient whose requests share the test's database session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(db_session):
    """Build bearer headers for a user. Commits pending test data."""
    def _headers(user):
        token = create_access_token(user.id, db_session)
        return {"Authorization": f"Bearer {token}"}
    return _headers
