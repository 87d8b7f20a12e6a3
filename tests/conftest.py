"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import (
    TEST_DATABASE_URL,
    TEST_PLATFORM_API_KEY,
    TEST_PLATFORM_BASE_URL,
    TEST_PLATFORM_IDS,
    TEST_SECRET_KEY,
)

# Force the test DB when pytest runs; don't inherit from .env
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)
os.environ.setdefault("PLATFORM_API_BASE_URL", TEST_PLATFORM_BASE_URL)
os.environ.setdefault("PLATFORM_API_KEY", TEST_PLATFORM_API_KEY)
os.environ.update(TEST_PLATFORM_IDS)

from tests.fakes import (  # noqa: E402
    FakeContactStore,
    FakeIdentityStore,
    InMemoryApplicationStore,
    RecordingNotifier,
)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from ccs_membership.main import app

    return TestClient(app)


@pytest.fixture(autouse=True)
def _clear_platform_cache() -> None:
    """Drop cached platform clients before and after each test."""
    from ccs_membership.platform.factory import clear_platform_cache

    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def db() -> Session:
    """SQLite session with a fresh schema per test."""
    from ccs_membership.db.session import Base, engine
    from ccs_membership.models import MembershipApplication  # noqa: F401

    Base.metadata.create_all(engine)
    session = Session(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def settings():
    from ccs_membership.config import get_settings

    return get_settings()


@pytest.fixture
def identity_store() -> FakeIdentityStore:
    return FakeIdentityStore()


@pytest.fixture
def contact_store() -> FakeContactStore:
    return FakeContactStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def applications() -> InMemoryApplicationStore:
    return InMemoryApplicationStore()
