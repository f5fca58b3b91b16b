"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-bytes")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import Generator  # noqa: E402
from datetime import UTC, datetime  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from learnhub import models  # noqa: E402
from learnhub.database import Base, get_db  # noqa: E402
from learnhub.infrastructure.identity.token_service import create_access_token  # noqa: E402
from learnhub.main import app  # noqa: E402

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

# One connection shared by every session, so the in-memory database survives
test_engine = create_engine(
    TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
)

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_USER_ID = 1
OTHER_USER_ID = 2


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, Any, None]:
    """Create a test client with database session."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer headers for the test user."""
    return {"Authorization": f"Bearer {create_access_token(TEST_USER_ID)}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    """Bearer headers for a second user."""
    return {"Authorization": f"Bearer {create_access_token(OTHER_USER_ID)}"}


def create_test_course(
    db_session: Session,
    title: str = "Test Course",
    badges: list[str] | None = None,
    progress: int = 0,
    rating: float = 0.0,
) -> models.Course:
    """Helper function to create a test course."""
    course = models.Course(
        title=title,
        author="Test Author",
        description="A test course",
        category="Leadership",
        badges=badges or [],
        progress=progress,
        rating=rating,
        date_added=datetime.now(UTC),
    )
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course


def create_test_conversation(
    db_session: Session,
    user_id: int = TEST_USER_ID,
    title: str = "Test Conversation",
    meta: dict[str, Any] | None = None,
) -> models.Conversation:
    """Helper function to create a test conversation."""
    conversation = models.Conversation(user_id=user_id, title=title, meta=meta or {})
    db_session.add(conversation)
    db_session.commit()
    db_session.refresh(conversation)
    return conversation


def create_test_note(
    db_session: Session, user_id: int = TEST_USER_ID, title: str = "Test Note"
) -> models.Note:
    """Helper function to create a test note."""
    note = models.Note(user_id=user_id, title=title, content="Some content")
    db_session.add(note)
    db_session.commit()
    db_session.refresh(note)
    return note


def create_test_context_item(
    db_session: Session,
    collection_id: str | None,
    type: str = "PROFILE",
    title: str = "My Profile",
    user_id: int = TEST_USER_ID,
) -> models.ContextItem:
    """Helper function to create a personal-context entry."""
    item = models.ContextItem(
        user_id=user_id, collection_id=collection_id, type=type, title=title, content={}
    )
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


def create_test_collection(
    db_session: Session, label: str = "Reading List", user_id: int = TEST_USER_ID
) -> models.UserCollection:
    """Helper function to create a custom collection."""
    collection = models.UserCollection(
        user_id=user_id, label=label, color="#3B82F6", is_system_defined=False
    )
    db_session.add(collection)
    db_session.commit()
    db_session.refresh(collection)
    return collection


@pytest.fixture
def test_course(db_session: Session) -> models.Course:
    """Create a test course."""
    return create_test_course(db_session)


@pytest.fixture
def test_collection(db_session: Session) -> models.UserCollection:
    """Create a custom collection for the test user."""
    return create_test_collection(db_session)
