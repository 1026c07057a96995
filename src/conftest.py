"""Pytest configuration and shared fixtures."""

import os
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from auth import AuthenticatedUser, get_firebase_auth, get_or_create_user
from database import Base, get_db
from main import app
from models import UserDB


def get_test_db_url():
    """Get the test database URL from environment or use in-memory SQLite."""
    return os.environ.get("TEST_DATABASE_URL", "sqlite://")


def _create_postgres_engine(db_url):
    # Parse the database URL to create/drop the test database
    base_url, db_name = db_url.rsplit("/", 1)
    admin_engine = create_engine(f"{base_url}/postgres", isolation_level="AUTOCOMMIT")

    # Drop and recreate the test database for a clean state
    with admin_engine.connect() as conn:
        conn.execute(text(f"DROP DATABASE IF EXISTS {db_name}"))
        conn.execute(text(f"CREATE DATABASE {db_name}"))
    admin_engine.dispose()

    return create_engine(db_url, echo=False)


def _drop_postgres_database(db_url):
    base_url, db_name = db_url.rsplit("/", 1)
    admin_engine = create_engine(f"{base_url}/postgres", isolation_level="AUTOCOMMIT")
    with admin_engine.connect() as conn:
        conn.execute(text(f"DROP DATABASE IF EXISTS {db_name}"))
    admin_engine.dispose()


@pytest.fixture(scope="session")
def test_engine():
    """Create a test database engine that persists for the entire test session.

    PostgreSQL URLs get a freshly created database; anything else (the
    default is in-memory SQLite) is used as-is.
    """
    db_url = get_test_db_url()
    is_postgres = db_url.startswith("postgresql")

    if is_postgres:
        engine = _create_postgres_engine(db_url)
    else:
        # One shared connection so every session sees the same in-memory DB,
        # including the request threads used by TestClient
        engine = create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if is_postgres:
        _drop_postgres_database(db_url)


@pytest.fixture
def db_session(test_engine):
    """Create a new database session for each test.

    This fixture creates a transaction for each test and rolls it back
    after the test completes, ensuring test isolation.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    # Create a session bound to the connection
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=connection
    )
    session = TestingSessionLocal()

    yield session

    # Rollback the transaction and close the connection
    session.close()
    transaction.rollback()
    connection.close()


# Authentication fixtures


@pytest.fixture
def mock_firebase_auth():
    """Mock Firebase auth module injected into token verification."""
    mock_auth = MagicMock()
    app.dependency_overrides[get_firebase_auth] = lambda: mock_auth
    yield mock_auth
    app.dependency_overrides.pop(get_firebase_auth, None)


@pytest.fixture
def test_user(db_session: Session) -> UserDB:
    """Create a test user in the database."""
    user = UserDB(firebase_uid="test_firebase_uid_123", email="test@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session: Session) -> UserDB:
    """A second user whose data must stay invisible to test_user."""
    user = UserDB(firebase_uid="other_firebase_uid_456", email="other@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_authenticated_user(test_user: UserDB) -> AuthenticatedUser:
    """Create a test authenticated user context."""
    return AuthenticatedUser(
        firebase_uid=test_user.firebase_uid,
        user_id=test_user.id,
        email=test_user.email,
    )


@pytest.fixture
def client(db_session, test_authenticated_user):
    """Create test client with database and auth overrides."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    def override_auth():
        return test_authenticated_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_or_create_user] = override_auth

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
