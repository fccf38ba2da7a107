"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src import models  # noqa: F401
from src.config import Settings
from src.database import Base, get_db
from src.main import create_app

TEST_USER = {"name": "Test User", "email": "test@example.com", "password": "testpass123"}


# Use test database - MySQL when DATABASE_URL is set, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/ecotracker", "/ecotracker_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def settings():
    """Settings for the app under test: no artificial delays, test database."""
    return Settings(
        database_url=SQLALCHEMY_DATABASE_URL,
        register_delay_seconds=0,
        login_delay_seconds=0,
        environment="test",
    )


@pytest.fixture
def app(settings):
    """A fresh application built around the test settings."""
    return create_app(settings)


@pytest.fixture(scope="function")
def client(app, db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user_data():
    """Credentials of the default test user."""
    return dict(TEST_USER)


@pytest.fixture
def registered_user(client, user_data):
    """Register the default test user and return its public fields."""
    response = client.post("/api/register", json=user_data)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def logged_in_client(client, registered_user, user_data):
    """Client holding a session cookie for the default test user."""
    response = client.post(
        "/api/login", json={"email": user_data["email"], "password": user_data["password"]}
    )
    assert response.status_code == 200
    return client
