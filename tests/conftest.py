"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from notemind.config import Settings, get_settings
from notemind.database import Base, get_db
from notemind.models.note import Note  # noqa: F401
from notemind.models.tag import Tag  # noqa: F401
from notemind.models.user import User  # noqa: F401
from notemind.services.auth import AuthService
from notemind.stores import InMemoryCredentialStore, SqlCredentialStore


@pytest.fixture(name="settings")
def settings_fixture(tmp_path) -> Settings:
    """Settings isolated from the developer's environment."""
    return Settings(
        JWT_SECRET_KEY="test-secret-key-not-for-production",
        BCRYPT_ROUNDS=4,
        OPENAI_API_KEY="",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        APP_ENV="test",
    )


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="memory_store")
def memory_store_fixture() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture(name="client")
def client_fixture(db_session: Session, settings: Settings):
    """Create a test client with overridden DB and settings, and disabled rate limiting."""
    from main import app
    from notemind.rate_limit import limiter

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="auth_service")
def auth_service_fixture(db_session: Session, settings: Settings) -> AuthService:
    return AuthService.from_settings(SqlCredentialStore(db_session), settings)


@pytest.fixture(name="test_user")
def test_user_fixture(auth_service: AuthService):
    """Create a test user and return its data with a token."""
    result = auth_service.register("Test User", "test@example.com", "password123")
    return {
        "user_id": result.user.id,
        "email": result.user.email,
        "name": result.user.name,
        "token": result.token,
    }


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(test_user: dict) -> dict:
    return {"Authorization": f"Bearer {test_user['token']}"}


@pytest.fixture(name="other_user")
def other_user_fixture(auth_service: AuthService):
    result = auth_service.register("Other User", "other@example.com", "password123")
    return {"user_id": result.user.id, "token": result.token}
