"""
Pytest fixtures shared across the unit and API suites.

Environment variables are set before any dashboard module is imported so
the settings object, logging and the module-level engine pick them up.
"""
import os
import tempfile
import uuid
from typing import Any, Callable, Dict, Optional

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-32-chars")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="dashboard-test-logs-"))
os.environ.setdefault("RATE_LIMITING_ENABLED", "false")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import dashboard.models  # noqa: F401  registers every table
from dashboard.core.encryption import encrypt_document
from dashboard.models.app_config import AppConfig
from dashboard.models.user import User


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def user(session: Session) -> User:
    user = User(
        email=f"user_{uuid.uuid4().hex[:8]}@example.com",
        password="hashed_password",
        name="Dashboard User",
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def store_config(session: Session) -> Callable[..., AppConfig]:
    """Factory that stores an encrypted settings document."""

    def _store(document: Dict[str, Any], user_id: Optional[uuid.UUID] = None) -> AppConfig:
        row = AppConfig(user_id=user_id, config_encrypted=encrypt_document(document))
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    return _store


@pytest.fixture
def music_settings() -> Dict[str, Any]:
    return {
        "lastFmKey": "lastfm-test-key",
        "lastFmUsername": "listener",
        "spotifyId": "spotify-client",
        "spotifySecret": "spotify-secret",
    }
