"""
Fixtures for API tests: a TestClient bound to the per-test database.
"""
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from dashboard.core.database import get_session
from dashboard.main import app

API = "/api/v1"
PASSWORD = "Secret123"


@pytest.fixture
def client(session):
    def _get_session_override():
        yield session

    app.dependency_overrides[get_session] = _get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client: TestClient, email: str, name: str = "Dashboard User") -> Dict[str, str]:
    """Create an account and return its Authorization header."""
    response = client.post(
        f"{API}/auth/register",
        json={"email": email, "password": PASSWORD, "name": name},
    )
    assert response.status_code == 201, response.text
    response = client.post(f"{API}/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client) -> Dict[str, str]:
    return register_and_login(client, "owner@example.com", name="Owner")
