"""
Shared pytest fixtures for Budget-Mate tests.

Each test gets its own SQLite database file, created through the
application lifespan exactly as the MySQL schema is in production.
"""

import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from components.core.database import DatabaseManager
from restapi.router import create_app

_emails = itertools.count(1)


@pytest.fixture
def app(tmp_path):
    """Application bound to a throwaway SQLite database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    return create_app(db_manager=DatabaseManager(engine=engine))


@pytest.fixture
def client(app):
    """Test client; entering it runs startup, which creates the tables."""
    with TestClient(app) as test_client:
        yield test_client


def signup(client, name="Test User", email=None, password="secret123"):
    """Register a user and return the response payload."""
    email = email or f"user{next(_emails)}@example.com"
    response = client.post(
        "/api/auth/signup",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def auth_headers(client):
    """Bearer headers for a freshly registered user."""
    data = signup(client)
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def other_headers(client):
    """Bearer headers for a second, unrelated user."""
    data = signup(client, name="Other User")
    return {"Authorization": f"Bearer {data['token']}"}
