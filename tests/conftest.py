import asyncio

import pytest
from fastapi.testclient import TestClient

from task_tracker_api.app.core.config import settings
from task_tracker_api.app.core.db import init_db, transaction
from task_tracker_api.app.core.security import create_access_token
from task_tracker_api.app.repositories import user_repository


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point every test at its own freshly migrated SQLite file."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "tracker.db"))
    init_db()
    yield settings.database_url


@pytest.fixture
def run():
    """Drive an async service call to completion."""
    return asyncio.run


@pytest.fixture
def make_user():
    """Create a user the way the identity provider sync does."""

    def _make(email, name=None, image=None):
        with transaction() as conn:
            return user_repository.upsert(conn, email, name=name, image=image)

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", "Alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com", "Bob")


@pytest.fixture
def identity():
    """Build the ``current_user`` mapping services expect for a user row."""

    def _identity(user):
        return {"sub": user["email"], "user_id": user["id"]}

    return _identity


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": user["email"]})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client():
    from task_tracker_api.app.main import app

    with TestClient(app) as test_client:
        yield test_client
