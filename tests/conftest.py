# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from taskdash.dashboard import DashboardRegistry
from taskdash.deps import get_auth_provider, get_registry
from taskdash.main import app
from taskdash.store import TaskStore

from .fakes import FakeAuthProvider, FakeTaskTable

OWNER_A = "owner-a"
OWNER_B = "owner-b"


@pytest.fixture()
def table() -> FakeTaskTable:
    return FakeTaskTable()


@pytest.fixture()
def store(table: FakeTaskTable) -> TaskStore:
    return TaskStore(table, OWNER_A)


@pytest.fixture()
def auth() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture()
def registry(table: FakeTaskTable) -> DashboardRegistry:
    return DashboardRegistry(table)


@pytest.fixture()
def client(auth: FakeAuthProvider, registry: DashboardRegistry):
    """
    TestClient wired to the fakes.

    Used without a `with` block so the lifespan (database + Supabase client)
    never starts.
    """
    app.dependency_overrides[get_auth_provider] = lambda: auth
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def signed_in(client: TestClient, auth: FakeAuthProvider) -> TestClient:
    """Client holding a real session cookie for OWNER_A, obtained through /login"""
    session = auth.add_session(OWNER_A, display_name="Asha")
    auth.accounts[session.email] = ("secret123", session)
    response = client.post(
        "/login",
        data={"email": session.email, "password": "secret123"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client
