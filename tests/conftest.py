# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from typing import Generator

from main import create_app
from core.clerk_verifier import reset_verifier
from dependencies.auth import CurrentUser, get_current_user


# Every module that talks to Supabase imports its own get_supabase_client
SUPABASE_MODULES = [
    "services.users",
    "services.payments",
    "services.maintenance",
    "services.properties",
    "services.units",
    "services.leases",
    "services.notifications",
]

QUERY_METHODS = (
    "select", "eq", "neq", "in_", "order", "limit", "range",
    "insert", "update", "upsert", "delete",
)


def make_query(data=None, count=None) -> Mock:
    """A PostgREST query builder mock: every builder call returns itself."""
    query = Mock()
    for method in QUERY_METHODS:
        getattr(query, method).return_value = query
    query.execute.return_value = Mock(data=data if data is not None else [], count=count)
    return query


class FakeSupabase:
    """
    One Mock client shared by every service module.
    stub() a table to control what execute() returns for it.
    """

    def __init__(self):
        self.tables = {}
        self.client = Mock()
        self.client.table.side_effect = self._table

    def _table(self, name):
        return self.tables.setdefault(name, make_query())

    def stub(self, name, data=None, count=None) -> Mock:
        query = make_query(data, count)
        self.tables[name] = query
        return query

    def sequence(self, name, *results) -> Mock:
        """Successive execute() results for one table (lists of rows)."""
        query = make_query()
        query.execute.side_effect = [Mock(data=rows, count=None) for rows in results]
        self.tables[name] = query
        return query

    def fail(self, name, error: Exception) -> Mock:
        query = make_query()
        query.execute.side_effect = error
        self.tables[name] = query
        return query

    def touched(self) -> bool:
        return self.client.table.called


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def supabase(monkeypatch) -> FakeSupabase:
    fake = FakeSupabase()
    for module in SUPABASE_MODULES:
        monkeypatch.setattr(f"{module}.get_supabase_client", lambda: fake.client)
    return fake


@pytest.fixture
def admin_user():
    return CurrentUser(
        id="admin-1",
        clerk_id="admin-1",
        role="admin",
        email="landlord@example.com",
        full_name="Lani Landlord",
    )


@pytest.fixture
def tenant_user():
    return CurrentUser(
        id="tenant-1",
        clerk_id="tenant-1",
        role="tenant",
        email="tenant@example.com",
        full_name="Tomas Tenant",
    )


@pytest.fixture
def other_tenant():
    return CurrentUser(
        id="tenant-2",
        clerk_id="tenant-2",
        role="tenant",
        email="other@example.com",
        full_name="Olu Other",
    )


@pytest.fixture
def login(app):
    """login(user) makes every request in the test authenticate as `user`."""

    def _login(user: CurrentUser):
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    yield _login
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def fresh_verifier():
    """Drop the process-wide Clerk verifier between tests."""
    reset_verifier()
    yield
    reset_verifier()
