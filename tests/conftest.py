"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SUPABASE_SIGNING_KEY_JWK", "test-signing-key-jwk")

CALLER_ID = UUID("550e8400-e29b-41d4-a716-446655440000")


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from teamspace.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture
def caller() -> Any:
    """The authenticated user making requests in tests."""
    from teamspace.schemas.auth import UserContext

    return UserContext(
        user_id=CALLER_ID,
        email="owner@acme.com",
        role="authenticated",
        user_metadata={},
        access_token="test-access-token",
    )


@pytest.fixture
def tables() -> dict[str, MagicMock]:
    """One mock per Supabase table, so each query chain can be set up independently."""
    return {
        "user_settings": MagicMock(),
        "company_users": MagicMock(),
        "categories": MagicMock(),
        "tasks": MagicMock(),
    }


@pytest.fixture
def mock_supabase(tables: dict[str, MagicMock]) -> MagicMock:
    """Mock Supabase client whose table() returns the matching entry of `tables`."""
    client = MagicMock()
    client.table.side_effect = lambda name: tables[name]
    return client


@pytest.fixture
def active_member(tables: dict[str, MagicMock]) -> dict[str, MagicMock]:
    """Make the caller an active plain member of Acme.

    Returns:
        dict: The table mocks, for further setup.
    """
    settings_row = MagicMock(data={"company_name": "Acme"})
    membership_row = MagicMock(data={"role": "user", "company_name": "Acme", "status": "active"})
    tables["user_settings"].select.return_value.eq.return_value.single.return_value.execute.return_value = settings_row
    tables["company_users"].select.return_value.eq.return_value.eq.return_value.maybe_single.return_value.execute.return_value = (
        membership_row
    )
    return tables


@pytest.fixture
def mock_supabase_client(mock_supabase: MagicMock) -> Generator[MagicMock, None, None]:
    """Patch every place the application obtains its Supabase client.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    targets = [
        "teamspace.core.supabase.get_supabase_client",
        "teamspace.services.settings_service.get_supabase_client",
        "teamspace.services.company_user_service.get_supabase_client",
        "teamspace.services.company_user_service.create_user_client",
    ]
    patchers = [patch(target, return_value=mock_supabase) for target in targets]
    for patcher in patchers:
        patcher.start()
    yield mock_supabase
    for patcher in reversed(patchers):
        patcher.stop()


@pytest.fixture
def client(mock_supabase_client: MagicMock) -> Generator[TestClient, None, None]:
    """Provide an unauthenticated test client for the FastAPI application.

    Yields:
        TestClient: FastAPI test client.
    """
    from teamspace.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(mock_supabase_client: MagicMock, caller: Any) -> Generator[TestClient, None, None]:
    """Provide a test client whose requests are authenticated as `caller`.

    Yields:
        TestClient: FastAPI test client.
    """
    from teamspace.api.deps import get_current_user
    from teamspace.main import app

    app.dependency_overrides[get_current_user] = lambda: caller
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_current_user, None)
