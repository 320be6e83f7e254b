"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
    os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
    os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
    os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
    os.environ.setdefault("ENABLE_SCHEDULER", "false")


# Settings are read at import time, so the environment must exist before any
# test module imports from ``app``.
_set_default_env()

from app.services.common import invalidate_user_cache  # noqa: E402
from tests.fakes import FakeSupabase  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_user_cache() -> Iterator[None]:
    invalidate_user_cache()
    yield
    invalidate_user_cache()


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Fresh in-memory store."""
    return FakeSupabase()


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def api(client: TestClient, fake_db: FakeSupabase) -> Iterator[TestClient]:
    """Test client whose routes talk to ``fake_db``."""
    from app.dependencies import get_db_client
    from app.main import app

    app.dependency_overrides[get_db_client] = lambda: fake_db
    yield client
    app.dependency_overrides.clear()
