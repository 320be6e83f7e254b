"""Application shell tests: health, middleware and error rendering."""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.utils.tokens import create_access_token
from tests.fakes import FakeSupabase


def test_health_endpoint(client: TestClient) -> None:
    """Health endpoint should return status and version."""
    response = client.get("/health")
    assert response.status_code == 200

    payload = response.json()
    assert payload["status"] == "ok"
    assert isinstance(payload["version"], str)
    assert float(response.headers["X-Process-Time-Ms"]) >= 0


def test_validation_errors_name_the_field(api: TestClient, fake_db: FakeSupabase) -> None:
    """Schema failures come back as INVALID_INPUT with the offending field."""
    admin = fake_db.add_user("Admin", role="Admin")
    response = api.post(
        "/v1/tracks",
        json={"title": "No distance"},
        headers={"Authorization": f"Bearer {create_access_token(admin['id'])}"},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "INVALID_INPUT"
    assert body["field"] == "description"


def test_unknown_route_is_404(client: TestClient) -> None:
    assert client.get("/v1/nowhere").status_code == 404
