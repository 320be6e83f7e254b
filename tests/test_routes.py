"""HTTP surface tests with the store swapped for the in-memory fake."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.utils.identity import VerifiedIdentity
from app.utils.tokens import create_access_token, create_guest_token
from tests.fakes import FakeSupabase


def _auth(user: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user['id'])}"}


class StubVerifier:
    def verify(self, id_token: str) -> VerifiedIdentity:
        return VerifiedIdentity(uid=f"fb-{id_token}", phone="+971504444444")


@pytest.fixture
def verifier_override() -> Iterator[None]:
    from app.dependencies import get_identity_verifier
    from app.main import app

    app.dependency_overrides[get_identity_verifier] = StubVerifier
    yield
    app.dependency_overrides.pop(get_identity_verifier, None)


def test_missing_token_is_unauthorized(api: TestClient) -> None:
    response = api.get("/v1/communities")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_join_toggle_over_http(api: TestClient, fake_db: FakeSupabase) -> None:
    user = fake_db.add_user("Rider")
    community = fake_db.add_community()

    first = api.post(f"/v1/communities/{community['id']}/join", headers=_auth(user))
    second = api.post(f"/v1/communities/{community['id']}/join", headers=_auth(user))

    assert first.status_code == 200
    assert first.json()["membership"]["action"] == "joined"
    assert second.json()["membership"]["status"] == "inactive"
    is_member = api.get(f"/v1/communities/{community['id']}/is-member", headers=_auth(user))
    assert is_member.json() == {"is_member": False}


def test_guest_cannot_join(api: TestClient, fake_db: FakeSupabase) -> None:
    community = fake_db.add_community()
    token, _ = create_guest_token()

    response = api.post(
        f"/v1/communities/{community['id']}/join",
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 403
    assert fake_db.rows("community_memberships") == []


def test_banned_join_is_forbidden(api: TestClient, fake_db: FakeSupabase) -> None:
    admin = fake_db.add_user("Admin", role="Admin")
    user = fake_db.add_user("Rider")
    community = fake_db.add_community()

    ban = api.post(
        f"/v1/communities/{community['id']}/members/{user['id']}/ban",
        json={"banned": True},
        headers=_auth(admin),
    )
    join = api.post(f"/v1/communities/{community['id']}/join", headers=_auth(user))

    assert ban.status_code == 200
    assert join.status_code == 403
    assert join.json()["code"] == "FORBIDDEN"


def test_member_cannot_ban(api: TestClient, fake_db: FakeSupabase) -> None:
    user = fake_db.add_user("Rider")
    community = fake_db.add_community()

    response = api.get(f"/v1/communities/{community['id']}/banned-members", headers=_auth(user))

    assert response.status_code == 403


def test_members_listing_pages(api: TestClient, fake_db: FakeSupabase) -> None:
    viewer = fake_db.add_user("Viewer")
    community = fake_db.add_community()
    for i in range(12):
        rider = fake_db.add_user(f"Rider {i}")
        api.post(f"/v1/communities/{community['id']}/join", headers=_auth(rider))

    response = api.get(
        f"/v1/communities/{community['id']}/members",
        params={"page": 2, "limit": 5},
        headers=_auth(viewer),
    )

    body = response.json()
    assert response.status_code == 200
    assert len(body["members"]) == 5
    assert body["total_members"] == 12
    assert body["pages"] == 3


def test_invalid_page_is_422(api: TestClient, fake_db: FakeSupabase) -> None:
    viewer = fake_db.add_user()
    community = fake_db.add_community()

    response = api.get(
        f"/v1/communities/{community['id']}/members",
        params={"page": 0},
        headers=_auth(viewer),
    )

    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_INPUT"


def test_admin_creates_community(api: TestClient, fake_db: FakeSupabase) -> None:
    admin = fake_db.add_user("Admin", role="Admin")
    member = fake_db.add_user("Member")
    payload = {
        "title": "Marina Cruisers",
        "description": "Evening rides",
        "type": "Club",
        "category": ["road"],
        "location": "Dubai",
    }

    denied = api.post("/v1/communities", json=payload, headers=_auth(member))
    created = api.post("/v1/communities", json=payload, headers=_auth(admin))

    assert denied.status_code == 403
    assert created.status_code == 201
    community = created.json()["community"]
    assert community["members"] == []
    assert community["member_count"] == 0

    listed = api.get("/v1/communities", params={"search": "marina"}, headers=_auth(member))
    assert listed.json()["pagination"]["total"] == 1


def test_event_results_leaderboard(api: TestClient, fake_db: FakeSupabase) -> None:
    viewer = fake_db.add_user("Viewer")
    event = fake_db.add_event()
    fake_db.add_result(event["id"], fake_db.add_user("Slow")["id"], time="01:00")
    fake_db.add_result(event["id"], fake_db.add_user("Fast")["id"], time="00:45")

    response = api.get(f"/v1/events/{event['id']}/results", headers=_auth(viewer))

    body = response.json()
    assert response.status_code == 200
    assert body["scope"] == "event"
    assert [(e["user"]["full_name"], e["rank"]) for e in body["entries"]] == [
        ("Fast", 1),
        ("Slow", 2),
    ]


def test_leaderboard_rejects_malformed_id(api: TestClient, fake_db: FakeSupabase) -> None:
    viewer = fake_db.add_user()
    response = api.get("/v1/tracks/not-a-uuid/results", headers=_auth(viewer))
    assert response.status_code == 422


def test_event_participation_over_http(api: TestClient, fake_db: FakeSupabase) -> None:
    user = fake_db.add_user()
    event = fake_db.add_event()
    base = f"/v1/events/{event['id']}"

    joined = api.post(f"{base}/join", headers=_auth(user))
    no_reason = api.post(f"{base}/cancel", json={}, headers=_auth(user))
    result = api.post(
        f"{base}/result",
        json={"distance": 30, "time": "01:05"},
        headers=_auth(user),
    )
    cancel_after = api.post(f"{base}/cancel", json={"reason": "late"}, headers=_auth(user))

    assert joined.json()["created"] is True
    assert no_reason.status_code == 422
    assert result.json()["participation"]["status"] == "completed"
    assert cancel_after.status_code == 409


def test_vendor_manages_rides(api: TestClient, fake_db: FakeSupabase) -> None:
    vendor = fake_db.add_user("Vendor", role="Vendor")
    payload = {
        "title": "Saturday Spin",
        "description": "Easy pace",
        "date": "2026-11-07",
        "time": "06:00",
        "address": "Kite Beach",
    }

    created = api.post("/v1/community-rides", json=payload, headers=_auth(vendor))

    assert created.status_code == 201
    assert created.json()["ride"]["date"] == "2026-11-07"
    assert created.json()["ride"]["max_participants"] == 0


def test_verify_and_register_flow(
    api: TestClient,
    fake_db: FakeSupabase,
    verifier_override: None,
) -> None:
    verified = api.post("/v1/auth/verify", json={"id_token": "abc"})
    body = verified.json()
    assert body["is_new_user"] is True
    assert "refresh_token" not in body

    registered = api.post(
        "/v1/auth/register",
        json={"full_name": "Layla", "age": 27, "gender": "Female"},
        headers={"Authorization": f"Bearer {body['access_token']}"},
    )
    assert registered.status_code == 201
    session = registered.json()
    assert session["user"]["phone"] == "+971504444444"

    me = api.get(
        "/v1/auth/me",
        headers={"Authorization": f"Bearer {session['access_token']}"},
    )
    assert me.json()["full_name"] == "Layla"

    again = api.post("/v1/auth/verify", json={"id_token": "abc"})
    assert again.json()["is_new_user"] is False


def test_registration_token_cannot_call_member_routes(
    api: TestClient,
    fake_db: FakeSupabase,
) -> None:
    community = fake_db.add_community()
    token = create_access_token(None, phone="+971505555555", firebase_uid="fb-x")

    response = api.post(
        f"/v1/communities/{community['id']}/join",
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 401


def test_guest_login(api: TestClient) -> None:
    response = api.post("/v1/auth/guest-login")
    assert response.status_code == 200
    assert response.json()["is_guest"] is True
