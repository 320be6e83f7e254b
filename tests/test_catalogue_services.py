"""Community, event, track and ride catalogue tests."""

from __future__ import annotations

import pytest

from app.services.community_service import CommunityService
from app.services.event_service import EventService
from app.services.membership_service import MembershipService
from app.services.ride_service import RideService
from app.services.track_service import TrackService
from app.utils.errors import ConflictError, InvalidInputError, NotFoundError
from tests.fakes import FakeSupabase


def test_community_create_starts_empty(fake_db: FakeSupabase) -> None:
    admin = fake_db.add_user("Admin", role="Admin")
    service = CommunityService(fake_db)

    community = service.create(
        admin["id"],
        {"title": "Hatta Climbers", "description": "Hills", "type": "Club", "category": ["mtb"]},
    )

    assert community["members"] == []
    assert community["member_count"] == 0
    assert community["created_by"] == admin["id"]


def test_community_listing_filters(fake_db: FakeSupabase) -> None:
    fake_db.add_community(title="Dubai Road", location="Dubai", category=["road"])
    fake_db.add_community(title="Dubai Trails", location="Dubai", category=["mtb"])
    fake_db.add_community(title="Sharjah Road", location="Sharjah", category=["road"])
    service = CommunityService(fake_db)

    by_location = service.list({"location": "Dubai"})
    by_category = service.list({}, category="road")
    by_search = service.list({}, search="trails")

    assert by_location["pagination"]["total"] == 2
    assert {c["title"] for c in by_category["communities"]} == {"Dubai Road", "Sharjah Road"}
    assert [c["title"] for c in by_search["communities"]] == ["Dubai Trails"]


def test_community_get_resolves_members(fake_db: FakeSupabase) -> None:
    creator = fake_db.add_user("Creator", role="Admin")
    rider = fake_db.add_user("Rider")
    community = fake_db.add_community(created_by=creator["id"])
    MembershipService(fake_db).join_community(rider["id"], community["id"])

    detail = CommunityService(fake_db).get(community["id"])

    assert detail["created_by"]["full_name"] == "Creator"
    assert [m["full_name"] for m in detail["members"]] == ["Rider"]
    assert detail["member_count"] == 1


def test_community_update_ignores_membership_fields(fake_db: FakeSupabase) -> None:
    community = fake_db.add_community()
    service = CommunityService(fake_db)

    updated = service.update(
        community["id"],
        {"title": "Renamed", "members": ["intruder"], "member_count": 99},
    )

    assert updated["title"] == "Renamed"
    assert updated["member_count"] == 0
    with pytest.raises(InvalidInputError):
        service.update(community["id"], {})


def test_gallery_add_and_remove(fake_db: FakeSupabase) -> None:
    community = fake_db.add_community()
    service = CommunityService(fake_db)

    service.add_gallery_images(community["id"], ["a.jpg", "b.jpg"])
    gallery = service.add_gallery_images(community["id"], ["b.jpg", "c.jpg"])
    assert gallery == ["a.jpg", "b.jpg", "c.jpg"]

    assert service.remove_gallery_images(community["id"], ["a.jpg", "zzz.jpg"]) == [
        "b.jpg",
        "c.jpg",
    ]


def test_missing_community_delete(fake_db: FakeSupabase) -> None:
    with pytest.raises(NotFoundError):
        CommunityService(fake_db).delete("00000000-0000-0000-0000-000000000000")


def test_event_listing_orders_by_date(fake_db: FakeSupabase) -> None:
    track = fake_db.insert_row("tracks", {"title": "Meydan"})
    fake_db.add_event(title="Later", event_date="2026-12-01T06:00:00+00:00")
    fake_db.add_event(title="Sooner", event_date="2026-11-01T06:00:00+00:00", track_id=track["id"])
    service = EventService(fake_db)

    listing = service.list({})
    on_track = service.list({"track_id": track["id"]})

    assert [e["title"] for e in listing["events"]] == ["Sooner", "Later"]
    assert on_track["events"][0]["track"]["title"] == "Meydan"
    assert on_track["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}


def test_duplicate_participation_maps_to_conflict(fake_db: FakeSupabase) -> None:
    event = fake_db.add_event()
    user = fake_db.add_user()
    fake_db.add_result(event["id"], user["id"])

    with pytest.raises(ConflictError) as exc_info:
        EventService(fake_db).db.insert_one(
            "event_results",
            {"event_id": event["id"], "user_id": user["id"], "status": "joined"},
        )
    assert exc_info.value.code == "DUPLICATE"


def test_archived_tracks_hidden_by_default(fake_db: FakeSupabase) -> None:
    admin = fake_db.add_user(role="Admin")
    service = TrackService(fake_db)
    kept = service.create(admin["id"], {"title": "Kept", "status": "open", "is_archived": False})
    gone = service.create(admin["id"], {"title": "Gone", "status": "open", "is_archived": False})

    service.archive(gone["id"])

    assert [t["title"] for t in service.list({})["tracks"]] == ["Kept"]
    assert service.list({}, include_archived=True)["pagination"]["total"] == 2
    assert service.get(kept["id"])["title"] == "Kept"


def test_track_listing_reports_page_count(fake_db: FakeSupabase) -> None:
    admin = fake_db.add_user(role="Admin")
    service = TrackService(fake_db)
    for title in ("Loop", "Climb", "Coast"):
        service.create(admin["id"], {"title": title, "status": "open", "is_archived": False})

    listing = service.list({}, page=1, limit=2)

    assert len(listing["tracks"]) == 2
    assert listing["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}


def test_rides_filtered_by_status(fake_db: FakeSupabase) -> None:
    vendor = fake_db.add_user(role="Vendor")
    service = RideService(fake_db)
    service.create(vendor["id"], {"title": "Open", "date": "2026-11-07", "status": "active"})
    service.create(vendor["id"], {"title": "Closed", "date": "2026-11-01", "status": "left"})

    listing = service.list(status="active")

    assert [ride["title"] for ride in listing["rides"]] == ["Open"]
    assert listing["rides"][0]["created_by"]["id"] == vendor["id"]
