"""Leaderboard ranking tests."""

from __future__ import annotations

import pytest

from app.config import settings
from app.services.ranking_service import (
    UNTIMED_SECONDS,
    RankingService,
    assign_competition_ranks,
    time_to_seconds,
)
from app.utils.errors import InvalidInputError
from tests.fakes import FakeSupabase


@pytest.fixture
def service(fake_db: FakeSupabase) -> RankingService:
    return RankingService(fake_db)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("01:00", 3600),
        ("00:45", 2700),
        ("01:02:03", 3723),
        (" 2:30 ", 9000),
        ("", UNTIMED_SECONDS),
        (None, UNTIMED_SECONDS),
        ("fast", UNTIMED_SECONDS),
    ],
)
def test_time_to_seconds(value: str | None, expected: int) -> None:
    assert time_to_seconds(value) == expected


def test_time_to_seconds_can_ignore_seconds() -> None:
    assert time_to_seconds("01:02:03", include_seconds=False) == 3720


def test_competition_ranks_share_and_skip() -> None:
    rows = [{"name": n, "elapsed_seconds": s} for n, s in [("a", 5), ("b", 3), ("c", 5), ("d", 9)]]

    ranked = assign_competition_ranks(rows)

    assert [(row["name"], row["rank"]) for row in ranked] == [
        ("b", 1),
        ("a", 2),
        ("c", 2),
        ("d", 4),
    ]


def test_event_leaderboard_ranks_ties_and_untimed(fake_db: FakeSupabase, service) -> None:
    """01:00, 01:00, 00:45 and an empty time rank 2, 2, 1 and 4."""
    event = fake_db.add_event()
    riders = [fake_db.add_user(name) for name in ("Hind", "Omar", "Sara", "Yousef")]
    for rider, value in zip(riders, ["01:00", "01:00", "00:45", None], strict=True):
        fake_db.add_result(event["id"], rider["id"], time=value, status="completed")

    board = service.compute_leaderboard(event["id"], "event")

    assert [(entry["user"]["full_name"], entry["rank"]) for entry in board] == [
        ("Sara", 1),
        ("Hind", 2),
        ("Omar", 2),
        ("Yousef", 4),
    ]
    assert board[0]["event"]["title"] == "Sunrise Loop"
    assert set(board[0]) == {
        "id",
        "distance",
        "time",
        "rank",
        "status",
        "created_at",
        "updated_at",
        "user",
        "event",
    }


def test_leaderboard_is_deterministic(fake_db: FakeSupabase, service) -> None:
    event = fake_db.add_event()
    for value in ["00:50", "00:40", "00:50", "", "00:30:15"]:
        fake_db.add_result(event["id"], fake_db.add_user()["id"], time=value)

    first = service.compute_leaderboard(event["id"], "event")
    second = service.compute_leaderboard(event["id"], "event")

    assert [(e["id"], e["rank"]) for e in first] == [(e["id"], e["rank"]) for e in second]


def test_seconds_toggle_changes_ties(
    fake_db: FakeSupabase,
    service,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    event = fake_db.add_event()
    fake_db.add_result(event["id"], fake_db.add_user()["id"], time="00:40:59")
    fake_db.add_result(event["id"], fake_db.add_user()["id"], time="00:40:01")

    assert [e["rank"] for e in service.compute_leaderboard(event["id"], "event")] == [1, 2]

    monkeypatch.setattr(settings, "leaderboard_count_seconds", False)
    assert [e["rank"] for e in service.compute_leaderboard(event["id"], "event")] == [1, 1]


def test_track_leaderboard_spans_events(fake_db: FakeSupabase, service) -> None:
    track = fake_db.insert_row("tracks", {"title": "Al Qudra Loop"})
    first = fake_db.add_event(title="Week 1", track_id=track["id"])
    second = fake_db.add_event(title="Week 2", track_id=track["id"])
    other = fake_db.add_event(title="Elsewhere")
    fake_db.add_result(first["id"], fake_db.add_user("Slow")["id"], time="02:00")
    fake_db.add_result(second["id"], fake_db.add_user("Quick")["id"], time="01:30")
    fake_db.add_result(other["id"], fake_db.add_user("Outside")["id"], time="00:10")

    board = service.compute_leaderboard(track["id"], "track")

    assert [(e["user"]["full_name"], e["event"]["title"]) for e in board] == [
        ("Quick", "Week 2"),
        ("Slow", "Week 1"),
    ]


def test_empty_scope_returns_empty_list(fake_db: FakeSupabase, service) -> None:
    event = fake_db.add_event()
    track = fake_db.insert_row("tracks", {"title": "Unused"})

    assert service.compute_leaderboard(event["id"], "event") == []
    assert service.compute_leaderboard(track["id"], "track") == []


def test_missing_related_rows_become_empty(fake_db: FakeSupabase, service) -> None:
    event = fake_db.add_event()
    fake_db.add_result(event["id"], "9b2f0d4e-0000-4000-8000-000000000001", time="00:20")

    board = service.compute_leaderboard(event["id"], "event")

    assert board[0]["user"] == {}


@pytest.mark.parametrize(("scope_id", "kind"), [("not-a-uuid", "event"), (None, "community")])
def test_invalid_scope(fake_db: FakeSupabase, service, scope_id, kind: str) -> None:
    scope = scope_id or fake_db.add_event()["id"]
    with pytest.raises(InvalidInputError):
        service.compute_leaderboard(scope, kind)
