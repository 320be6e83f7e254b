"""Refresh token purge job tests."""

from __future__ import annotations

from datetime import timedelta

from app.jobs.scheduler import register_jobs, scheduler
from app.jobs.token_cleanup import delete_expired_refresh_tokens
from app.services.common import SupabaseService
from app.utils.time import now_utc
from tests.fakes import FakeSupabase


def test_delete_expired_refresh_tokens(fake_db: FakeSupabase) -> None:
    user = fake_db.add_user()
    for offset, token_hash in [(-60, "old"), (-1, "just-expired"), (60, "live")]:
        fake_db.insert_row(
            "refresh_tokens",
            {
                "user_id": user["id"],
                "token_hash": token_hash,
                "expires_at": (now_utc() + timedelta(minutes=offset)).isoformat(),
            },
        )

    removed = delete_expired_refresh_tokens(SupabaseService(fake_db))

    assert removed == 2
    assert [row["token_hash"] for row in fake_db.rows("refresh_tokens")] == ["live"]


def test_register_jobs_is_idempotent() -> None:
    register_jobs()
    register_jobs()
    try:
        assert [job.id for job in scheduler.get_jobs()] == ["purge_expired_refresh_tokens"]
    finally:
        scheduler.remove_all_jobs()
