"""Event and track leaderboards computed from participation records."""

from __future__ import annotations

import sys
import uuid
from typing import Any

from app.config import settings
from app.services.common import SupabaseService, user_identity
from app.utils.errors import InvalidInputError
from app.utils.time import elapsed_seconds
from supabase import Client

UNTIMED_SECONDS = sys.maxsize
SCOPE_KINDS = ("event", "track")
RESULT_COLUMNS = "id,event_id,user_id,status,distance,time,created_at,updated_at"
EVENT_IDENTITY_COLUMNS = "id,title,event_date"


def time_to_seconds(value: str | None, include_seconds: bool = True) -> int:
    """Return elapsed seconds for ranking; untimed entries get the max sentinel."""
    seconds = elapsed_seconds(value, include_seconds=include_seconds)
    return UNTIMED_SECONDS if seconds is None else seconds


def assign_competition_ranks(
    rows: list[dict[str, Any]],
    key: str = "elapsed_seconds",
) -> list[dict[str, Any]]:
    """Sort ``rows`` by ``key`` and attach a competition rank (1, 2, 2, 4).

    The sort is stable, so tied rows keep their input order.
    """
    ordered = sorted(rows, key=lambda row: row[key])
    previous: Any = object()
    rank = 0
    for position, row in enumerate(ordered, start=1):
        if row[key] != previous:
            rank = position
            previous = row[key]
        row["rank"] = rank
    return ordered


def _validate_uuid(value: str, label: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except ValueError as exc:
        raise InvalidInputError(f"Invalid {label}") from exc


class RankingService:
    """Read-only leaderboard computation; rank is never stored."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def _records_for_scope(self, scope_id: str, scope_kind: str) -> list[dict[str, Any]]:
        if scope_kind == "event":
            return self.db.select_many(
                "event_results",
                filters={"event_id": scope_id},
                columns=RESULT_COLUMNS,
                order_by="created_at",
            )

        events = self.db.select_many("events", filters={"track_id": scope_id}, columns="id")
        event_ids = [str(event["id"]) for event in events]
        if not event_ids:
            return []
        return self.db.select_many(
            "event_results",
            filters={"event_id": event_ids},
            columns=RESULT_COLUMNS,
            order_by="created_at",
        )

    def compute_leaderboard(self, scope_id: str, scope_kind: str) -> list[dict[str, Any]]:
        """Rank every participation record of an event or of a track's events."""
        if scope_kind not in SCOPE_KINDS:
            raise InvalidInputError(f"scope must be one of {', '.join(SCOPE_KINDS)}")
        scope_id = _validate_uuid(scope_id, f"{scope_kind} id")

        records = self._records_for_scope(scope_id, scope_kind)
        if not records:
            return []

        for record in records:
            record["elapsed_seconds"] = time_to_seconds(
                record.get("time"),
                include_seconds=settings.leaderboard_count_seconds,
            )
        ranked = assign_competition_ranks(records)

        users = self.db.get_users_map([row["user_id"] for row in ranked])
        events = self.db.get_rows_map(
            "events",
            [row["event_id"] for row in ranked],
            columns=EVENT_IDENTITY_COLUMNS,
        )

        return [
            {
                "id": row["id"],
                "distance": row.get("distance"),
                "time": row.get("time"),
                "rank": row["rank"],
                "status": row.get("status"),
                "created_at": row.get("created_at"),
                "updated_at": row.get("updated_at"),
                "user": user_identity(users.get(str(row["user_id"]))),
                "event": events.get(str(row["event_id"]), {}),
            }
            for row in ranked
        ]
