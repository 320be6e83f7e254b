"""Community ride listings."""

from __future__ import annotations

from typing import Any

from app.services.common import SupabaseService
from app.utils.errors import InvalidInputError, NotFoundError
from app.utils.pagination import pagination_meta
from app.utils.time import now_utc
from supabase import Client


class RideService:
    """Community ride CRUD."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def create(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        payload = dict(data)
        payload["created_by"] = user_id
        return self.db.insert_one("community_rides", payload)

    def list(self, status: str | None = None, page: int = 1, limit: int = 10) -> dict[str, Any]:
        rows, total = self.db.select_page(
            "community_rides",
            page,
            limit,
            filters={"status": status} if status else None,
            order=[("date", False), ("created_at", True)],
        )
        return {
            "rides": self.db.resolve_user_field(rows),
            "pagination": pagination_meta(page, limit, total),
        }

    def get(self, ride_id: str) -> dict[str, Any]:
        ride = self.db.select_one(
            "community_rides", {"id": ride_id}, not_found_label="Community ride"
        )
        return self.db.resolve_user_field([ride])[0]

    def update(self, ride_id: str, data: dict[str, Any]) -> dict[str, Any]:
        if not data:
            raise InvalidInputError("No fields to update")
        payload = dict(data)
        payload["updated_at"] = now_utc().isoformat()
        rows = self.db.update("community_rides", {"id": ride_id}, payload)
        if not rows:
            raise NotFoundError("Community ride")
        return self.db.resolve_user_field(rows)[0]

    def delete(self, ride_id: str) -> None:
        rows = self.db.delete("community_rides", {"id": ride_id})
        if not rows:
            raise NotFoundError("Community ride")
