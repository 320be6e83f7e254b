"""Track catalogue service."""

from __future__ import annotations

from typing import Any

from app.services.common import SupabaseService
from app.utils.errors import InvalidInputError, NotFoundError
from app.utils.pagination import pagination_meta
from app.utils.time import now_utc
from supabase import Client


class TrackService:
    """Track CRUD, listing and archiving."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def create(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a track owned by ``user_id``."""
        payload = dict(data)
        payload["created_by"] = user_id
        return self.db.insert_one("tracks", payload)

    def list(
        self,
        filters: dict[str, Any],
        include_archived: bool = False,
        page: int = 1,
        limit: int = 10,
    ) -> dict[str, Any]:
        """Return one page of tracks, newest first."""
        cleaned = {key: value for key, value in filters.items() if value is not None}
        if not include_archived:
            cleaned["is_archived"] = False
        rows, total = self.db.select_page(
            "tracks",
            page,
            limit,
            filters=cleaned,
            order=[("created_at", True)],
        )
        return {
            "tracks": self.db.resolve_user_field(rows),
            "pagination": pagination_meta(page, limit, total),
        }

    def get(self, track_id: str) -> dict[str, Any]:
        """Return one track."""
        return self.db.select_one("tracks", {"id": track_id}, not_found_label="Track")

    def update(self, track_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial update."""
        if not data:
            raise InvalidInputError("No fields to update")
        payload = dict(data)
        payload["updated_at"] = now_utc().isoformat()
        rows = self.db.update("tracks", {"id": track_id}, payload)
        if not rows:
            raise NotFoundError("Track")
        return rows[0]

    def archive(self, track_id: str) -> dict[str, Any]:
        """Hide a track from default listings without deleting it."""
        return self.update(track_id, {"is_archived": True})

    def delete(self, track_id: str) -> None:
        """Delete a track."""
        rows = self.db.delete("tracks", {"id": track_id})
        if not rows:
            raise NotFoundError("Track")
