"""Event catalogue service."""

from __future__ import annotations

from typing import Any

from app.services.common import SupabaseService
from app.utils.errors import InvalidInputError, NotFoundError
from app.utils.pagination import pagination_meta
from app.utils.time import now_utc
from supabase import Client


class EventService:
    """Event CRUD and filtered listing."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def _attach_relations(self, events: list[dict[str, Any]]) -> list[dict[str, Any]]:
        events = self.db.resolve_user_field(events)
        tracks = self.db.get_rows_map(
            "tracks", [event.get("track_id") for event in events], columns="id,title"
        )
        communities = self.db.get_rows_map(
            "communities", [event.get("community_id") for event in events], columns="id,title"
        )
        for event in events:
            event["track"] = tracks.get(str(event.get("track_id")))
            event["community"] = communities.get(str(event.get("community_id")))
        return events

    def create(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create an event owned by ``user_id``."""
        payload = dict(data)
        payload["created_by"] = user_id
        return self.db.insert_one("events", payload)

    def list(self, filters: dict[str, Any], page: int = 1, limit: int = 10) -> dict[str, Any]:
        """Return events by date (soonest first), newest-created first on ties."""
        cleaned = {key: value for key, value in filters.items() if value is not None}
        rows, total = self.db.select_page(
            "events",
            page,
            limit,
            filters=cleaned,
            order=[("event_date", False), ("created_at", True)],
        )
        return {
            "events": self._attach_relations(rows),
            "pagination": pagination_meta(page, limit, total),
        }

    def get(self, event_id: str) -> dict[str, Any]:
        """Return one event with creator, track and community resolved."""
        event = self.db.select_one("events", {"id": event_id}, not_found_label="Event")
        return self._attach_relations([event])[0]

    def update(self, event_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial update."""
        if not data:
            raise InvalidInputError("No fields to update")
        payload = dict(data)
        payload["updated_at"] = now_utc().isoformat()
        rows = self.db.update("events", {"id": event_id}, payload)
        if not rows:
            raise NotFoundError("Event")
        return self._attach_relations(rows)[0]

    def delete(self, event_id: str) -> None:
        """Delete an event."""
        rows = self.db.delete("events", {"id": event_id})
        if not rows:
            raise NotFoundError("Event")
