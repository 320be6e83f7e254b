"""Event participation records: join, cancel, result submission."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any
from urllib.parse import urlencode

from app.services.common import SupabaseService
from app.utils.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from app.utils.time import calendar_stamp, is_elapsed_time, now_utc, parse_iso_datetime
from supabase import Client

logger = logging.getLogger(__name__)

RESULTS = "event_results"
JOINED = "joined"
CANCELLED = "cancelled"
COMPLETED = "completed"
CLOSED_EVENT_STATUSES = {"completed", "cancelled"}
CALENDAR_EVENT_MINUTES = 60
GOOGLE_CALENDAR_URL = "https://www.google.com/calendar/render"


class ParticipationService:
    """One participation record per (event, user), status-toggled, never deleted."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def _get_event(self, event_id: str, columns: str = "*") -> dict[str, Any]:
        return self.db.select_one(
            "events", {"id": event_id}, columns=columns, not_found_label="Event"
        )

    def _find(self, user_id: str, event_id: str) -> dict[str, Any] | None:
        return self.db.find_one(RESULTS, {"event_id": event_id, "user_id": user_id})

    def _require(self, user_id: str, event_id: str) -> dict[str, Any]:
        record = self._find(user_id, event_id)
        if record is None:
            raise NotFoundError("Event participation")
        return record

    def _transition(
        self,
        record: dict[str, Any],
        to_status: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        changes = dict(payload or {})
        changes["status"] = to_status
        changes["updated_at"] = now_utc().isoformat()
        rows = self.db.update(
            RESULTS,
            {"id": record["id"], "status": record["status"]},
            changes,
        )
        if not rows:
            raise ConflictError(
                "Participation was changed by another request",
                code="PARTICIPATION_CHANGED",
            )
        return rows[0]

    def join_event(self, user_id: str, event_id: str) -> tuple[dict[str, Any], bool]:
        """Join an event or rejoin after a cancellation.

        Returns ``(record, created)``.
        """
        event = self._get_event(event_id, columns="id,status,max_participants")
        if event.get("status") in CLOSED_EVENT_STATUSES:
            raise ConflictError("Event is not open for registration", code="EVENT_CLOSED")

        record = self._find(user_id, event_id)
        if record and record["status"] == JOINED:
            raise ConflictError("You have already joined this event")
        if record and record["status"] == COMPLETED:
            raise ConflictError("You have already completed this event")

        max_participants = event.get("max_participants")
        if max_participants:
            joined = self.db.count(RESULTS, {"event_id": event_id, "status": JOINED})
            if joined >= int(max_participants):
                raise ConflictError("Event is full", code="EVENT_FULL")

        if record is None:
            created = self.db.insert_one(
                RESULTS,
                {"event_id": event_id, "user_id": user_id, "status": JOINED},
            )
            return created, True

        return self._transition(record, JOINED, {"reason": None}), False

    def cancel_participation(
        self,
        user_id: str,
        event_id: str,
        reason: str | None,
    ) -> dict[str, Any]:
        """Cancel a joined registration; a reason is required."""
        cleaned = (reason or "").strip()
        if not cleaned:
            raise InvalidInputError("Cancellation reason is required")

        record = self._require(user_id, event_id)
        if record["status"] == CANCELLED:
            raise ConflictError("Participation already cancelled")
        if record["status"] == COMPLETED:
            raise ConflictError("Cannot cancel a completed event")

        return self._transition(record, CANCELLED, {"reason": cleaned})

    def submit_result(
        self,
        user_id: str,
        event_id: str,
        distance: float | None,
        time: str,
    ) -> dict[str, Any]:
        """Record distance and elapsed time, completing the participation."""
        if not is_elapsed_time(time):
            raise InvalidInputError("time must be formatted as HH:MM or HH:MM:SS")
        if distance is not None and distance < 0:
            raise InvalidInputError("distance cannot be negative")

        record = self._require(user_id, event_id)
        if record["status"] == COMPLETED or record.get("time"):
            raise ConflictError("Result already submitted")
        if record["status"] == CANCELLED:
            raise ConflictError("Cannot submit a result for a cancelled participation")

        updated = self._transition(
            record,
            COMPLETED,
            {
                "distance": distance,
                "time": time.strip(),
                "completed_at": now_utc().isoformat(),
            },
        )
        logger.info("result submitted event=%s user=%s", event_id, user_id)
        return updated

    def member_status(self, user_id: str, event_id: str) -> dict[str, Any]:
        """Return the caller's participation status for an event."""
        event = self._get_event(event_id, columns="id,title,event_date,status")
        record = self._find(user_id, event_id)

        details = None
        if record:
            details = {
                "joined_at": record.get("created_at"),
                "status": record["status"],
                "distance": record.get("distance"),
                "time": record.get("time"),
                "reason": record.get("reason"),
            }

        return {
            "event_id": event_id,
            "user_id": user_id,
            "status": record["status"] if record else "not_joined",
            "participation_details": details,
            "event": {
                "title": event.get("title"),
                "event_date": event.get("event_date"),
                "status": event.get("status"),
            },
        }

    def calendar_link(self, user_id: str, event_id: str) -> str:
        """Build a Google Calendar template link for a joined event."""
        event = self._get_event(event_id, columns="id,title,description,location,event_date")
        record = self._find(user_id, event_id)
        if record is None or record["status"] != JOINED:
            raise ForbiddenError("You have not joined this event")

        start = parse_iso_datetime(event["event_date"])
        end = start + timedelta(minutes=CALENDAR_EVENT_MINUTES)
        query = urlencode(
            {
                "action": "TEMPLATE",
                "text": event.get("title") or "",
                "dates": f"{calendar_stamp(start)}/{calendar_stamp(end)}",
                "details": event.get("description") or "",
                "location": event.get("location") or "",
            }
        )
        return f"{GOOGLE_CALENDAR_URL}?{query}"
