"""Event, participation and event leaderboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.dependencies import (
    Principal,
    get_current_member,
    get_db_client,
    get_principal,
    require_admin,
)
from app.schemas.event import (
    CancelRequest,
    EventCategory,
    EventCreate,
    EventStatus,
    EventType,
    EventUpdate,
    ResultSubmission,
)
from app.schemas.leaderboard import LeaderboardResponse
from app.services.event_service import EventService
from app.services.participation_service import ParticipationService
from app.services.ranking_service import RankingService
from supabase import Client

router = APIRouter()


@router.post("", status_code=201)
def create_event(
    payload: EventCreate,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create an event."""
    data = payload.model_dump(mode="json")
    return {"event": EventService(client).create(principal.user_id, data)}


@router.get("")
def list_events(
    status: EventStatus | None = Query(default=None),
    category: EventCategory | None = Query(default=None),
    event_type: EventType | None = Query(default=None),
    track_id: str | None = Query(default=None),
    community_id: str | None = Query(default=None),
    page: int = Query(default=1),
    limit: int = Query(default=settings.default_page_size, le=settings.max_page_size),
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """List events, soonest first."""
    return EventService(client).list(
        {
            "status": status,
            "category": category,
            "event_type": event_type,
            "track_id": track_id,
            "community_id": community_id,
        },
        page=page,
        limit=limit,
    )


@router.get("/{event_id}")
def get_event(
    event_id: str,
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return one event."""
    return {"event": EventService(client).get(event_id)}


@router.patch("/{event_id}")
def update_event(
    event_id: str,
    payload: EventUpdate,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Partially update an event."""
    data = payload.model_dump(mode="json", exclude_unset=True)
    return {"event": EventService(client).update(event_id, data)}


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete an event."""
    EventService(client).delete(event_id)
    return {"success": True}


@router.post("/{event_id}/join")
def join_event(
    event_id: str,
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Register for an event, or rejoin after cancelling."""
    record, created = ParticipationService(client).join_event(principal.user_id, event_id)
    return {"participation": record, "created": created}


@router.post("/{event_id}/cancel")
def cancel_participation(
    event_id: str,
    payload: CancelRequest,
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Cancel the caller's registration."""
    service = ParticipationService(client)
    record = service.cancel_participation(principal.user_id, event_id, payload.reason)
    return {"participation": record}


@router.post("/{event_id}/result")
def submit_result(
    event_id: str,
    payload: ResultSubmission,
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Submit the caller's distance and elapsed time."""
    record = ParticipationService(client).submit_result(
        principal.user_id,
        event_id,
        distance=payload.distance,
        time=payload.time,
    )
    return {"participation": record}


@router.get("/{event_id}/member-status")
def member_status(
    event_id: str,
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the caller's participation status."""
    return ParticipationService(client).member_status(principal.user_id, event_id)


@router.get("/{event_id}/calendar")
def calendar_link(
    event_id: str,
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return an add-to-calendar link for a joined event."""
    return {"url": ParticipationService(client).calendar_link(principal.user_id, event_id)}


@router.get("/{event_id}/results", response_model=LeaderboardResponse)
def event_leaderboard(
    event_id: str,
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the ranked results of an event."""
    entries = RankingService(client).compute_leaderboard(event_id, "event")
    return {"scope": "event", "scope_id": event_id, "entries": entries}
