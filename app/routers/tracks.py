"""Track and track leaderboard endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.dependencies import Principal, get_db_client, get_principal, require_admin
from app.schemas.leaderboard import LeaderboardResponse
from app.schemas.track import TrackCreate, TrackStatus, TrackType, TrackUpdate
from app.services.ranking_service import RankingService
from app.services.track_service import TrackService
from supabase import Client

router = APIRouter()


@router.post("", status_code=201)
def create_track(
    payload: TrackCreate,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create a track."""
    return {"track": TrackService(client).create(principal.user_id, payload.model_dump())}


@router.get("")
def list_tracks(
    status: TrackStatus | None = Query(default=None),
    city: str | None = Query(default=None),
    track_type: TrackType | None = Query(default=None),
    include_archived: bool = Query(default=False),
    page: int = Query(default=1),
    limit: int = Query(default=settings.default_page_size, le=settings.max_page_size),
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """List tracks, newest first."""
    return TrackService(client).list(
        {"status": status, "city": city, "track_type": track_type},
        include_archived=include_archived,
        page=page,
        limit=limit,
    )


@router.get("/{track_id}")
def get_track(
    track_id: str,
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return one track."""
    return {"track": TrackService(client).get(track_id)}


@router.patch("/{track_id}")
def update_track(
    track_id: str,
    payload: TrackUpdate,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Partially update a track."""
    data = payload.model_dump(exclude_unset=True)
    return {"track": TrackService(client).update(track_id, data)}


@router.post("/{track_id}/archive")
def archive_track(
    track_id: str,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Hide a track from default listings."""
    return {"track": TrackService(client).archive(track_id)}


@router.delete("/{track_id}")
def delete_track(
    track_id: str,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete a track."""
    TrackService(client).delete(track_id)
    return {"success": True}


@router.get("/{track_id}/results", response_model=LeaderboardResponse)
def track_leaderboard(
    track_id: str,
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the ranked results of every event held on a track."""
    entries = RankingService(client).compute_leaderboard(track_id, "track")
    return {"scope": "track", "scope_id": track_id, "entries": entries}
