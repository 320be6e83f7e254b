"""Community ride endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.dependencies import Principal, get_db_client, get_principal, require_ride_manager
from app.schemas.track import RideCreate, RideStatus, RideUpdate
from app.services.ride_service import RideService
from supabase import Client

router = APIRouter()


@router.post("", status_code=201)
def create_ride(
    payload: RideCreate,
    principal: Principal = Depends(require_ride_manager),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create a community ride."""
    data = payload.model_dump(mode="json")
    return {"ride": RideService(client).create(principal.user_id, data)}


@router.get("")
def list_rides(
    status: RideStatus | None = Query(default=None),
    page: int = Query(default=1),
    limit: int = Query(default=settings.default_page_size, le=settings.max_page_size),
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """List community rides by date."""
    return RideService(client).list(status=status, page=page, limit=limit)


@router.get("/{ride_id}")
def get_ride(
    ride_id: str,
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return one community ride."""
    return {"ride": RideService(client).get(ride_id)}


@router.patch("/{ride_id}")
def update_ride(
    ride_id: str,
    payload: RideUpdate,
    _: Principal = Depends(require_ride_manager),
    client: Client = Depends(get_db_client),
) -> dict:
    """Partially update a community ride."""
    data = payload.model_dump(mode="json", exclude_unset=True)
    return {"ride": RideService(client).update(ride_id, data)}


@router.delete("/{ride_id}")
def delete_ride(
    ride_id: str,
    _: Principal = Depends(require_ride_manager),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete a community ride."""
    RideService(client).delete(ride_id)
    return {"success": True}
