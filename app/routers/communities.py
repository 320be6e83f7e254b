"""Community and membership endpoints."""

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
from app.schemas.community import (
    BanRequest,
    CommunityCreate,
    CommunityLocation,
    CommunityType,
    CommunityUpdate,
    GalleryImagesRequest,
    MembersPage,
    RoleUpdateRequest,
)
from app.services.community_service import CommunityService
from app.services.membership_service import MembershipService
from supabase import Client

router = APIRouter()


@router.post("", status_code=201)
def create_community(
    payload: CommunityCreate,
    principal: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create a new community."""
    community = CommunityService(client).create(principal.user_id, payload.model_dump())
    return {"community": community}


@router.get("")
def list_communities(
    type: CommunityType | None = Query(default=None),
    location: CommunityLocation | None = Query(default=None),
    category: str | None = Query(default=None),
    is_active: bool | None = Query(default=None),
    is_public: bool | None = Query(default=None),
    is_featured: bool | None = Query(default=None),
    search: str | None = Query(default=None),
    page: int = Query(default=1),
    limit: int = Query(default=settings.default_page_size, le=settings.max_page_size),
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """List communities with filters and pagination."""
    return CommunityService(client).list(
        {
            "type": type,
            "location": location,
            "is_active": is_active,
            "is_public": is_public,
            "is_featured": is_featured,
        },
        search=search,
        category=category,
        page=page,
        limit=limit,
    )


@router.get("/me/communities")
def my_communities(
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """List the communities the caller is an active member of."""
    return {"memberships": MembershipService(client).get_user_communities(principal.user_id)}


@router.get("/{community_id}")
def get_community(
    community_id: str,
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return community details with creator and members resolved."""
    return {"community": CommunityService(client).get(community_id)}


@router.patch("/{community_id}")
def update_community(
    community_id: str,
    payload: CommunityUpdate,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Partially update a community."""
    data = payload.model_dump(exclude_unset=True)
    return {"community": CommunityService(client).update(community_id, data)}


@router.delete("/{community_id}")
def delete_community(
    community_id: str,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Delete a community."""
    CommunityService(client).delete(community_id)
    return {"success": True}


@router.get("/{community_id}/gallery")
def get_gallery(
    community_id: str,
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return gallery image URLs."""
    return {"gallery": CommunityService(client).gallery(community_id)}


@router.post("/{community_id}/gallery")
def add_gallery_images(
    community_id: str,
    payload: GalleryImagesRequest,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Add images to the gallery."""
    return {"gallery": CommunityService(client).add_gallery_images(community_id, payload.images)}


@router.delete("/{community_id}/gallery")
def remove_gallery_images(
    community_id: str,
    payload: GalleryImagesRequest,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Remove images from the gallery."""
    service = CommunityService(client)
    return {"gallery": service.remove_gallery_images(community_id, payload.images)}


@router.post("/{community_id}/join")
def join_community(
    community_id: str,
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Join a community; joining again while active toggles the membership off."""
    membership = MembershipService(client).join_community(principal.user_id, community_id)
    return {"membership": membership}


@router.post("/{community_id}/leave")
def leave_community(
    community_id: str,
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Leave a community."""
    return MembershipService(client).leave_community(principal.user_id, community_id)


@router.get("/{community_id}/members", response_model=MembersPage)
def list_members(
    community_id: str,
    page: int = Query(default=1),
    limit: int = Query(default=settings.default_page_size, le=settings.max_page_size),
    status: str = Query(default="active"),
    _: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return one page of memberships; ``status=all`` lists every status."""
    return MembershipService(client).get_community_members(
        community_id,
        page=page,
        limit=limit,
        status=None if status == "all" else status,
    )


@router.get("/{community_id}/banned-members")
def list_banned_members(
    community_id: str,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return banned memberships."""
    return {"members": MembershipService(client).get_banned_members(community_id)}


@router.get("/{community_id}/is-member")
def is_member(
    community_id: str,
    principal: Principal = Depends(get_principal),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return whether the caller is an active member."""
    if principal.is_guest:
        return {"is_member": False}
    return {"is_member": MembershipService(client).is_member(principal.user_id, community_id)}


@router.post("/{community_id}/members/{user_id}/ban")
def set_member_banned(
    community_id: str,
    user_id: str,
    payload: BanRequest,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Ban or unban a user from a community."""
    membership = MembershipService(client).set_banned(community_id, user_id, payload.banned)
    return {"membership": membership}


@router.patch("/{community_id}/members/{user_id}/role")
def update_member_role(
    community_id: str,
    user_id: str,
    payload: RoleUpdateRequest,
    _: Principal = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Change a member's community role."""
    membership = MembershipService(client).update_role(community_id, user_id, payload.role)
    return {"membership": membership}
