"""Community and membership schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.user import UserIdentity

CommunityType = Literal["Club", "Shop", "Women", "Youth", "Family", "Corporate"]
CommunityLocation = Literal["Abu Dhabi", "Dubai", "Al Ain", "Sharjah"]
MembershipStatus = Literal["active", "inactive", "banned"]
MembershipRole = Literal["member", "moderator", "admin"]


class CommunityCreate(BaseModel):
    """Request body for creating a community."""

    title: str = Field(..., min_length=1, max_length=120)
    description: str = Field(..., min_length=1)
    type: CommunityType
    category: list[str] = Field(..., min_length=1)
    location: CommunityLocation | None = None
    image: str | None = None
    logo: str | None = None
    track_name: str | None = None
    distance: float | None = Field(default=None, ge=0)
    terrain: str | None = None
    is_active: bool = True
    is_public: bool = False
    is_featured: bool = False


class CommunityUpdate(BaseModel):
    """Partial community update."""

    title: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, min_length=1)
    type: CommunityType | None = None
    category: list[str] | None = None
    location: CommunityLocation | None = None
    image: str | None = None
    logo: str | None = None
    track_name: str | None = None
    distance: float | None = Field(default=None, ge=0)
    terrain: str | None = None
    is_active: bool | None = None
    is_public: bool | None = None
    is_featured: bool | None = None


class GalleryImagesRequest(BaseModel):
    """Images to add to or remove from a community gallery."""

    images: list[str] = Field(..., min_length=1)


class MembershipResponse(BaseModel):
    """A user's membership in one community."""

    id: str
    user_id: str
    community_id: str
    role: MembershipRole
    status: MembershipStatus
    joined_at: datetime
    contribution: int = 0
    user: UserIdentity | None = None
    action: str | None = None


class MembersPage(BaseModel):
    """One page of community memberships."""

    members: list[MembershipResponse]
    total_members: int
    current_page: int
    pages: int


class BanRequest(BaseModel):
    """Administrative ban/unban."""

    banned: bool = True


class RoleUpdateRequest(BaseModel):
    """Community-scoped role change."""

    role: MembershipRole
