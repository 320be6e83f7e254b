"""Authentication request and response schemas."""

from pydantic import BaseModel, Field

from app.schemas.user import Gender, UserResponse


class VerifyRequest(BaseModel):
    """Identity-provider token exchange."""

    id_token: str = Field(..., min_length=1)
    device_id: str | None = None


class RegisterRequest(BaseModel):
    """Profile details sent with a registration token."""

    full_name: str = Field(..., min_length=1, max_length=120)
    age: int = Field(..., ge=1, le=120)
    gender: Gender
    email: str | None = Field(default=None, max_length=254)
    device_id: str | None = None


class RefreshRequest(BaseModel):
    """Refresh token exchange or revocation."""

    refresh_token: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Signed-in user with a token pair."""

    user: UserResponse
    access_token: str
    refresh_token: str
    is_new_user: bool = False


class AccessTokenResponse(BaseModel):
    """New access token."""

    access_token: str


class GuestSessionResponse(BaseModel):
    """Guest session token."""

    access_token: str
    guest_id: str
    is_guest: bool = True
