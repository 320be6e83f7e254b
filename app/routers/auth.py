"""Authentication endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.dependencies import (
    Principal,
    get_current_member,
    get_db_client,
    get_identity_verifier,
    get_registration_claims,
)
from app.schemas.auth import (
    AccessTokenResponse,
    GuestSessionResponse,
    RefreshRequest,
    RegisterRequest,
    SessionResponse,
    VerifyRequest,
)
from app.schemas.user import UserResponse
from app.services.auth_service import AuthService
from app.utils.identity import IdentityVerifier
from supabase import Client

router = APIRouter()


@router.post("/verify")
def verify(
    payload: VerifyRequest,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    client: Client = Depends(get_db_client),
) -> dict:
    """Exchange an identity-provider token for a session or a registration token."""
    identity = verifier.verify(payload.id_token)
    return AuthService(client).verify(identity, device_id=payload.device_id)


@router.post("/register", response_model=SessionResponse, status_code=201)
def register(
    payload: RegisterRequest,
    claims: dict[str, Any] = Depends(get_registration_claims),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create the account behind a registration token."""
    session = AuthService(client).register(
        claims,
        full_name=payload.full_name,
        age=payload.age,
        gender=payload.gender,
        email=payload.email,
        device_id=payload.device_id,
    )
    return {"is_new_user": True, **session}


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(payload: RefreshRequest, client: Client = Depends(get_db_client)) -> dict:
    """Issue a new access token from a stored refresh token."""
    return AuthService(client).refresh(payload.refresh_token)


@router.post("/logout")
def logout(
    payload: RefreshRequest,
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Revoke a refresh token of the current user."""
    AuthService(client).logout(principal.user_id, payload.refresh_token)
    return {"success": True}


@router.get("/me", response_model=UserResponse)
def me(
    principal: Principal = Depends(get_current_member),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the current user's profile."""
    return AuthService(client).me(principal.user_id)


@router.post("/guest-login", response_model=GuestSessionResponse)
def guest_login(client: Client = Depends(get_db_client)) -> dict:
    """Start a guest session."""
    return AuthService(client).guest_login()
