"""FastAPI dependency injection helpers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from fastapi import Depends, Header

from app.services.common import SupabaseService
from app.utils.errors import ForbiddenError, NotFoundError, UnauthorizedError
from app.utils.identity import IdentityVerifier
from app.utils.roles import Capability, UserRole, has_capability
from app.utils.supabase_client import get_service_client
from app.utils.tokens import GUEST, REGISTRATION, decode_access_token
from supabase import Client


@dataclass(frozen=True)
class Principal:
    """The caller behind an access token."""

    user_id: str
    role: UserRole
    phone: str | None = None
    email: str | None = None

    @property
    def is_guest(self) -> bool:
        return self.role is UserRole.GUEST


def get_db_client() -> Client:
    """Return the privileged Supabase client used by backend services."""
    return get_service_client()


@lru_cache(maxsize=1)
def get_identity_verifier() -> IdentityVerifier:
    """Return the identity-provider verifier (overridable in tests)."""
    return IdentityVerifier()


def get_token_claims(authorization: str = Header(None)) -> dict[str, Any]:
    """Decode the bearer token from the Authorization header.

    Raises:
        UnauthorizedError: 401 if the header is missing, malformed, or
            the token cannot be validated.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing authorization header")
    return decode_access_token(authorization.split(" ", 1)[1])


def get_registration_claims(claims: dict[str, Any] = Depends(get_token_claims)) -> dict[str, Any]:
    """Accept only the registration token handed out for unknown identities."""
    if claims.get("type") != REGISTRATION:
        raise ForbiddenError("A registration token is required")
    return claims


def get_principal(
    claims: dict[str, Any] = Depends(get_token_claims),
    client: Client = Depends(get_db_client),
) -> Principal:
    """Resolve a user or guest principal; registration tokens are rejected."""
    token_type = claims.get("type")
    if token_type == GUEST:
        return Principal(user_id=str(claims["sub"]), role=UserRole.GUEST)
    if token_type == REGISTRATION or not claims.get("sub"):
        raise UnauthorizedError("Registration is not complete")

    try:
        user = SupabaseService(client).get_user(str(claims["sub"]))
    except NotFoundError as exc:
        raise UnauthorizedError("User no longer exists") from exc

    return Principal(
        user_id=str(user["id"]),
        role=UserRole.parse(user.get("role")),
        phone=user.get("phone"),
        email=user.get("email"),
    )


def require_capability(capability: Capability) -> Callable[..., Principal]:
    """Build a dependency that admits only roles granted ``capability``."""

    def dependency(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.is_guest:
            raise ForbiddenError("Guest sessions cannot perform this action")
        if not has_capability(principal.role, capability):
            raise ForbiddenError(f"Access denied: {principal.role.value} cannot {capability.value}")
        return principal

    return dependency


get_current_member = require_capability(Capability.PARTICIPATE)
require_admin = require_capability(Capability.MANAGE_CONTENT)
require_ride_manager = require_capability(Capability.MANAGE_RIDES)
