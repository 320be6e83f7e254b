"""Sign-in, registration and session token lifecycle."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from app.config import settings
from app.services.common import SupabaseService, invalidate_user_cache
from app.utils.errors import ConflictError, InvalidInputError, UnauthorizedError
from app.utils.identity import VerifiedIdentity
from app.utils.roles import UserRole
from app.utils.time import expires_in, now_utc, parse_iso_datetime
from app.utils.tokens import (
    create_access_token,
    create_guest_token,
    create_token_pair,
    decode_refresh_token,
)
from supabase import Client

logger = logging.getLogger(__name__)

PUBLIC_USER_FIELDS = (
    "id",
    "full_name",
    "phone",
    "email",
    "gender",
    "age",
    "role",
    "is_verified",
    "created_at",
)


def hash_token(token: str) -> str:
    """Return the digest stored in place of a raw refresh token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def public_user(user: dict[str, Any]) -> dict[str, Any]:
    """Project a user row to the fields returned by the API."""
    return {field: user.get(field) for field in PUBLIC_USER_FIELDS}


class AuthService:
    """Exchange identity-provider tokens for API sessions."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def _find_user(
        self,
        firebase_uid: str | None,
        phone: str | None,
        email: str | None,
    ) -> dict[str, Any] | None:
        for column, value in (("firebase_uid", firebase_uid), ("phone", phone), ("email", email)):
            if not value:
                continue
            user = self.db.find_one("users", {column: value})
            if user:
                return user
        return None

    def _issue_session(self, user: dict[str, Any], device_id: str | None) -> dict[str, Any]:
        tokens = create_token_pair(
            str(user["id"]),
            phone=user.get("phone"),
            email=user.get("email"),
        )
        self.db.insert_one(
            "refresh_tokens",
            {
                "user_id": str(user["id"]),
                "token_hash": hash_token(tokens["refresh_token"]),
                "device_id": device_id,
                "expires_at": expires_in(days=settings.refresh_token_expires_days).isoformat(),
            },
        )
        return {"user": public_user(user), **tokens}

    def verify(self, identity: VerifiedIdentity, device_id: str | None = None) -> dict[str, Any]:
        """Log in a known user or hand out a registration token for a new one."""
        user = self._find_user(identity.uid, identity.phone, identity.email)
        if user:
            if not user.get("firebase_uid"):
                self.db.update("users", {"id": user["id"]}, {"firebase_uid": identity.uid})
            logger.info("user %s signed in", user["id"])
            return {"is_new_user": False, **self._issue_session(user, device_id)}

        # Registration tokens carry no user id, so there is nothing to refresh.
        return {
            "is_new_user": True,
            "phone": identity.phone,
            "email": identity.email,
            "access_token": create_access_token(
                None,
                phone=identity.phone,
                email=identity.email,
                firebase_uid=identity.uid,
            ),
        }

    def register(
        self,
        claims: dict[str, Any],
        full_name: str,
        age: int,
        gender: str,
        email: str | None = None,
        device_id: str | None = None,
    ) -> dict[str, Any]:
        """Create the user behind a registration token and start a session."""
        firebase_uid = claims.get("firebase_uid")
        phone = claims.get("phone")
        email = (claims.get("email") or email or "").strip().lower() or None
        if not firebase_uid or not (phone or email):
            raise InvalidInputError("Registration token does not carry a verified identity")

        if self._find_user(firebase_uid, phone, email):
            raise ConflictError("User already registered")

        user = self.db.insert_one(
            "users",
            {
                "firebase_uid": firebase_uid,
                "full_name": full_name.strip(),
                "phone": phone,
                "email": email,
                "age": age,
                "gender": gender,
                "role": UserRole.MEMBER.value,
                "is_verified": True,
            },
        )
        logger.info("user %s registered", user["id"])
        return self._issue_session(user, device_id)

    def refresh(self, refresh_token: str) -> dict[str, str]:
        """Return a new access token for a stored, unexpired refresh token."""
        claims = decode_refresh_token(refresh_token)
        user_id = claims.get("sub")
        if not user_id:
            raise UnauthorizedError("Invalid refresh token")

        stored = self.db.find_one(
            "refresh_tokens",
            {"user_id": user_id, "token_hash": hash_token(refresh_token)},
        )
        if not stored or parse_iso_datetime(stored["expires_at"]) <= now_utc():
            raise UnauthorizedError("Invalid or expired refresh token")

        user = self.db.get_user(user_id)
        return {
            "access_token": create_access_token(
                str(user["id"]),
                phone=user.get("phone"),
                email=user.get("email"),
            )
        }

    def logout(self, user_id: str, refresh_token: str) -> None:
        """Revoke one refresh token of the current user."""
        self.db.delete(
            "refresh_tokens",
            {"user_id": user_id, "token_hash": hash_token(refresh_token)},
        )

    def guest_login(self) -> dict[str, Any]:
        """Start a read-only guest session."""
        token, guest_id = create_guest_token()
        return {"access_token": token, "guest_id": guest_id, "is_guest": True}

    def me(self, user_id: str) -> dict[str, Any]:
        """Return the current user's profile."""
        invalidate_user_cache(user_id)
        return public_user(self.db.get_user(user_id))
