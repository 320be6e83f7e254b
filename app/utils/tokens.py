"""Session token issuing and verification."""

from __future__ import annotations

import uuid
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.utils.errors import UnauthorizedError
from app.utils.time import expires_in, now_utc

ACCESS = "access"
REFRESH = "refresh"
REGISTRATION = "registration"
GUEST = "guest"


def _encode(claims: dict[str, Any], secret: str, minutes: int = 0, days: int = 0) -> str:
    payload = {key: value for key, value in claims.items() if value is not None}
    payload["iat"] = int(now_utc().timestamp())
    payload["exp"] = int(expires_in(days=days, minutes=minutes).timestamp())
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, secret: str, label: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise UnauthorizedError(f"{label} expired") from exc
    except JWTError as exc:
        raise UnauthorizedError(f"Invalid {label.lower()}") from exc


def create_access_token(
    user_id: str | None,
    phone: str | None = None,
    email: str | None = None,
    firebase_uid: str | None = None,
) -> str:
    """Create a short-lived access token.

    Without ``user_id`` the token is a registration token that only lets the
    holder finish sign-up for the verified phone/email.
    """
    claims = {
        "sub": user_id,
        "phone": phone,
        "email": email,
        "firebase_uid": firebase_uid,
        "type": ACCESS if user_id else REGISTRATION,
    }
    return _encode(claims, settings.jwt_secret, minutes=settings.access_token_expires_minutes)


def create_refresh_token(
    user_id: str | None,
    phone: str | None = None,
    email: str | None = None,
    firebase_uid: str | None = None,
) -> str:
    """Create a long-lived refresh token with a unique ``jti``."""
    claims = {
        "sub": user_id,
        "phone": phone,
        "email": email,
        "firebase_uid": firebase_uid,
        "type": REFRESH,
        "jti": uuid.uuid4().hex,
    }
    return _encode(claims, settings.refresh_secret, days=settings.refresh_token_expires_days)


def create_token_pair(
    user_id: str | None,
    phone: str | None = None,
    email: str | None = None,
    firebase_uid: str | None = None,
) -> dict[str, str]:
    """Return ``access_token`` and ``refresh_token`` for one identity."""
    return {
        "access_token": create_access_token(user_id, phone, email, firebase_uid),
        "refresh_token": create_refresh_token(user_id, phone, email, firebase_uid),
    }


def create_guest_token() -> tuple[str, str]:
    """Create an access token for an anonymous guest session."""
    guest_id = uuid.uuid4().hex
    token = _encode(
        {"sub": f"guest_{guest_id}", "type": GUEST, "uid": guest_id},
        settings.jwt_secret,
        minutes=settings.access_token_expires_minutes,
    )
    return token, guest_id


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode an access, registration, or guest token."""
    claims = _decode(token, settings.jwt_secret, "Access token")
    if claims.get("type") not in {ACCESS, REGISTRATION, GUEST}:
        raise UnauthorizedError("Invalid access token")
    return claims


def decode_refresh_token(token: str) -> dict[str, Any]:
    """Decode a refresh token signed with the refresh secret."""
    claims = _decode(token, settings.refresh_secret, "Refresh token")
    if claims.get("type") != REFRESH:
        raise UnauthorizedError("Invalid refresh token")
    return claims
