"""Identity-provider (Firebase) token verification."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials

from app.config import settings
from app.utils.errors import UnauthorizedError

logger = logging.getLogger(__name__)
_init_lock = threading.Lock()


@dataclass(frozen=True)
class VerifiedIdentity:
    """Subject of a verified identity-provider token."""

    uid: str
    phone: str | None = None
    email: str | None = None


def _load_service_account() -> dict[str, Any] | str:
    if settings.firebase_service_account:
        try:
            return json.loads(settings.firebase_service_account)
        except json.JSONDecodeError as exc:
            raise RuntimeError("FIREBASE_SERVICE_ACCOUNT is not valid JSON") from exc

    if settings.firebase_service_account_path:
        path = Path(settings.firebase_service_account_path).expanduser().resolve()
        if not path.is_file():
            raise RuntimeError(f"Firebase service account file not found: {path}")
        return str(path)

    raise RuntimeError(
        "Either FIREBASE_SERVICE_ACCOUNT (JSON string) or "
        "FIREBASE_SERVICE_ACCOUNT_PATH (file path) must be set"
    )


def get_firebase_app() -> firebase_admin.App:
    """Return the process-wide Firebase app, initializing it on first use."""
    with _init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            app = firebase_admin.initialize_app(credentials.Certificate(_load_service_account()))
            logger.info("Firebase Admin initialized")
            return app


class IdentityVerifier:
    """Verify identity-provider ID tokens (phone OTP or email/password sign-in)."""

    def verify(self, id_token: str) -> VerifiedIdentity:
        """Return the verified subject or raise UnauthorizedError."""
        app = get_firebase_app()
        try:
            decoded = firebase_auth.verify_id_token(id_token, app=app)
        except (ValueError, firebase_auth.InvalidIdTokenError) as exc:
            raise UnauthorizedError("Invalid or expired identity token") from exc
        except firebase_auth.CertificateFetchError as exc:
            logger.warning("Could not fetch identity-provider certificates: %s", exc)
            raise UnauthorizedError("Identity token could not be verified") from exc

        return VerifiedIdentity(
            uid=str(decoded["uid"]),
            phone=decoded.get("phone_number") or None,
            email=(decoded.get("email") or "").strip().lower() or None,
        )
