"""Create or promote an admin user in Supabase."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Create an admin row in public.users or promote an existing user.",
    )
    parser.add_argument(
        "firebase_uid",
        type=str,
        help="Identity-provider uid of the admin account.",
    )
    parser.add_argument(
        "email",
        type=str,
        help="Email address of the admin account.",
    )
    parser.add_argument(
        "--full-name",
        type=str,
        default="Admin",
        help="Display name used when the user is created (default: Admin).",
    )
    parser.add_argument(
        "--phone",
        type=str,
        default=None,
        help="Optional phone number stored with a new user.",
    )
    return parser.parse_args()


def upsert_admin(
    firebase_uid: str,
    email: str,
    full_name: str,
    phone: str | None = None,
) -> tuple[dict[str, Any], bool]:
    """Promote the user matching ``firebase_uid`` or ``email``, or create one.

    Returns ``(user, created)``.
    """
    if not firebase_uid.strip():
        raise ValueError("firebase_uid must not be empty")
    email = email.strip().lower()
    if "@" not in email:
        raise ValueError("email must be a valid address")

    from app.services.common import SupabaseService
    from app.utils.roles import UserRole
    from app.utils.supabase_client import get_service_client

    db = SupabaseService(get_service_client())
    existing = db.find_one("users", {"firebase_uid": firebase_uid}) or db.find_one(
        "users", {"email": email}
    )

    if existing:
        rows = db.update(
            "users",
            {"id": existing["id"]},
            {"role": UserRole.ADMIN.value, "firebase_uid": firebase_uid, "is_verified": True},
        )
        return rows[0], False

    user = db.insert_one(
        "users",
        {
            "firebase_uid": firebase_uid,
            "email": email,
            "phone": phone,
            "full_name": full_name,
            "role": UserRole.ADMIN.value,
            "is_verified": True,
        },
    )
    return user, True


def main() -> None:
    """CLI entry point."""
    args = parse_args()
    user, created = upsert_admin(
        firebase_uid=args.firebase_uid,
        email=args.email,
        full_name=args.full_name,
        phone=args.phone,
    )
    verb = "Created" if created else "Promoted"
    print(f"{verb} admin user {user['id']} ({user.get('email')})")


if __name__ == "__main__":
    main()
