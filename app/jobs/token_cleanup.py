"""Expired refresh token purge job."""

from __future__ import annotations

import logging

from app.services.common import SupabaseService
from app.utils.supabase_client import get_service_client
from app.utils.time import now_utc

logger = logging.getLogger(__name__)


def delete_expired_refresh_tokens(db: SupabaseService) -> int:
    """Delete refresh tokens whose expiry has passed and return how many went."""
    query = (
        db.client.table("refresh_tokens")
        .delete()
        .lt("expires_at", now_utc().isoformat())
    )
    return len(db.execute(query, default=[]))


async def purge_expired_refresh_tokens() -> None:
    """Remove refresh tokens that can no longer be exchanged."""
    removed = delete_expired_refresh_tokens(SupabaseService(get_service_client()))
    logger.info("purge_expired_refresh_tokens removed %s tokens", removed)
