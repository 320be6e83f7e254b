"""Background job modules for periodic maintenance tasks."""

from app.jobs.token_cleanup import purge_expired_refresh_tokens

__all__ = [
    "purge_expired_refresh_tokens",
]
