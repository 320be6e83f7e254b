"""APScheduler setup and job registration."""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import settings
from app.jobs.token_cleanup import purge_expired_refresh_tokens

scheduler = AsyncIOScheduler(timezone=settings.timezone)


def register_jobs() -> None:
    """Register all periodic jobs if not already present."""
    if scheduler.get_job("purge_expired_refresh_tokens") is None:
        scheduler.add_job(
            purge_expired_refresh_tokens,
            IntervalTrigger(
                minutes=max(1, settings.refresh_token_purge_interval_minutes),
                timezone=settings.timezone,
            ),
            id="purge_expired_refresh_tokens",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
