"""Leaderboard schemas."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.user import UserIdentity


class LeaderboardEvent(BaseModel):
    """Event identity shown next to a ranked result."""

    id: str | None = None
    title: str | None = None
    event_date: datetime | None = None


class LeaderboardEntry(BaseModel):
    """Single ranked participation record."""

    id: str
    distance: float | None = None
    time: str | None = None
    rank: int
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: UserIdentity
    event: LeaderboardEvent


class LeaderboardResponse(BaseModel):
    """Leaderboard of one event or track."""

    scope: str
    scope_id: str
    entries: list[LeaderboardEntry]
