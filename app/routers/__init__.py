"""API router package."""

from app.routers import (
    auth,
    communities,
    events,
    rides,
    tracks,
)

__all__ = [
    "auth",
    "communities",
    "events",
    "rides",
    "tracks",
]
