"""Service package exports with lazy loading."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "AuthService": "app.services.auth_service",
    "CommunityService": "app.services.community_service",
    "EventService": "app.services.event_service",
    "MembershipService": "app.services.membership_service",
    "ParticipationService": "app.services.participation_service",
    "RankingService": "app.services.ranking_service",
    "RideService": "app.services.ride_service",
    "SupabaseService": "app.services.common",
    "TrackService": "app.services.track_service",
}

__all__ = sorted(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_EXPORTS[name])
    return getattr(module, name)
