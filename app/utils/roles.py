"""Platform roles and the capabilities each one grants."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Closed set of platform-level roles."""

    ADMIN = "Admin"
    VENDOR = "Vendor"
    MEMBER = "Member"
    GUEST = "Guest"

    @classmethod
    def parse(cls, value: str | None) -> UserRole:
        """Map a stored role string to a role, treating unknown values as Guest."""
        for role in cls:
            if value == role.value:
                return role
        return cls.GUEST


class Capability(str, Enum):
    """Actions guarded by role."""

    MANAGE_CONTENT = "manage_content"
    MANAGE_RIDES = "manage_rides"
    PARTICIPATE = "participate"


_GRANTS: dict[Capability, frozenset[UserRole]] = {
    Capability.MANAGE_CONTENT: frozenset({UserRole.ADMIN}),
    Capability.MANAGE_RIDES: frozenset({UserRole.ADMIN, UserRole.VENDOR}),
    Capability.PARTICIPATE: frozenset({UserRole.ADMIN, UserRole.VENDOR, UserRole.MEMBER}),
}


def has_capability(role: UserRole, capability: Capability) -> bool:
    """Return whether ``role`` is allowed to perform ``capability``."""
    return role in _GRANTS[capability]


# Community-scoped roles stored on memberships.
MEMBERSHIP_ROLES = ("member", "moderator", "admin")
