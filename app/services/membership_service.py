"""Community membership state machine.

A user's relationship to a community lives in one ``community_memberships``
row per (user, community) pair. Rows are never deleted; their status moves
between ``active``, ``inactive`` and ``banned``. The community row keeps a
denormalized ``members`` list and ``member_count`` that must list exactly the
users whose membership is ``active``.

Every status write is conditional on the status that was read, so two racing
toggles cannot both succeed; the loser gets a ConflictError. The members list
is only touched through the ``community_add_member`` /
``community_remove_member`` procedures, each a single UPDATE that also
rewrites ``member_count``. Status write and list update are two statements:
a request aborted between them is not rolled back.
"""

from __future__ import annotations

import logging
from typing import Any

from app.config import settings
from app.services.common import (
    SupabaseService,
    map_users_on_field,
    user_identity,
)
from app.utils.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from app.utils.pagination import page_count, paginate
from app.utils.roles import MEMBERSHIP_ROLES
from app.utils.time import now_utc
from supabase import Client

logger = logging.getLogger(__name__)

MEMBERSHIPS = "community_memberships"
ACTIVE = "active"
INACTIVE = "inactive"
BANNED = "banned"
STATUSES = (ACTIVE, INACTIVE, BANNED)

COMMUNITY_SUMMARY_COLUMNS = (
    "id,title,description,type,location,image,logo,members,member_count,"
    "is_active,created_by"
)
COMMUNITY_CARD_COLUMNS = "id,title,description,type,location,image,logo,member_count,is_active"


class MembershipService:
    """Join/leave/ban transitions and membership listings."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def _get_community(self, community_id: str, columns: str = "id") -> dict[str, Any]:
        return self.db.select_one(
            "communities", {"id": community_id}, columns=columns, not_found_label="Community"
        )

    def _find(self, user_id: str, community_id: str) -> dict[str, Any] | None:
        return self.db.find_one(MEMBERSHIPS, {"user_id": user_id, "community_id": community_id})

    def _create(self, user_id: str, community_id: str, status: str) -> dict[str, Any]:
        now = now_utc().isoformat()
        return self.db.insert_one(
            MEMBERSHIPS,
            {
                "user_id": user_id,
                "community_id": community_id,
                "role": "member",
                "status": status,
                "joined_at": now,
            },
        )

    def _transition(self, membership: dict[str, Any], to_status: str) -> dict[str, Any]:
        rows = self.db.update(
            MEMBERSHIPS,
            {"id": membership["id"], "status": membership["status"]},
            {"status": to_status, "updated_at": now_utc().isoformat()},
        )
        if not rows:
            raise ConflictError(
                "Membership was changed by another request",
                code="MEMBERSHIP_CHANGED",
            )
        logger.info(
            "membership %s %s -> %s",
            membership["id"],
            membership["status"],
            to_status,
        )
        return rows[0]

    def _add_to_members(self, community_id: str, user_id: str) -> None:
        self.db.rpc(
            "community_add_member",
            {"p_community_id": community_id, "p_user_id": user_id},
        )

    def _remove_from_members(self, community_id: str, user_id: str) -> None:
        self.db.rpc(
            "community_remove_member",
            {"p_community_id": community_id, "p_user_id": user_id},
        )

    def _with_user(self, membership: dict[str, Any], **extra: Any) -> dict[str, Any]:
        payload = dict(membership)
        users = self.db.get_users_map([membership["user_id"]])
        payload["user"] = user_identity(users.get(str(membership["user_id"])))
        payload.update(extra)
        return payload

    def join_community(self, user_id: str, community_id: str) -> dict[str, Any]:
        """Join a community, or toggle an existing membership.

        No membership: create an active one. Inactive: reactivate. Active:
        deactivate when ``membership_join_toggles`` is on, otherwise leave it
        untouched. Banned: ForbiddenError.
        """
        self._get_community(community_id)
        existing = self._find(user_id, community_id)

        if existing and existing["status"] == BANNED:
            raise ForbiddenError("You are banned from this community")

        if existing and existing["status"] == ACTIVE:
            if not settings.membership_join_toggles:
                return self._with_user(existing, action="unchanged")
            membership = self._transition(existing, INACTIVE)
            self._remove_from_members(community_id, user_id)
            return self._with_user(membership, action="left")

        if existing is None:
            membership = self._create(user_id, community_id, ACTIVE)
            action = "joined"
        else:
            membership = self._transition(existing, ACTIVE)
            action = "rejoined"

        self._add_to_members(community_id, user_id)
        return self._with_user(membership, action=action)

    def leave_community(self, user_id: str, community_id: str) -> dict[str, Any]:
        """Deactivate a membership; already-inactive memberships are left as is."""
        membership = self._find(user_id, community_id)
        if membership is None:
            raise NotFoundError("Membership")

        if membership["status"] == BANNED:
            raise ForbiddenError("Banned users cannot leave the community")

        if membership["status"] == ACTIVE:
            membership = self._transition(membership, INACTIVE)
            self._remove_from_members(community_id, user_id)

        return {
            "membership": self._with_user(membership),
            "community": self.community_summary(community_id),
        }

    def community_summary(self, community_id: str) -> dict[str, Any]:
        """Return selected community fields with creator and members resolved."""
        community = self._get_community(community_id, columns=COMMUNITY_SUMMARY_COLUMNS)
        member_ids = [str(member_id) for member_id in community.get("members") or []]
        creator_id = community.get("created_by")
        users = self.db.get_users_map([*member_ids, creator_id] if creator_id else member_ids)

        payload = dict(community)
        payload["created_by"] = user_identity(users.get(str(creator_id)))
        payload["members"] = [
            user_identity(users[member_id]) for member_id in member_ids if member_id in users
        ]
        return payload

    def get_community_members(
        self,
        community_id: str,
        page: int = 1,
        limit: int = 10,
        status: str | None = ACTIVE,
    ) -> dict[str, Any]:
        """Return one page of memberships, newest first, with users resolved.

        ``status=None`` lists every status.
        """
        if status is not None and status not in STATUSES:
            raise InvalidInputError(f"status must be one of {', '.join(STATUSES)}")
        offset, limit = paginate(page, limit)
        self._get_community(community_id, columns="id")

        filters: dict[str, Any] = {"community_id": community_id}
        if status is not None:
            filters["status"] = status

        rows = self.db.select_many(
            MEMBERSHIPS,
            filters=filters,
            order_by="joined_at",
            descending=True,
            offset=offset,
            limit=limit,
        )
        total = self.db.count(MEMBERSHIPS, filters)
        users = self.db.get_users_map([row["user_id"] for row in rows])
        return {
            "members": map_users_on_field(rows, users),
            "total_members": total,
            "current_page": page,
            "pages": page_count(total, limit),
        }

    def get_user_communities(self, user_id: str) -> list[dict[str, Any]]:
        """Return the user's active memberships with community cards attached."""
        rows = self.db.select_many(
            MEMBERSHIPS,
            filters={"user_id": user_id, "status": ACTIVE},
            order_by="joined_at",
            descending=True,
        )
        communities = self.db.get_rows_map(
            "communities",
            [row["community_id"] for row in rows],
            columns=COMMUNITY_CARD_COLUMNS,
        )
        result = []
        for row in rows:
            payload = dict(row)
            payload["community"] = communities.get(str(row["community_id"]), {})
            result.append(payload)
        return result

    def get_banned_members(self, community_id: str) -> list[dict[str, Any]]:
        """Return banned memberships for a community."""
        self._get_community(community_id, columns="id")
        rows = self.db.select_many(
            MEMBERSHIPS,
            filters={"community_id": community_id, "status": BANNED},
            order_by="updated_at",
            descending=True,
        )
        users = self.db.get_users_map([row["user_id"] for row in rows])
        return map_users_on_field(rows, users)

    def is_member(self, user_id: str, community_id: str) -> bool:
        """Return True iff an active membership exists."""
        return (
            self.db.find_one(
                MEMBERSHIPS,
                {"user_id": user_id, "community_id": community_id, "status": ACTIVE},
                columns="id",
            )
            is not None
        )

    def set_banned(self, community_id: str, user_id: str, banned: bool) -> dict[str, Any]:
        """Ban or unban a user. Administrative only.

        Banning removes the user from the members list. Unbanning leaves the
        membership inactive; the user has to join again.
        """
        self._get_community(community_id, columns="id")
        self.db.get_user(user_id)
        existing = self._find(user_id, community_id)

        if banned:
            if existing is None:
                membership = self._create(user_id, community_id, BANNED)
            elif existing["status"] == BANNED:
                membership = existing
            else:
                membership = self._transition(existing, BANNED)
            self._remove_from_members(community_id, user_id)
            return self._with_user(membership)

        if existing is None or existing["status"] != BANNED:
            raise ConflictError("User is not banned from this community")
        return self._with_user(self._transition(existing, INACTIVE))

    def update_role(self, community_id: str, user_id: str, role: str) -> dict[str, Any]:
        """Change the community-scoped role of an existing membership."""
        if role not in MEMBERSHIP_ROLES:
            raise InvalidInputError(f"role must be one of {', '.join(MEMBERSHIP_ROLES)}")
        membership = self._find(user_id, community_id)
        if membership is None:
            raise NotFoundError("Membership")

        rows = self.db.update(
            MEMBERSHIPS,
            {"id": membership["id"]},
            {"role": role, "updated_at": now_utc().isoformat()},
        )
        if not rows:
            raise NotFoundError("Membership")
        return self._with_user(rows[0])
