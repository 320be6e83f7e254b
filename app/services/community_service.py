"""Community catalogue and gallery service."""

from __future__ import annotations

from typing import Any

from app.services.common import SupabaseService
from app.services.membership_service import MembershipService
from app.utils.errors import InvalidInputError, NotFoundError
from app.utils.pagination import pagination_meta
from app.utils.time import now_utc
from supabase import Client


class CommunityService:
    """Community creation, lookup, filtering, and gallery management."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)
        self.memberships = MembershipService(client)

    def create(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a community with an empty members list."""
        payload = dict(data)
        payload.update({"created_by": user_id, "members": [], "member_count": 0})
        return self.db.insert_one("communities", payload)

    def list(
        self,
        filters: dict[str, Any],
        search: str | None = None,
        category: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict[str, Any]:
        """Return one page of communities, newest first, with creators resolved."""
        cleaned = {key: value for key, value in filters.items() if value is not None}
        term = (search or "").strip()

        def refine(query):
            if category:
                query = query.contains("category", [category])
            if term:
                query = query.ilike("title", f"%{term}%")
            return query

        rows, total = self.db.select_page(
            "communities",
            page,
            limit,
            filters=cleaned,
            order=[("created_at", True)],
            refine=refine,
        )
        return {
            "communities": self.db.resolve_user_field(rows),
            "pagination": pagination_meta(page, limit, total),
        }

    def get(self, community_id: str) -> dict[str, Any]:
        """Return one community with creator and members resolved."""
        community = self.db.select_one(
            "communities", {"id": community_id}, not_found_label="Community"
        )
        summary = self.memberships.community_summary(community_id)
        payload = dict(community)
        payload["created_by"] = summary["created_by"]
        payload["members"] = summary["members"]
        return payload

    def update(self, community_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial update; membership fields are not writable here."""
        if not data:
            raise InvalidInputError("No fields to update")
        payload = {k: v for k, v in data.items() if k not in {"members", "member_count"}}
        payload["updated_at"] = now_utc().isoformat()
        rows = self.db.update("communities", {"id": community_id}, payload)
        if not rows:
            raise NotFoundError("Community")
        return self.get(community_id)

    def delete(self, community_id: str) -> None:
        """Delete a community."""
        rows = self.db.delete("communities", {"id": community_id})
        if not rows:
            raise NotFoundError("Community")

    def gallery(self, community_id: str) -> list[str]:
        """Return the gallery image URLs."""
        community = self.db.select_one(
            "communities", {"id": community_id}, columns="id,gallery", not_found_label="Community"
        )
        return list(community.get("gallery") or [])

    def add_gallery_images(self, community_id: str, images: list[str]) -> list[str]:
        """Append images that are not already in the gallery."""
        gallery = self.gallery(community_id)
        for image in images:
            if image not in gallery:
                gallery.append(image)
        return self._save_gallery(community_id, gallery)

    def remove_gallery_images(self, community_id: str, images: list[str]) -> list[str]:
        """Remove the given images from the gallery."""
        to_remove = set(images)
        gallery = [image for image in self.gallery(community_id) if image not in to_remove]
        return self._save_gallery(community_id, gallery)

    def _save_gallery(self, community_id: str, gallery: list[str]) -> list[str]:
        rows = self.db.update(
            "communities",
            {"id": community_id},
            {"gallery": gallery, "updated_at": now_utc().isoformat()},
        )
        if not rows:
            raise NotFoundError("Community")
        return list(rows[0].get("gallery") or [])
