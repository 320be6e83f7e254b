"""Shared Supabase data access helpers."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

import httpx
from postgrest import APIError

from app.config import settings
from app.utils.errors import (
    AppError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    StorageError,
)
from app.utils.pagination import paginate
from supabase import Client

logger = logging.getLogger(__name__)

USER_IDENTITY_COLUMNS = "id,full_name,email"
UNIQUE_VIOLATION = "23505"
INVALID_INPUT_CODES = {"22P02", "22007", "22008", "23502", "23514", "PGRST100"}

_user_cache: dict[str, tuple[float, dict[str, Any]]] = {}
_cache_lock = threading.Lock()


def _cache_get(cache: dict[Any, tuple[float, Any]], key: Any) -> Any | None:
    now = time.monotonic()
    with _cache_lock:
        entry = cache.get(key)
        if not entry:
            return None
        expires_at, value = entry
        if expires_at <= now:
            cache.pop(key, None)
            return None
        return value


def _cache_set(
    cache: dict[Any, tuple[float, Any]],
    key: Any,
    value: Any,
    ttl_seconds: int,
) -> None:
    if ttl_seconds <= 0:
        return

    with _cache_lock:
        max_entries = max(100, settings.data_cache_max_entries)
        if len(cache) >= max_entries:
            oldest_key = next(iter(cache))
            cache.pop(oldest_key, None)
        cache[key] = (time.monotonic() + ttl_seconds, value)


def invalidate_user_cache(user_id: str | None = None) -> None:
    """Drop one cached user (or all of them) after a profile write."""
    with _cache_lock:
        if user_id is None:
            _user_cache.clear()
        else:
            _user_cache.pop(str(user_id), None)


def map_api_error(exc: APIError) -> AppError:
    """Translate a PostgREST error into the API error taxonomy."""
    code = str(getattr(exc, "code", "") or "")
    message = str(getattr(exc, "message", None) or "Database request failed")
    if code == UNIQUE_VIOLATION:
        return ConflictError("Record already exists", code="DUPLICATE")
    if code in INVALID_INPUT_CODES:
        return InvalidInputError(message)
    logger.error("Supabase request failed code=%s message=%s", code, message)
    return StorageError()


def _apply_filters(query, filters: dict[str, Any] | None):
    for key, value in (filters or {}).items():
        if isinstance(value, list | tuple | set | frozenset):
            query = query.in_(key, list(value))
        elif value is None:
            query = query.is_(key, "null")
        else:
            query = query.eq(key, value)
    return query


class SupabaseService:
    """Thin helper wrapper around a Supabase client."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def execute(self, query, default: Any = None) -> Any:
        """Execute a Supabase query and normalize API errors."""
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            raise map_api_error(exc) from exc
        except httpx.HTTPError as exc:
            logger.error("Supabase transport failure: %s", exc)
            raise StorageError() from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        threshold_ms = settings.slow_query_log_threshold_ms
        if threshold_ms > 0 and elapsed_ms >= threshold_ms:
            logger.warning("Slow Supabase query %.1fms", elapsed_ms)
        data = response.data
        return default if data is None and default is not None else data

    def select_one(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
        not_found_label: str | None = None,
    ) -> dict[str, Any]:
        """Select a single row and raise NotFoundError when missing."""
        query = _apply_filters(self.client.table(table).select(columns), filters)
        rows = self.execute(query.limit(1), default=[])
        if not rows:
            label = not_found_label or table
            raise NotFoundError(label)
        return rows[0]

    def find_one(
        self,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Select a single row or return None."""
        rows = self.select_many(table, filters=filters, columns=columns, limit=1)
        return rows[0] if rows else None

    def select_many(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select many rows from a table with optional filters and paging."""
        query = _apply_filters(self.client.table(table).select(columns), filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return self.execute(query, default=[])

    def select_page(
        self,
        table: str,
        page: int,
        limit: int,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order: list[tuple[str, bool]] | None = None,
        refine: Callable[[Any], Any] | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Return one 1-based page of rows plus the total matching count.

        ``order`` is a list of ``(column, descending)`` pairs; ``refine`` adds
        non-equality filters to both the page and the count query.
        """
        offset, limit = paginate(page, limit)
        query = _apply_filters(self.client.table(table).select(columns), filters)
        if refine:
            query = refine(query)
        for column, descending in order or []:
            query = query.order(column, desc=descending)
        rows = self.execute(query.offset(offset).limit(limit), default=[])
        return rows, self.count(table, filters, refine=refine)

    def count(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        refine: Callable[[Any], Any] | None = None,
    ) -> int:
        """Count rows in a table with optional equality filters."""
        query = _apply_filters(
            self.client.table(table).select("*", count="exact", head=True),
            filters,
        )
        if refine:
            query = refine(query)
        try:
            response = query.execute()
        except APIError as exc:
            raise map_api_error(exc) from exc
        except httpx.HTTPError as exc:
            logger.error("Supabase transport failure: %s", exc)
            raise StorageError() from exc
        return response.count or 0

    def insert_one(self, table: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return the created object."""
        rows = self.execute(self.client.table(table).insert(payload), default=[])
        if not rows:
            raise StorageError(f"Failed to insert into {table}")
        return rows[0]

    def update(
        self,
        table: str,
        filters: dict[str, Any],
        payload: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Update rows matching every filter and return the updated rows.

        Extra filters make the write conditional: no row is returned when the
        stored values no longer match.
        """
        query = _apply_filters(self.client.table(table).update(payload), filters)
        return self.execute(query, default=[])

    def delete(self, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """Delete rows by equality filters and return removed rows."""
        query = _apply_filters(self.client.table(table).delete(), filters)
        return self.execute(query, default=[])

    def rpc(self, function: str, params: dict[str, Any]) -> Any:
        """Call a stored procedure and return its data."""
        return self.execute(self.client.rpc(function, params), default=[])

    def get_user(self, user_id: str) -> dict[str, Any]:
        """Return a user record."""
        cache_key = str(user_id)
        cached_user = _cache_get(_user_cache, cache_key)
        if cached_user is not None:
            return dict(cached_user)

        user = self.select_one("users", {"id": user_id}, not_found_label="User")
        _cache_set(_user_cache, cache_key, dict(user), settings.user_cache_ttl_seconds)
        return user

    def get_users_map(self, user_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Fetch multiple users and return an id-keyed mapping."""
        ids = list({str(uid) for uid in user_ids if uid})
        if not ids:
            return {}

        result: dict[str, dict[str, Any]] = {}
        missing_ids: list[str] = []
        for user_id in ids:
            cached_user = _cache_get(_user_cache, user_id)
            if cached_user is None:
                missing_ids.append(user_id)
                continue
            result[user_id] = dict(cached_user)

        if missing_ids:
            rows = self.execute(
                self.client.table("users").select("*").in_("id", missing_ids),
                default=[],
            )
            for row in rows:
                user_key = str(row["id"])
                user_payload = dict(row)
                result[user_key] = user_payload
                _cache_set(_user_cache, user_key, user_payload, settings.user_cache_ttl_seconds)

        return result

    def resolve_user_field(
        self,
        rows: list[dict[str, Any]],
        field: str = "created_by",
    ) -> list[dict[str, Any]]:
        """Replace a user-id column with the referenced user identity."""
        users = self.get_users_map([row.get(field) for row in rows])
        resolved = []
        for row in rows:
            payload = dict(row)
            payload[field] = user_identity(users.get(str(row.get(field))))
            resolved.append(payload)
        return resolved

    def get_rows_map(
        self,
        table: str,
        ids: Iterable[str],
        columns: str = "*",
    ) -> dict[str, dict[str, Any]]:
        """Fetch rows of ``table`` by id and return an id-keyed mapping."""
        unique_ids = sorted({str(value) for value in ids if value})
        if not unique_ids:
            return {}
        rows = self.execute(
            self.client.table(table).select(columns).in_("id", unique_ids),
            default=[],
        )
        return {str(row["id"]): row for row in rows}


def user_identity(user: dict[str, Any] | None) -> dict[str, Any]:
    """Project a user row to the public identity subset (empty when missing)."""
    if not user:
        return {}
    return {key: user.get(key) for key in USER_IDENTITY_COLUMNS.split(",")}


def map_users_on_field(
    rows: list[dict[str, Any]],
    users: dict[str, dict[str, Any]],
    user_key: str = "user_id",
    out_key: str = "user",
) -> list[dict[str, Any]]:
    """Attach user identities to rows based on ``user_key``."""
    enriched: list[dict[str, Any]] = []
    for row in rows:
        payload = dict(row)
        payload[out_key] = user_identity(users.get(str(row[user_key])))
        enriched.append(payload)
    return enriched
