"""Process-wide service-role Supabase client."""

from __future__ import annotations

import logging
import threading

import httpx
from supabase.lib.client_options import SyncClientOptions

from app.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_client: Client | None = None
_http: httpx.Client | None = None


def _build_http_client() -> httpx.Client:
    max_connections = max(10, settings.supabase_http_max_connections)
    return httpx.Client(
        timeout=httpx.Timeout(max(1, settings.supabase_postgrest_timeout_seconds)),
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max(
                5, min(max_connections, settings.supabase_http_max_keepalive_connections)
            ),
        ),
    )


def get_service_client() -> Client:
    """Return the shared service-role client, creating it on first use.

    Sessions are issued by this API, so Supabase auth refresh and persistence
    stay off.
    """
    global _client, _http
    with _lock:
        if _client is None:
            timeout_seconds = max(1, settings.supabase_postgrest_timeout_seconds)
            _http = _build_http_client()
            _client = create_client(
                settings.supabase_url,
                settings.supabase_service_key,
                options=SyncClientOptions(
                    auto_refresh_token=False,
                    persist_session=False,
                    postgrest_client_timeout=timeout_seconds,
                    storage_client_timeout=timeout_seconds,
                    httpx_client=_http,
                ),
            )
        return _client


def close_service_client() -> None:
    """Release the pooled HTTP connections; the next call builds a new client."""
    global _client, _http
    with _lock:
        if _http is not None:
            _http.close()
            logger.info("Supabase HTTP pool closed")
        _client = None
        _http = None
