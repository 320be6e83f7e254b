"""Error mapping in the shared data access layer."""

from __future__ import annotations

import httpx
import pytest

from app.services.common import SupabaseService
from app.utils.errors import StorageError
from tests.fakes import FakeQuery, FakeSupabase


def _drop_connection(self):
    raise httpx.ConnectError("connection reset")


def test_count_transport_failure_is_storage_error(fake_db: FakeSupabase, monkeypatch) -> None:
    monkeypatch.setattr(FakeQuery, "execute", _drop_connection)

    with pytest.raises(StorageError):
        SupabaseService(fake_db).count("communities")


def test_select_transport_failure_is_storage_error(fake_db: FakeSupabase, monkeypatch) -> None:
    monkeypatch.setattr(FakeQuery, "execute", _drop_connection)

    with pytest.raises(StorageError):
        SupabaseService(fake_db).select_many("communities")
