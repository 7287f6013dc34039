"""
Tests for the Redis and Supabase storage layers with mocked clients.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from nativeswap.exceptions import ConfigurationError, StorageError
from nativeswap.storage import Announcement, KVStore, SupabaseStore


class TestKVStore:
    @pytest.fixture
    def redis_client(self):
        return AsyncMock()

    @pytest.fixture
    def store(self, redis_client) -> KVStore:
        return KVStore(redis_client, key_prefix="test")

    def test_from_url_requires_url(self):
        with pytest.raises(ConfigurationError):
            KVStore.from_url(None)

    @pytest.mark.asyncio
    async def test_last_seen_round_trip_keys(self, store, redis_client):
        redis_client.get.return_value = "12"

        assert await store.get_last_seen_announcement_id(5) == 12
        redis_client.get.assert_awaited_once_with("test:user:5:last_seen_announcement")

        await store.set_last_seen_announcement_id(5, 13)
        redis_client.set.assert_awaited_once_with("test:user:5:last_seen_announcement", "13")

    @pytest.mark.asyncio
    async def test_missing_last_seen(self, store, redis_client):
        redis_client.get.return_value = None

        assert await store.get_last_seen_announcement_id(5) is None

    @pytest.mark.asyncio
    async def test_cached_token_json(self, store, redis_client):
        await store.set_cached_notification_token(5, "tok", "https://n.example")
        key, value = redis_client.set.await_args.args
        assert key == "test:user:5:notification"
        assert json.loads(value) == {"token": "tok", "url": "https://n.example"}

        redis_client.get.return_value = value
        assert await store.get_cached_notification_token(5) == {"token": "tok", "url": "https://n.example"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["{broken", json.dumps({"token": "tok"}), "", "123", json.dumps(["tok"])])
    async def test_unusable_cached_token(self, store, redis_client, raw):
        redis_client.get.return_value = raw

        assert await store.get_cached_notification_token(5) is None

    @pytest.mark.asyncio
    async def test_notification_slot_uses_nx_expiry(self, store, redis_client):
        redis_client.set.return_value = True
        assert await store.acquire_notification_slot(5, 30) is True
        redis_client.set.assert_awaited_once_with("test:user:5:notification_slot", "1", nx=True, ex=30)

        redis_client.set.return_value = None
        assert await store.acquire_notification_slot(5, 30) is False

    @pytest.mark.asyncio
    async def test_redis_errors_become_storage_errors(self, store, redis_client):
        redis_client.get.side_effect = RedisConnectionError("refused")

        with pytest.raises(StorageError):
            await store.get_last_seen_announcement_id(5)

    @pytest.mark.asyncio
    async def test_release_notification_slot(self, store, redis_client):
        await store.release_notification_slot(5)

        redis_client.delete.assert_awaited_once_with("test:user:5:notification_slot")

    @pytest.mark.asyncio
    async def test_remove_cached_token(self, store, redis_client):
        await store.remove_cached_notification_token(5)

        redis_client.delete.assert_awaited_once_with("test:user:5:notification")


def make_supabase(rows=None):
    """Supabase client whose query builder returns itself and ``rows`` on execute."""
    query = MagicMock()
    for method in ("select", "order", "limit", "eq", "upsert", "delete"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=rows)
    client = MagicMock()
    client.table.return_value = query
    return client, query


class TestSupabaseStore:
    def test_from_settings_requires_credentials(self):
        with pytest.raises(ConfigurationError):
            SupabaseStore.from_settings("https://db.example", None)

    @pytest.mark.asyncio
    async def test_announcements_newest_first(self):
        client, query = make_supabase([
            {"id": 2, "title": "Two", "text": "second", "cast_url": None, "created_at": "2024-12-02"},
            {"id": 1, "title": "One", "text": "first"},
        ])
        store = SupabaseStore(client)

        announcements = await store.get_announcements()

        assert [a.id for a in announcements] == [2, 1]
        assert announcements[1] == Announcement(id=1, title="One", text="first")
        client.table.assert_called_with("announcements")
        query.order.assert_called_with("id", desc=True)

    @pytest.mark.asyncio
    async def test_latest_announcement(self):
        client, query = make_supabase([{"id": 9, "title": "Nine", "text": "latest"}])
        store = SupabaseStore(client)

        latest = await store.get_latest_announcement()

        assert latest.id == 9
        query.limit.assert_called_with(1)

    @pytest.mark.asyncio
    async def test_latest_announcement_when_table_empty(self):
        client, _ = make_supabase([])

        assert await SupabaseStore(client).get_latest_announcement() is None

    @pytest.mark.asyncio
    async def test_notification_token_lookup(self):
        client, query = make_supabase([{"token": "tok", "url": "https://n.example"}])
        store = SupabaseStore(client, tokens_table="tokens")

        assert await store.get_notification_token(5) == {"token": "tok", "url": "https://n.example"}
        client.table.assert_called_with("tokens")
        query.eq.assert_called_with("fid", 5)

    @pytest.mark.asyncio
    async def test_save_token_upserts_on_fid(self):
        client, query = make_supabase([])
        store = SupabaseStore(client)

        await store.save_notification_token(5, "tok", "https://n.example")

        record = query.upsert.call_args.args[0]
        assert record["fid"] == 5
        assert record["token"] == "tok"
        assert query.upsert.call_args.kwargs == {"on_conflict": "fid"}

    @pytest.mark.asyncio
    async def test_failures_become_storage_errors(self):
        client, query = make_supabase([])
        query.execute.side_effect = RuntimeError("connection reset")

        with pytest.raises(StorageError):
            await SupabaseStore(client).remove_notification_token(5)
