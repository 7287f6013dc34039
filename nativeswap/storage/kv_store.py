"""
Redis cache

Last-seen announcement cursors, cached notification tokens and per-user
notification rate-limit slots.
"""
import json
import logging
from typing import Dict, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from nativeswap.exceptions import ConfigurationError, StorageError

logger = logging.getLogger(__name__)


class KVStore:
    """Thin key/value layer over ``redis.asyncio``."""

    def __init__(self, client: "redis.Redis", key_prefix: str = "nativeswap"):
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: Optional[str], key_prefix: str = "nativeswap") -> "KVStore":
        if not url:
            raise ConfigurationError("REDIS_URL must be set")
        return cls(redis.from_url(url, decode_responses=True), key_prefix=key_prefix)

    def _key(self, fid: int, name: str) -> str:
        return f"{self.key_prefix}:user:{fid}:{name}"

    async def get_last_seen_announcement_id(self, fid: int) -> Optional[int]:
        try:
            value = await self.client.get(self._key(fid, "last_seen_announcement"))
        except RedisError as e:
            raise StorageError(f"Redis read failed: {e}") from e
        return int(value) if value is not None else None

    async def set_last_seen_announcement_id(self, fid: int, announcement_id: int) -> None:
        try:
            await self.client.set(self._key(fid, "last_seen_announcement"), str(announcement_id))
        except RedisError as e:
            raise StorageError(f"Redis write failed: {e}") from e

    async def get_cached_notification_token(self, fid: int) -> Optional[Dict[str, str]]:
        try:
            value = await self.client.get(self._key(fid, "notification"))
        except RedisError as e:
            raise StorageError(f"Redis read failed: {e}") from e
        if not value:
            return None
        try:
            details = json.loads(value)
        except json.JSONDecodeError:
            details = None
        if not isinstance(details, dict):
            logger.warning(f"Discarding malformed cached notification token for fid {fid}")
            return None
        if not details.get("token") or not details.get("url"):
            return None
        return {"token": details["token"], "url": details["url"]}

    async def set_cached_notification_token(self, fid: int, token: str, url: str) -> None:
        try:
            await self.client.set(self._key(fid, "notification"), json.dumps({"token": token, "url": url}))
        except RedisError as e:
            raise StorageError(f"Redis write failed: {e}") from e

    async def remove_cached_notification_token(self, fid: int) -> None:
        try:
            await self.client.delete(self._key(fid, "notification"))
        except RedisError as e:
            raise StorageError(f"Redis delete failed: {e}") from e

    async def acquire_notification_slot(self, fid: int, window_seconds: int) -> bool:
        """True when no notification was sent to ``fid`` within the window."""
        try:
            acquired = await self.client.set(
                self._key(fid, "notification_slot"), "1", nx=True, ex=window_seconds
            )
        except RedisError as e:
            raise StorageError(f"Redis write failed: {e}") from e
        return bool(acquired)

    async def release_notification_slot(self, fid: int) -> None:
        try:
            await self.client.delete(self._key(fid, "notification_slot"))
        except RedisError as e:
            raise StorageError(f"Redis delete failed: {e}") from e

    async def close(self):
        await self.client.aclose()
