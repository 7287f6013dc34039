"""
Supabase persistence

Reads announcements and keeps the per-user notification tokens handed out by
Farcaster clients. supabase-py is synchronous, so calls run in a worker
thread to keep the event loop free.
"""
import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from nativeswap.exceptions import ConfigurationError, StorageError

logger = logging.getLogger(__name__)


@dataclass
class Announcement:
    id: int
    title: str
    text: str
    cast_url: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Announcement":
        return cls(
            id=int(row["id"]),
            title=row.get("title") or "",
            text=row.get("text") or "",
            cast_url=row.get("cast_url"),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SupabaseStore:
    """Table access for announcements and notification tokens."""

    def __init__(
        self,
        client: Client,
        announcements_table: str = "announcements",
        tokens_table: str = "notification_tokens",
    ):
        self.client = client
        self.announcements_table = announcements_table
        self.tokens_table = tokens_table

    @classmethod
    def from_settings(cls, url: Optional[str], key: Optional[str], **kwargs) -> "SupabaseStore":
        if not url or not key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set")
        return cls(create_client(url, key), **kwargs)

    async def _execute(self, description: str, build_query):
        try:
            return await asyncio.to_thread(lambda: build_query().execute())
        except Exception as e:
            logger.error(f"Supabase {description} failed: {e}")
            raise StorageError(f"Supabase {description} failed: {e}") from e

    async def get_announcements(self) -> List[Announcement]:
        """All announcements, newest first."""
        response = await self._execute(
            "announcement listing",
            lambda: self.client.table(self.announcements_table).select("*").order("id", desc=True),
        )
        return [Announcement.from_row(row) for row in response.data or []]

    async def get_latest_announcements(self, limit: int = 5) -> List[Announcement]:
        response = await self._execute(
            "latest announcements lookup",
            lambda: self.client.table(self.announcements_table).select("*").order("id", desc=True).limit(limit),
        )
        return [Announcement.from_row(row) for row in response.data or []]

    async def get_latest_announcement(self) -> Optional[Announcement]:
        latest = await self.get_latest_announcements(limit=1)
        return latest[0] if latest else None

    async def get_notification_token(self, fid: int) -> Optional[Dict[str, str]]:
        response = await self._execute(
            "notification token lookup",
            lambda: self.client.table(self.tokens_table).select("token,url").eq("fid", fid).limit(1),
        )
        if not response.data:
            return None
        row = response.data[0]
        return {"token": row["token"], "url": row["url"]}

    async def save_notification_token(self, fid: int, token: str, url: str) -> None:
        record = {
            "fid": fid,
            "token": token,
            "url": url,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        await self._execute(
            "notification token upsert",
            lambda: self.client.table(self.tokens_table).upsert(record, on_conflict="fid"),
        )
        logger.info(f"Stored notification token for fid {fid}")

    async def remove_notification_token(self, fid: int) -> None:
        await self._execute(
            "notification token removal",
            lambda: self.client.table(self.tokens_table).delete().eq("fid", fid),
        )
        logger.info(f"Removed notification token for fid {fid}")
