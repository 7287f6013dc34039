"""
Notification Service

Resolves a user's notification token, enforces the per-user send window and
prunes tokens the Farcaster client reports as invalid.
"""
import asyncio
import logging
from enum import Enum
from typing import Dict, Optional

from nativeswap.exceptions import NotificationDeliveryError, StorageError
from nativeswap.integrations.farcaster.notification_client import (
    FrameNotification,
    FrameNotificationClient,
    SendNotificationResult,
)
from nativeswap.storage.kv_store import KVStore
from nativeswap.storage.supabase_store import SupabaseStore

logger = logging.getLogger(__name__)


class NotificationOutcome(str, Enum):
    SENT = "sent"
    NO_TOKEN = "no_token"
    RATE_LIMITED = "rate_limited"
    INVALID_TOKEN = "invalid_token"
    FAILED = "failed"


class NotificationService:
    def __init__(
        self,
        kv: KVStore,
        db: SupabaseStore,
        client: FrameNotificationClient,
        rate_limit_seconds: int = 30,
    ):
        self.kv = kv
        self.db = db
        self.client = client
        self.rate_limit_seconds = rate_limit_seconds

    async def resolve_token(self, fid: int) -> Optional[Dict[str, str]]:
        """Cached token for ``fid``, re-filled from Supabase on a cache miss."""
        cached = await self.kv.get_cached_notification_token(fid)
        if cached:
            return cached

        stored = await self.db.get_notification_token(fid)
        if stored:
            await self.kv.set_cached_notification_token(fid, stored["token"], stored["url"])
        return stored

    async def save_token(self, fid: int, token: str, url: str) -> None:
        await self.db.save_notification_token(fid, token, url)
        await self.kv.set_cached_notification_token(fid, token, url)

    async def remove_token(self, fid: int) -> None:
        """Forget the user's token in both Supabase and Redis."""
        await asyncio.gather(
            self.db.remove_notification_token(fid),
            self.kv.remove_cached_notification_token(fid),
        )

    async def remove_invalid_token(self, fid: int, token: str) -> None:
        try:
            await self.remove_token(fid)
            logger.info(f"Removed invalid notification token {token[:8]}... for fid {fid}")
        except StorageError as e:
            logger.error(f"Failed to remove invalid token: {e}")

    async def deliver(self, fid: int, details: Dict[str, str], notification: FrameNotification) -> SendNotificationResult:
        """Send to the user's token and prune it when reported invalid."""
        result = await self.client.send(details["url"], notification, [details["token"]])
        for invalid_token in result.invalid_tokens:
            await self.remove_invalid_token(fid, invalid_token)
        return result

    async def send(
        self,
        fid: int,
        notification: FrameNotification,
        skip_rate_limit: bool = False,
    ) -> NotificationOutcome:
        details = await self.resolve_token(fid)
        if not details:
            logger.info(f"No notification token for fid {fid}")
            return NotificationOutcome.NO_TOKEN

        if not skip_rate_limit:
            if not await self.kv.acquire_notification_slot(fid, self.rate_limit_seconds):
                logger.info(f"Notification for fid {fid} suppressed by rate limit")
                return NotificationOutcome.RATE_LIMITED

        try:
            result = await self.deliver(fid, details, notification)
        except NotificationDeliveryError as e:
            logger.error(f"Failed to send notification to fid {fid}: {e}")
            outcome = NotificationOutcome.FAILED
        else:
            outcome = self._classify(result)

        if outcome == NotificationOutcome.FAILED and not skip_rate_limit:
            await self._release_slot(fid)
        return outcome

    @staticmethod
    def _classify(result: SendNotificationResult) -> NotificationOutcome:
        if result.delivered:
            return NotificationOutcome.SENT
        if result.rate_limited:
            return NotificationOutcome.RATE_LIMITED
        if result.invalid_tokens:
            return NotificationOutcome.INVALID_TOKEN
        return NotificationOutcome.FAILED

    async def _release_slot(self, fid: int) -> None:
        """Free the send window after a send that reached nobody."""
        try:
            await self.kv.release_notification_slot(fid)
        except StorageError as e:
            logger.error(f"Failed to release notification slot for fid {fid}: {e}")
