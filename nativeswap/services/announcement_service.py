"""
Announcement Service

Compares a user's last-seen announcement against the newest one and pushes a
notification when the user is behind. The cursor only advances after a
successful delivery.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from nativeswap.exceptions import NotificationDeliveryError, NotificationRateLimitedError
from nativeswap.integrations.farcaster.notification_client import FrameNotification
from nativeswap.storage.kv_store import KVStore
from nativeswap.storage.supabase_store import Announcement, SupabaseStore

from .notification_service import NotificationService

logger = logging.getLogger(__name__)


@dataclass
class AnnouncementCheckResult:
    last_seen_id: Optional[int]
    latest_announcement: Optional[Announcement]
    notified: bool = False
    rate_limited: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lastSeenId": self.last_seen_id,
            "latestAnnouncement": self.latest_announcement.to_dict() if self.latest_announcement else None,
        }


class AnnouncementService:
    def __init__(
        self,
        kv: KVStore,
        db: SupabaseStore,
        notifications: NotificationService,
        target_url: str,
    ):
        self.kv = kv
        self.db = db
        self.notifications = notifications
        self.target_url = target_url

    async def list_announcements(self) -> List[Announcement]:
        return await self.db.get_announcements()

    async def latest_announcements(self, limit: int = 5) -> List[Announcement]:
        return await self.db.get_latest_announcements(limit)

    async def send_announcement_notification(self, fid: int, announcement: Announcement) -> bool:
        """
        Notify ``fid`` about ``announcement``.

        Returns True only when the client accepted the token.

        Raises:
            NotificationRateLimitedError: the client rate limited every token
        """
        details = await self.notifications.resolve_token(fid)
        if not details:
            return False

        notification = FrameNotification(
            notification_id=f"announcement:{announcement.id}",
            title=announcement.title,
            body=announcement.text,
            target_url=self.target_url,
        )

        try:
            result = await self.notifications.deliver(fid, details, notification)
        except NotificationDeliveryError as e:
            logger.error(f"Failed to send announcement notification: {e}")
            return False

        if result.delivered:
            return True
        if result.rate_limited:
            raise NotificationRateLimitedError("Rate limited")
        return False

    async def check_and_notify(self, fid: int) -> AnnouncementCheckResult:
        """Notify ``fid`` about the newest announcement if they have not seen it."""
        last_seen_id = await self.kv.get_last_seen_announcement_id(fid)
        latest = await self.db.get_latest_announcement()
        result = AnnouncementCheckResult(last_seen_id=last_seen_id, latest_announcement=latest)

        if latest is None:
            return result

        if last_seen_id is None or last_seen_id < latest.id:
            try:
                result.notified = await self.send_announcement_notification(fid, latest)
            except NotificationRateLimitedError:
                logger.warning(f"Announcement {latest.id} for fid {fid} rate limited")
                result.rate_limited = True
                return result
            if result.notified:
                await self.kv.set_last_seen_announcement_id(fid, latest.id)
                logger.info(f"fid {fid} notified about announcement {latest.id}")

        return result
