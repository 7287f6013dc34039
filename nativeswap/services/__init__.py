"""Notification and announcement pipelines built on the storage and client layers."""

from .announcement_service import AnnouncementCheckResult, AnnouncementService
from .notification_service import NotificationOutcome, NotificationService

__all__ = [
    "AnnouncementCheckResult",
    "AnnouncementService",
    "NotificationOutcome",
    "NotificationService",
]
