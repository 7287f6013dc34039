from .notification_client import FrameNotification, FrameNotificationClient, SendNotificationResult

__all__ = ["FrameNotification", "FrameNotificationClient", "SendNotificationResult"]
