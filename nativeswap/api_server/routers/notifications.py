"""
Notifications router.

Direct notification sends requested by the frame (welcome, swap success).
Clients may bypass the per-user send window with ``X-Skip-Rate-Limit: true``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse

from nativeswap.config import AppConfig
from nativeswap.exceptions import StorageError
from nativeswap.integrations.farcaster.notification_client import FrameNotification
from nativeswap.services import NotificationOutcome, NotificationService

from ..dependencies import get_notification_service, get_settings
from ..schemas import NotificationRequest, NotificationResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.post("", response_model=NotificationResponse)
async def send_notification(
    request: NotificationRequest,
    x_skip_rate_limit: Optional[str] = Header(None),
    service: NotificationService = Depends(get_notification_service),
    settings: AppConfig = Depends(get_settings),
):
    """Send a notification to a single user."""
    notification = FrameNotification(
        notification_id=request.notificationId,
        title=request.title,
        body=request.body,
        target_url=request.targetUrl or settings.frame.public_url,
    )
    skip_rate_limit = (x_skip_rate_limit or "").lower() == "true"

    try:
        outcome = await service.send(request.fid, notification, skip_rate_limit=skip_rate_limit)
    except StorageError as e:
        logger.error(f"Failed to send notification for fid {request.fid}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    response = {"success": outcome == NotificationOutcome.SENT, "result": outcome.value}
    if outcome == NotificationOutcome.RATE_LIMITED:
        return JSONResponse(response, status_code=429)
    return response
