"""
Frame Webhook Handler

Handles the Frames v2 events Farcaster clients post to the frame's webhook
URL: frame added/removed and notifications enabled/disabled. Each event
arrives wrapped in a JSON Farcaster Signature envelope.
"""

import base64
import binascii
import json
import logging
import time
from typing import Any, Dict, Tuple

from fastapi import HTTPException, Request

from nativeswap.exceptions import StorageError, WebhookVerificationError
from nativeswap.services.notification_service import NotificationService

from .notification_client import FrameNotification

logger = logging.getLogger(__name__)


def _decode_segment(segment: str) -> Dict[str, Any]:
    padded = segment + "=" * (-len(segment) % 4)
    try:
        decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise WebhookVerificationError(f"Invalid envelope segment: {e}") from e
    if not isinstance(decoded, dict):
        raise WebhookVerificationError("Envelope segment must be a JSON object")
    return decoded


def decode_envelope(body: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
    """
    Decode a JSON Farcaster Signature envelope.

    Returns:
        (fid, payload) where payload holds the event and its details

    Raises:
        WebhookVerificationError: if the envelope is malformed
    """
    if not isinstance(body, dict):
        raise WebhookVerificationError("Envelope must be a JSON object")
    for part in ("header", "payload", "signature"):
        if not isinstance(body.get(part), str) or not body[part]:
            raise WebhookVerificationError(f"Envelope is missing '{part}'")

    header = _decode_segment(body["header"])
    payload = _decode_segment(body["payload"])

    fid = header.get("fid")
    if not isinstance(fid, int) or isinstance(fid, bool):
        raise WebhookVerificationError("Envelope header has no fid")
    if not payload.get("event"):
        raise WebhookVerificationError("Envelope payload has no event")
    details = payload.get("notificationDetails")
    if details is not None and not isinstance(details, dict):
        raise WebhookVerificationError("notificationDetails must be a JSON object")
    return fid, payload


class FrameWebhookHandler:
    """Keeps notification tokens in sync with frame webhook events."""

    def __init__(self, notifications: NotificationService, target_url: str, welcome_title: str, welcome_body: str):
        self.notifications = notifications
        self.target_url = target_url
        self.welcome_title = welcome_title
        self.welcome_body = welcome_body

    async def handle_webhook(self, request: Request) -> Dict[str, Any]:
        """
        Handle an incoming frame webhook.

        Raises:
            HTTPException: 400 for malformed envelopes, 500 for storage failures
        """
        try:
            body = json.loads(await request.body())
        except ValueError as e:
            logger.error(f"Invalid JSON in webhook payload: {e}")
            raise HTTPException(status_code=400, detail="Invalid JSON payload")

        try:
            fid, payload = decode_envelope(body)
        except WebhookVerificationError as e:
            logger.warning(f"Rejected frame webhook: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        try:
            await self.process_event(fid, payload)
        except StorageError as e:
            logger.error(f"Error processing frame webhook for fid {fid}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

        return {"success": True}

    async def process_event(self, fid: int, payload: Dict[str, Any]):
        event = payload.get("event")
        details = payload.get("notificationDetails") or {}

        logger.info(f"Processing frame webhook event {event} for fid {fid}")

        if event in ("frame_added", "notifications_enabled"):
            if details.get("token") and details.get("url"):
                await self.notifications.save_token(fid, details["token"], details["url"])
                await self._send_welcome(fid)
            else:
                logger.info(f"{event} for fid {fid} without notification details")
        elif event in ("frame_removed", "notifications_disabled"):
            await self.notifications.remove_token(fid)
        else:
            logger.info(f"Unhandled frame webhook event: {event}")

    async def _send_welcome(self, fid: int):
        notification = FrameNotification(
            notification_id=f"welcome:{fid}:{int(time.time() * 1000)}",
            title=self.welcome_title,
            body=self.welcome_body,
            target_url=self.target_url,
        )
        outcome = await self.notifications.send(fid, notification, skip_rate_limit=True)
        logger.info(f"Welcome notification for fid {fid}: {outcome.value}")
