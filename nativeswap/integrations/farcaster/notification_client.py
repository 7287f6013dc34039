"""
Frame Notification Client

Delivers Frames v2 notifications to the URL a Farcaster client handed out
when the user added the frame.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from nativeswap.exceptions import NotificationDeliveryError

logger = logging.getLogger(__name__)

MAX_NOTIFICATION_ID_LENGTH = 128
MAX_TITLE_LENGTH = 32
MAX_BODY_LENGTH = 128


@dataclass
class FrameNotification:
    notification_id: str
    title: str
    body: str
    target_url: str

    def to_payload(self, tokens: List[str]) -> Dict[str, Any]:
        return {
            "notificationId": self.notification_id[:MAX_NOTIFICATION_ID_LENGTH],
            "title": self.title[:MAX_TITLE_LENGTH],
            "body": self.body[:MAX_BODY_LENGTH],
            "targetUrl": self.target_url,
            "tokens": tokens,
        }


@dataclass
class SendNotificationResult:
    successful_tokens: List[str] = field(default_factory=list)
    invalid_tokens: List[str] = field(default_factory=list)
    rate_limited_tokens: List[str] = field(default_factory=list)

    @classmethod
    def from_response(cls, body: Dict[str, Any]) -> "SendNotificationResult":
        result = body.get("result") or {}
        return cls(
            successful_tokens=list(result.get("successfulTokens") or []),
            invalid_tokens=list(result.get("invalidTokens") or []),
            rate_limited_tokens=list(result.get("rateLimitedTokens") or []),
        )

    @property
    def delivered(self) -> bool:
        return bool(self.successful_tokens)

    @property
    def rate_limited(self) -> bool:
        return not self.successful_tokens and bool(self.rate_limited_tokens)


class FrameNotificationClient:
    """POSTs notifications to Farcaster client notification URLs."""

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout=timeout, connect=5.0))

    async def send(self, url: str, notification: FrameNotification, tokens: List[str]) -> SendNotificationResult:
        """
        Send ``notification`` to ``tokens`` through ``url``.

        Raises:
            NotificationDeliveryError: the request failed or the URL answered non-2xx
        """
        payload = notification.to_payload(tokens)
        try:
            response = await self._client.post(url, json=payload, headers={"Content-Type": "application/json"})
        except httpx.RequestError as e:
            raise NotificationDeliveryError(f"Failed to reach notification URL: {e}") from e

        if not response.is_success:
            raise NotificationDeliveryError(
                f"Failed to send notification: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise NotificationDeliveryError(f"Notification URL returned invalid JSON: {e}") from e

        result = SendNotificationResult.from_response(body)
        logger.info(
            f"Notification {payload['notificationId']}: {len(result.successful_tokens)} delivered, "
            f"{len(result.invalid_tokens)} invalid, {len(result.rate_limited_tokens)} rate limited"
        )
        return result

    async def close(self):
        await self._client.aclose()
