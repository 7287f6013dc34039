"""
Tests for Frames v2 notification delivery.
"""

import json

import httpx
import pytest

from nativeswap.exceptions import NotificationDeliveryError
from nativeswap.integrations.farcaster import (
    FrameNotification,
    FrameNotificationClient,
    SendNotificationResult,
)

NOTIFY_URL = "https://client.example/notify"


@pytest.fixture
def notification() -> FrameNotification:
    return FrameNotification(
        notification_id="announcement:7",
        title="New pool live",
        body="NATIVE/ETH liquidity doubled",
        target_url="https://frame.example.com",
    )


def test_payload_respects_length_limits():
    notification = FrameNotification(
        notification_id="n" * 200,
        title="t" * 50,
        body="b" * 300,
        target_url="https://frame.example.com",
    )

    payload = notification.to_payload(["tok"])

    assert len(payload["notificationId"]) == 128
    assert len(payload["title"]) == 32
    assert len(payload["body"]) == 128
    assert payload["tokens"] == ["tok"]


def test_result_classification():
    assert SendNotificationResult(successful_tokens=["a"], rate_limited_tokens=["b"]).delivered
    assert not SendNotificationResult(successful_tokens=["a"], rate_limited_tokens=["b"]).rate_limited
    assert SendNotificationResult(rate_limited_tokens=["b"]).rate_limited
    assert not SendNotificationResult(invalid_tokens=["c"]).delivered


@pytest.mark.asyncio
async def test_send_posts_payload_and_parses_result(mock_transport, notification):
    transport = mock_transport([
        httpx.Response(
            200,
            json={"result": {"successfulTokens": ["tok-1"], "invalidTokens": ["tok-2"], "rateLimitedTokens": []}},
        )
    ])
    client = FrameNotificationClient(client=httpx.AsyncClient(transport=transport))

    result = await client.send(NOTIFY_URL, notification, ["tok-1", "tok-2"])

    assert result.successful_tokens == ["tok-1"]
    assert result.invalid_tokens == ["tok-2"]
    sent = json.loads(transport.requests[0].content)
    assert sent == {
        "notificationId": "announcement:7",
        "title": "New pool live",
        "body": "NATIVE/ETH liquidity doubled",
        "targetUrl": "https://frame.example.com",
        "tokens": ["tok-1", "tok-2"],
    }


@pytest.mark.asyncio
async def test_send_without_result_block(mock_transport, notification):
    transport = mock_transport([httpx.Response(200, json={})])
    client = FrameNotificationClient(client=httpx.AsyncClient(transport=transport))

    result = await client.send(NOTIFY_URL, notification, ["tok-1"])

    assert result == SendNotificationResult()


@pytest.mark.asyncio
async def test_non_success_status_raises(mock_transport, notification):
    transport = mock_transport([httpx.Response(500, text="oops")])
    client = FrameNotificationClient(client=httpx.AsyncClient(transport=transport))

    with pytest.raises(NotificationDeliveryError) as exc_info:
        await client.send(NOTIFY_URL, notification, ["tok-1"])

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_network_failure_raises(notification):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = FrameNotificationClient(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    with pytest.raises(NotificationDeliveryError):
        await client.send(NOTIFY_URL, notification, ["tok-1"])
