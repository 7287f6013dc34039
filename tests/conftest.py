"""
Global test configuration and fixtures.
"""

from typing import Callable, List
from unittest.mock import AsyncMock

import httpx
import pytest

from nativeswap.config import AppConfig, FrameConfig, NotificationConfig, SecurityConfig
from nativeswap.integrations.farcaster.notification_client import (
    FrameNotificationClient,
    SendNotificationResult,
)
from nativeswap.services import AnnouncementService, NotificationService
from nativeswap.storage import Announcement, KVStore, SupabaseStore


@pytest.fixture
def app_settings() -> AppConfig:
    """Settings with a fixed public URL and fee recipient."""
    return AppConfig(
        log_file=None,
        frame=FrameConfig(
            public_url="https://frame.example.com",
            splits_address="0x00000000000000000000000000000000000000aa",
            account_association_header="hdr",
            account_association_payload="pld",
            account_association_signature="sig",
        ),
        notifications=NotificationConfig(rate_limit_seconds=30),
        security_config=SecurityConfig(allowed_origins=["*"]),
    )


@pytest.fixture
def mock_kv() -> AsyncMock:
    """Provide a mocked Redis store with an empty cache."""
    kv = AsyncMock(spec=KVStore)
    kv.get_last_seen_announcement_id.return_value = None
    kv.get_cached_notification_token.return_value = {"token": "tok-1", "url": "https://client.example/notify"}
    kv.acquire_notification_slot.return_value = True
    return kv


@pytest.fixture
def mock_db() -> AsyncMock:
    """Provide a mocked Supabase store."""
    db = AsyncMock(spec=SupabaseStore)
    db.get_latest_announcement.return_value = None
    db.get_notification_token.return_value = None
    db.get_announcements.return_value = []
    return db


@pytest.fixture
def mock_notification_client() -> AsyncMock:
    """Provide a notification client whose sends succeed."""
    client = AsyncMock(spec=FrameNotificationClient)
    client.send.return_value = SendNotificationResult(successful_tokens=["tok-1"])
    return client


@pytest.fixture
def notification_service(mock_kv, mock_db, mock_notification_client) -> NotificationService:
    return NotificationService(mock_kv, mock_db, mock_notification_client, rate_limit_seconds=30)


@pytest.fixture
def announcement_service(mock_kv, mock_db, notification_service) -> AnnouncementService:
    return AnnouncementService(mock_kv, mock_db, notification_service, target_url="https://frame.example.com")


@pytest.fixture
def sample_announcement() -> Announcement:
    return Announcement(id=7, title="New pool live", text="NATIVE/ETH liquidity doubled", cast_url=None)


@pytest.fixture
def mock_transport() -> Callable[..., httpx.MockTransport]:
    """
    Build an httpx.MockTransport answering queued responses in order.

    Every request seen is appended to ``transport.requests``.
    """

    def factory(responses: List[httpx.Response]) -> httpx.MockTransport:
        queue = list(responses)
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return queue.pop(0)

        transport = httpx.MockTransport(handler)
        transport.requests = seen
        return transport

    return factory

