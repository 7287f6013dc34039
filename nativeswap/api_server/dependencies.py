"""
Centralized dependency injection for the API server.

The container is built once from settings at startup. Services whose
credentials are missing stay unset, and the routers that need them answer
503 instead of failing at import time.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException

from nativeswap.config import AppConfig
from nativeswap.exceptions import ConfigurationError
from nativeswap.integrations.balances import AlchemyAPIClient, BalanceService, MoralisAPIClient
from nativeswap.integrations.farcaster.notification_client import FrameNotificationClient
from nativeswap.integrations.farcaster.webhook_handler import FrameWebhookHandler
from nativeswap.integrations.zeroex import SwapService, ZeroExAPIClient
from nativeswap.services import AnnouncementService, NotificationService
from nativeswap.storage import KVStore, SupabaseStore

logger = logging.getLogger(__name__)


class DependencyContainer:
    """Container for managing application dependencies."""

    def __init__(self):
        self._settings: Optional[AppConfig] = None
        self._swap_service: Optional[SwapService] = None
        self._balance_service: Optional[BalanceService] = None
        self._notification_service: Optional[NotificationService] = None
        self._announcement_service: Optional[AnnouncementService] = None
        self._webhook_handler: Optional[FrameWebhookHandler] = None
        self._closables: list = []
        self._initialized = False

    def initialize(
        self,
        settings: AppConfig,
        swap_service: Optional[SwapService] = None,
        balance_service: Optional[BalanceService] = None,
        notification_service: Optional[NotificationService] = None,
        announcement_service: Optional[AnnouncementService] = None,
        webhook_handler: Optional[FrameWebhookHandler] = None,
        closables: Optional[list] = None,
    ):
        """Initialize the container with concrete instances."""
        self._settings = settings
        self._swap_service = swap_service
        self._balance_service = balance_service
        self._notification_service = notification_service
        self._announcement_service = announcement_service
        self._webhook_handler = webhook_handler
        self._closables = closables or []
        self._initialized = True
        logger.info("Dependency container initialized")

    @staticmethod
    def _require(service, name: str):
        if service is None:
            raise HTTPException(status_code=503, detail=f"{name} not configured")
        return service

    @property
    def settings(self) -> AppConfig:
        if not self._initialized or not self._settings:
            raise HTTPException(status_code=500, detail="Settings not configured")
        return self._settings

    @property
    def swap_service(self) -> SwapService:
        return self._require(self._swap_service, "Swap pricing")

    @property
    def balance_service(self) -> BalanceService:
        return self._require(self._balance_service, "Balance lookups")

    @property
    def notification_service(self) -> NotificationService:
        return self._require(self._notification_service, "Notifications")

    @property
    def announcement_service(self) -> AnnouncementService:
        return self._require(self._announcement_service, "Announcements")

    @property
    def webhook_handler(self) -> FrameWebhookHandler:
        return self._require(self._webhook_handler, "Frame webhook")

    def get_health_status(self) -> Dict[str, Any]:
        """Get health status of all dependencies."""
        return {
            "initialized": self._initialized,
            "swap_ready": self._swap_service is not None,
            "balances_ready": self._balance_service is not None,
            "notifications_ready": self._notification_service is not None,
            "announcements_ready": self._announcement_service is not None,
        }

    async def close(self):
        for closable in self._closables:
            try:
                await closable.close()
            except Exception as e:
                logger.warning(f"Error closing {type(closable).__name__}: {e}")
        self._closables = []


def build_container(settings: AppConfig) -> DependencyContainer:
    """Construct every service the configuration has credentials for."""
    container = DependencyContainer()
    closables = []

    swap_service = None
    if settings.zeroex.api_key:
        zeroex = ZeroExAPIClient(
            api_key=settings.zeroex.api_key,
            base_url=settings.zeroex.base_url,
            price_path=settings.zeroex.price_path,
            quote_path=settings.zeroex.quote_path,
            max_retries=settings.zeroex.api_max_retries,
            base_delay=settings.zeroex.api_base_delay,
            max_delay=settings.zeroex.api_max_delay,
            timeout=settings.zeroex.api_timeout,
        )
        closables.append(zeroex)
        swap_service = SwapService(
            zeroex,
            fee_recipient=settings.frame.splits_address,
            fee_bps=settings.frame.affiliate_fee_bps,
        )
    else:
        logger.warning("ZEROEX_API_KEY not set; price and quote endpoints disabled")

    moralis = alchemy = None
    if settings.moralis.api_key:
        moralis = MoralisAPIClient(
            api_key=settings.moralis.api_key,
            base_url=settings.moralis.base_url,
            max_retries=settings.moralis.api_max_retries,
            timeout=settings.moralis.api_timeout,
        )
        closables.append(moralis)
    if settings.alchemy.api_key:
        alchemy = AlchemyAPIClient(
            api_key=settings.alchemy.api_key,
            network=settings.alchemy.network,
            max_retries=settings.alchemy.api_max_retries,
            timeout=settings.alchemy.api_timeout,
        )
        closables.append(alchemy)
    balance_service = BalanceService(moralis, alchemy) if (moralis or alchemy) else None
    if balance_service is None:
        logger.warning("Neither MORALIS_API_KEY nor ALCHEMY_API_KEY set; balance endpoints disabled")

    notification_service = announcement_service = webhook_handler = None
    try:
        db = SupabaseStore.from_settings(
            settings.supabase.url,
            settings.supabase.key,
            announcements_table=settings.supabase.announcements_table,
            tokens_table=settings.supabase.notification_tokens_table,
        )
        kv = KVStore.from_url(settings.redis.url, key_prefix=settings.redis.key_prefix)
    except ConfigurationError as e:
        logger.warning(f"Notification pipeline disabled: {e}")
    else:
        client = FrameNotificationClient(timeout=settings.notifications.request_timeout)
        closables.extend([client, kv])
        notification_service = NotificationService(
            kv, db, client, rate_limit_seconds=settings.notifications.rate_limit_seconds
        )
        announcement_service = AnnouncementService(
            kv, db, notification_service, target_url=settings.frame.public_url
        )
        webhook_handler = FrameWebhookHandler(
            notification_service,
            target_url=settings.frame.public_url,
            welcome_title=settings.notifications.welcome_title,
            welcome_body=settings.notifications.welcome_body,
        )

    container.initialize(
        settings,
        swap_service=swap_service,
        balance_service=balance_service,
        notification_service=notification_service,
        announcement_service=announcement_service,
        webhook_handler=webhook_handler,
        closables=closables,
    )
    return container


# Global dependency container
_container = DependencyContainer()


def get_dependency_container() -> DependencyContainer:
    """Get the global dependency container."""
    return _container


def get_settings(container: DependencyContainer = Depends(get_dependency_container)) -> AppConfig:
    return container.settings


def get_swap_service(container: DependencyContainer = Depends(get_dependency_container)) -> SwapService:
    return container.swap_service


def get_balance_service(container: DependencyContainer = Depends(get_dependency_container)) -> BalanceService:
    return container.balance_service


def get_notification_service(
    container: DependencyContainer = Depends(get_dependency_container),
) -> NotificationService:
    return container.notification_service


def get_announcement_service(
    container: DependencyContainer = Depends(get_dependency_container),
) -> AnnouncementService:
    return container.announcement_service


def get_webhook_handler(container: DependencyContainer = Depends(get_dependency_container)) -> FrameWebhookHandler:
    return container.webhook_handler
