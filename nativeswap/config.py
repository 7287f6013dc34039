"""
Centralized Configuration Management

This module provides centralized configuration management for the Native Swap
frame server. It loads and validates configuration from environment variables
and .env files, grouped into nested sections with their own env prefixes.
"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


# Base mainnet
BASE_CHAIN_ID = 8453
BASE_CHAIN_HEX = "0x2105"

ETH_TOKEN_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"
NATIVE_TOKEN_ADDRESS = "0x20dd04c17afd5c9a8b3f2cdacaa8ee7907385bef"


class FrameConfig(BaseSettings):
    """Frame presentation and manifest configuration."""

    model_config = SettingsConfigDict(env_prefix="FRAME_")

    public_url: str = "http://localhost:3000"
    name: str = "Native Swap"
    manifest_name: str = "native"
    splash_background_color: str = "#f7f7f7"
    button_title: str = "Launch Swap"

    # Revenue split contract receiving affiliate fees and trade surplus
    splits_address: Optional[str] = None
    affiliate_fee_bps: int = 25

    # Signed domain association (JSON Farcaster Signature parts)
    account_association_header: str = ""
    account_association_payload: str = ""
    account_association_signature: str = ""


class ZeroExConfig(BaseSettings):
    """0x Swap API configuration."""

    model_config = SettingsConfigDict(env_prefix="ZEROEX_")

    api_key: Optional[str] = None
    base_url: str = "https://api.0x.org"
    price_path: str = "/swap/permit2/price"
    quote_path: str = "/swap/permit2/quote"

    api_timeout: float = 20.0
    api_max_retries: int = 2
    api_base_delay: float = 0.5
    api_max_delay: float = 10.0


class MoralisConfig(BaseSettings):
    """Moralis Web3 Data API configuration."""

    model_config = SettingsConfigDict(env_prefix="MORALIS_")

    api_key: Optional[str] = None
    base_url: str = "https://deep-index.moralis.io/api/v2.2"
    api_timeout: float = 20.0
    api_max_retries: int = 2


class AlchemyConfig(BaseSettings):
    """Alchemy JSON-RPC configuration, used when Moralis is unavailable."""

    model_config = SettingsConfigDict(env_prefix="ALCHEMY_")

    api_key: Optional[str] = None
    network: str = "base-mainnet"
    api_timeout: float = 20.0
    api_max_retries: int = 2


class SupabaseConfig(BaseSettings):
    """Supabase persistence configuration."""

    model_config = SettingsConfigDict(env_prefix="SUPABASE_")

    url: Optional[str] = None
    key: Optional[str] = None
    announcements_table: str = "announcements"
    notification_tokens_table: str = "notification_tokens"


class RedisConfig(BaseSettings):
    """Redis (Upstash) cache configuration."""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    url: Optional[str] = None
    key_prefix: str = "nativeswap"


class NotificationConfig(BaseSettings):
    """Frame notification delivery configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFICATIONS_")

    rate_limit_seconds: int = 30
    request_timeout: float = 10.0
    welcome_title: str = "Welcome to Native Swap! \U0001F44B"
    welcome_body: str = (
        "Thanks for adding Native Swap. You will receive notifications "
        "for successful swaps and announcements."
    )


class SecurityConfig(BaseSettings):
    """Security configuration."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    allowed_origins: List[str] = ["*"]


class AppConfig(BaseSettings):
    """
    Application configuration with nested sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    log_level: str = "INFO"
    log_file: Optional[str] = "nativeswap.log"
    host: str = "0.0.0.0"
    port: int = 8000

    frame: FrameConfig = FrameConfig()
    zeroex: ZeroExConfig = ZeroExConfig()
    moralis: MoralisConfig = MoralisConfig()
    alchemy: AlchemyConfig = AlchemyConfig()
    supabase: SupabaseConfig = SupabaseConfig()
    redis: RedisConfig = RedisConfig()
    notifications: NotificationConfig = NotificationConfig()
    security_config: SecurityConfig = SecurityConfig()


def create_settings() -> AppConfig:
    """Create settings instance from environment variables and .env files only."""
    return AppConfig()


settings = create_settings()


def get_settings() -> AppConfig:
    """Get the global settings instance."""
    return settings
