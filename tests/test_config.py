"""
Tests for configuration loading, the CLI entry point and service wiring.
"""

import logging
from unittest.mock import patch

import pytest

from nativeswap.api_server.dependencies import build_container
from nativeswap.config import (
    AlchemyConfig,
    AppConfig,
    FrameConfig,
    MoralisConfig,
    NotificationConfig,
    RedisConfig,
    SupabaseConfig,
    ZeroExConfig,
)
from nativeswap.main import main, parse_arguments


class TestSections:
    def test_frame_defaults(self):
        config = FrameConfig(_env_file=None)
        assert config.manifest_name == "native"
        assert config.splash_background_color == "#f7f7f7"
        assert config.button_title == "Launch Swap"
        assert config.affiliate_fee_bps == 25

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("FRAME_PUBLIC_URL", "https://swap.example.com")
        monkeypatch.setenv("FRAME_AFFILIATE_FEE_BPS", "50")

        config = FrameConfig()

        assert config.public_url == "https://swap.example.com"
        assert config.affiliate_fee_bps == 50

    def test_zeroex_env(self, monkeypatch):
        monkeypatch.setenv("ZEROEX_API_KEY", "zx-key")

        assert ZeroExConfig().api_key == "zx-key"

    def test_notification_window(self, monkeypatch):
        monkeypatch.setenv("NOTIFICATIONS_RATE_LIMIT_SECONDS", "60")

        assert NotificationConfig().rate_limit_seconds == 60


def bare_settings(**overrides) -> AppConfig:
    """Settings with every credential explicitly empty."""
    sections = dict(
        log_file=None,
        zeroex=ZeroExConfig(api_key=None),
        moralis=MoralisConfig(api_key=None),
        alchemy=AlchemyConfig(api_key=None),
        supabase=SupabaseConfig(url=None, key=None),
        redis=RedisConfig(url=None),
    )
    sections.update(overrides)
    return AppConfig(**sections)


class TestBuildContainer:
    def test_nothing_configured(self, caplog):
        with caplog.at_level(logging.WARNING):
            container = build_container(bare_settings())

        status = container.get_health_status()
        assert status["initialized"] is True
        assert not any(v for k, v in status.items() if k.endswith("_ready"))
        assert "Notification pipeline disabled" in caplog.text

    def test_swap_and_balances_configured(self):
        container = build_container(
            bare_settings(
                zeroex=ZeroExConfig(api_key="zx-key"),
                alchemy=AlchemyConfig(api_key="al-key"),
            )
        )

        status = container.get_health_status()
        assert status["swap_ready"] is True
        assert status["balances_ready"] is True
        assert status["notifications_ready"] is False
        assert container.balance_service.moralis is None

    def test_notification_pipeline_configured(self):
        settings = bare_settings(
            supabase=SupabaseConfig(url="https://db.example.supabase.co", key="service-key"),
            redis=RedisConfig(url="redis://localhost:6379/0"),
        )

        with patch("nativeswap.storage.supabase_store.create_client") as create_client:
            container = build_container(settings)

        create_client.assert_called_once_with("https://db.example.supabase.co", "service-key")
        status = container.get_health_status()
        assert status["notifications_ready"] is True
        assert status["announcements_ready"] is True


class TestCommandLine:
    def test_defaults(self):
        args = parse_arguments([])
        assert args.log_level is None

    def test_overrides(self):
        args = parse_arguments(["--host", "127.0.0.1", "--port", "9000", "--log-level", "DEBUG"])
        assert args.host == "127.0.0.1"
        assert args.port == 9000
        assert args.log_level == "DEBUG"

    def test_rejects_unknown_level(self):
        with pytest.raises(SystemExit):
            parse_arguments(["--log-level", "LOUD"])

    def test_main_runs_uvicorn(self):
        with patch("nativeswap.main.setup_logging"), patch(
            "nativeswap.api_server.create_api_server"
        ) as create_api_server, patch("nativeswap.main.uvicorn.run") as run:
            main(["--port", "9001"])

        run.assert_called_once()
        assert run.call_args.args[0] is create_api_server.return_value
        assert run.call_args.kwargs["port"] == 9001
