"""
Main FastAPI server with modular router architecture.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nativeswap.config import AppConfig, get_settings

from .dependencies import DependencyContainer, build_container, get_dependency_container
from .routers import announcements, balances, frames, notifications, swap

logger = logging.getLogger(__name__)


class FrameAPIServer:
    """API server for the Native Swap frame."""

    def __init__(self, container: DependencyContainer, settings: AppConfig):
        self.container = container
        self.settings = settings
        self._start_time = datetime.now()

        self.app = FastAPI(
            title="Native Swap Frame API",
            description="Swap pricing, balances and notifications for the Native Swap frame",
            version="1.0.0",
            lifespan=self._lifespan,
        )

        self._setup_middleware()
        self._setup_dependency_overrides()
        self._setup_routers()

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        logger.info("Frame API server starting")
        yield
        await self.container.close()
        logger.info("Frame API server stopped")

    def _setup_middleware(self):
        """Configure CORS."""
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.security_config.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    def _setup_dependency_overrides(self):
        """Point every router at this server's container."""
        self.app.dependency_overrides[get_dependency_container] = lambda: self.container

    def _setup_routers(self):
        """Include all modular routers."""
        self.app.include_router(announcements.router)
        self.app.include_router(notifications.router)
        self.app.include_router(swap.router)
        self.app.include_router(balances.router)
        self.app.include_router(frames.router)

        @self.app.get("/health")
        async def root_health_check():
            """Root-level health check endpoint for container health checks."""
            return {
                "status": "healthy",
                "timestamp": datetime.now().isoformat(),
                "uptime_seconds": (datetime.now() - self._start_time).total_seconds(),
                "service": "nativeswap_api",
                "dependencies": self.container.get_health_status(),
            }


def create_api_server(
    container: Optional[DependencyContainer] = None,
    settings: Optional[AppConfig] = None,
) -> FastAPI:
    """Factory function to create the API server."""
    settings = settings or get_settings()
    container = container or build_container(settings)
    server = FrameAPIServer(container, settings)
    return server.app
