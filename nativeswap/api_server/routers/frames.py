"""
Frame router.

This module serves the Farcaster frame surface:
- The entry page carrying the ``fc:frame`` embed meta tag
- The ``/.well-known/farcaster.json`` manifest
- The webhook Farcaster clients post frame events to
"""

import html
import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from nativeswap.config import AppConfig
from nativeswap.integrations.farcaster.webhook_handler import FrameWebhookHandler

from ..dependencies import get_settings, get_webhook_handler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["frames"])


def build_frame_embed(settings: AppConfig) -> Dict[str, Any]:
    app_url = settings.frame.public_url.rstrip("/")
    return {
        "version": "next",
        "imageUrl": f"{app_url}/opengraph-image",
        "button": {
            "title": settings.frame.button_title,
            "action": {
                "type": "launch_frame",
                "name": settings.frame.name,
                "url": app_url,
                "splashImageUrl": f"{app_url}/splash.png",
                "splashBackgroundColor": settings.frame.splash_background_color,
            },
        },
    }


def build_manifest(settings: AppConfig) -> Dict[str, Any]:
    app_url = settings.frame.public_url.rstrip("/")
    return {
        "accountAssociation": {
            "header": settings.frame.account_association_header,
            "payload": settings.frame.account_association_payload,
            "signature": settings.frame.account_association_signature,
        },
        "frame": {
            "version": "1",
            "name": settings.frame.manifest_name,
            "iconUrl": f"{app_url}/icon.png",
            "splashImageUrl": f"{app_url}/splash.png",
            "splashBackgroundColor": settings.frame.splash_background_color,
            "homeUrl": app_url,
            "webhookUrl": f"{app_url}/api/webhook",
        },
    }


@router.get("/", response_class=HTMLResponse)
async def serve_frame(settings: AppConfig = Depends(get_settings)):
    """Serve the frame entry page with its embed and Open Graph tags."""
    title = html.escape(settings.frame.name)
    embed = html.escape(json.dumps(build_frame_embed(settings)), quote=True)
    image_url = html.escape(f"{settings.frame.public_url.rstrip('/')}/opengraph-image", quote=True)

    html_content = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title}</title>

    <!-- Farcaster Frame embed -->
    <meta name="fc:frame" content="{embed}" />

    <!-- Open Graph for social sharing -->
    <meta property="og:title" content="{title}" />
    <meta property="og:description" content="A native swap app" />
    <meta property="og:image" content="{image_url}" />
</head>
<body>
    <main id="app" data-frame="{title}"></main>
</body>
</html>
"""
    return HTMLResponse(content=html_content)


@router.get("/.well-known/farcaster.json")
async def serve_manifest(settings: AppConfig = Depends(get_settings)):
    """Frame manifest read by Farcaster clients."""
    return build_manifest(settings)


@router.post("/api/webhook")
async def frame_webhook(request: Request, handler: FrameWebhookHandler = Depends(get_webhook_handler)):
    """Frame added/removed and notification toggle events."""
    return await handler.handle_webhook(request)
