"""
Announcements router.

- GET  /api/announcements   all announcements for the announcements panel
- POST /api/announcements   check for a new announcement and notify the user
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from nativeswap.services import AnnouncementService

from ..dependencies import get_announcement_service
from ..schemas import AnnouncementRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/announcements", tags=["announcements"])


@router.get("")
async def list_announcements(service: AnnouncementService = Depends(get_announcement_service)):
    """Retrieve all announcements, newest first."""
    try:
        announcements = await service.list_announcements()
        return [a.to_dict() for a in announcements]
    except Exception as e:
        logger.error(f"Failed to get announcements: {e}")
        return PlainTextResponse("Internal server error", status_code=500)


@router.get("/latest")
async def latest_announcements(limit: int = 5, service: AnnouncementService = Depends(get_announcement_service)):
    """The few newest announcements shown on the profile tab."""
    try:
        announcements = await service.latest_announcements(max(1, min(limit, 50)))
        return [a.to_dict() for a in announcements]
    except Exception as e:
        logger.error(f"Failed to get latest announcements: {e}")
        return PlainTextResponse("Internal server error", status_code=500)


@router.post("")
async def check_announcements(request: Request, service: AnnouncementService = Depends(get_announcement_service)):
    """
    Check for new announcements and notify the user if they are behind.

    The user's last-seen cursor only advances after a successful delivery.
    """
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse({"success": False, "errors": [{"msg": "Invalid JSON body"}]}, status_code=400)

    try:
        payload = AnnouncementRequest.model_validate(body)
    except ValidationError as e:
        return JSONResponse(
            {"success": False, "errors": json.loads(e.json(include_url=False))},
            status_code=400,
        )

    try:
        result = await service.check_and_notify(payload.fid)
    except Exception as e:
        logger.error(f"Failed to process announcement: {e}")
        return PlainTextResponse("Internal server error", status_code=500)

    if result.rate_limited:
        return JSONResponse(
            {"success": False, "error": "Rate limited. Please try again later.", **result.to_dict()},
            status_code=429,
        )

    return {"success": True, **result.to_dict()}
