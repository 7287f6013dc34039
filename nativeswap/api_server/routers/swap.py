"""
Swap router.

- GET  /api/price, /api/quote         0x proxies; the API key stays server side
- GET  /api/swap/price, /api/swap/quote  ETH/NATIVE pricing built server side
- POST /api/swap/success              "Swap Successful!" notification
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from nativeswap.config import AppConfig
from nativeswap.exceptions import StorageError, ZeroExAPIError, ZeroExRateLimitError
from nativeswap.integrations.farcaster.notification_client import FrameNotification
from nativeswap.integrations.zeroex import SwapService
from nativeswap.services import NotificationOutcome, NotificationService

from ..dependencies import get_notification_service, get_settings, get_swap_service
from ..schemas import SwapSuccessRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["swap"])


def _zeroex_failure(e: ZeroExAPIError) -> HTTPException:
    if isinstance(e, ZeroExRateLimitError):
        return HTTPException(status_code=429, detail="Rate limited. Please try again later.")
    logger.error(f"0x request failed: {e}")
    return HTTPException(status_code=502, detail="Upstream pricing service unavailable")


def _shape_response(result: Dict[str, Any]) -> JSONResponse:
    body: Dict[str, Any] = {
        "buyAmount": result["buy_amount"],
        "validationErrors": result["validation_errors"],
        "raw": result["payload"],
    }
    tx = result.get("transaction")
    if tx is not None:
        body["transaction"] = {
            "to": tx.to,
            "data": tx.data,
            "value": str(tx.value),
            "gas": str(tx.gas) if tx.gas is not None else None,
        }
    return JSONResponse(body, status_code=result["status_code"])


@router.get("/price")
async def proxy_price(request: Request, service: SwapService = Depends(get_swap_service)):
    """Forward the query string to the 0x price endpoint."""
    try:
        status_code, payload = await service.client.get_price(dict(request.query_params))
    except ZeroExAPIError as e:
        raise _zeroex_failure(e)
    return JSONResponse(payload, status_code=status_code)


@router.get("/quote")
async def proxy_quote(request: Request, service: SwapService = Depends(get_swap_service)):
    """Forward the query string to the 0x quote endpoint."""
    try:
        status_code, payload = await service.client.get_quote(dict(request.query_params))
    except ZeroExAPIError as e:
        raise _zeroex_failure(e)
    return JSONResponse(payload, status_code=status_code)


@router.get("/swap/price")
async def swap_price(
    sell_amount: str = Query(..., alias="sellAmount"),
    taker: Optional[str] = None,
    is_selling: bool = Query(False, alias="isSelling"),
    service: SwapService = Depends(get_swap_service),
):
    """Indicative price for selling ``sellAmount`` (human units)."""
    try:
        result = await service.price(sell_amount, taker=taker, is_selling=is_selling)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ZeroExAPIError as e:
        raise _zeroex_failure(e)
    return _shape_response(result)


@router.get("/swap/quote")
async def swap_quote(
    sell_amount: str = Query(..., alias="sellAmount"),
    taker: str = Query(...),
    is_selling: bool = Query(False, alias="isSelling"),
    service: SwapService = Depends(get_swap_service),
):
    """Firm quote with the transaction the wallet should send."""
    try:
        result = await service.quote(sell_amount, taker=taker, is_selling=is_selling)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ZeroExAPIError as e:
        raise _zeroex_failure(e)
    return _shape_response(result)


@router.post("/swap/success")
async def swap_success(
    request: SwapSuccessRequest,
    notifications: NotificationService = Depends(get_notification_service),
    settings: AppConfig = Depends(get_settings),
):
    """Notify the user about a confirmed swap, bypassing the send window."""
    message = SwapService.success_notification(
        request.transactionHash, request.sellAmount, request.buyAmount, is_selling=request.isSelling
    )
    notification = FrameNotification(
        notification_id=message["notification_id"],
        title=message["title"],
        body=message["body"],
        target_url=settings.frame.public_url,
    )
    try:
        outcome = await notifications.send(request.fid, notification, skip_rate_limit=True)
    except StorageError as e:
        logger.error(f"Failed to send swap notification for fid {request.fid}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return {"success": outcome == NotificationOutcome.SENT, "result": outcome.value}
