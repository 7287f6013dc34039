"""
Balances router.

Wallet balances for the profile and swap tabs.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from nativeswap.config import NATIVE_TOKEN_ADDRESS
from nativeswap.exceptions import BalanceProviderError
from nativeswap.integrations.balances import BalanceService
from nativeswap.utils import format_balance, truncate_address

from ..dependencies import get_balance_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/balances", tags=["balances"])


@router.get("/{address}/eth")
async def get_eth_balance(address: str, service: BalanceService = Depends(get_balance_service)):
    """Native ETH balance of ``address`` on Base."""
    try:
        balance = await service.get_eth_balance(address)
    except BalanceProviderError as e:
        logger.error(f"Failed to fetch ETH balance for {truncate_address(address)}: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch ETH balance")

    if balance is None:
        return {"address": address, "balance": None}
    return {
        "address": address,
        "balance": balance.to_dict(),
        "display": format_balance(balance.balance_formatted),
    }


@router.get("/{address}/tokens/{token_address}")
async def get_token_balance(address: str, token_address: str, service: BalanceService = Depends(get_balance_service)):
    """ERC20 balance with USD valuation."""
    try:
        balance = await service.get_token_balance(address, token_address)
    except BalanceProviderError as e:
        logger.error(f"Failed to fetch {token_address} balance for {truncate_address(address)}: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch balance")

    if balance is None:
        return {"address": address, "balance": None}
    return {
        "address": address,
        "balance": balance.to_dict(),
        "display": format_balance(balance.balance_formatted),
    }


@router.get("/{address}/native")
async def get_native_token_balance(address: str, service: BalanceService = Depends(get_balance_service)):
    """Shortcut for the NATIVE token shown on the profile tab."""
    return await get_token_balance(address, NATIVE_TOKEN_ADDRESS, service)
