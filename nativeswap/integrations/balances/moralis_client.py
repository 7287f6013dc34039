"""
Moralis Web3 Data API client

Native balances, ERC20 wallet balances and token prices on Base.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from nativeswap.config import BASE_CHAIN_HEX
from nativeswap.exceptions import BalanceProviderError
from nativeswap.integrations.base_client import BaseAPIClient

logger = logging.getLogger(__name__)


class MoralisAPIError(BalanceProviderError):
    def __init__(self, message: str):
        super().__init__("moralis", message)


class MoralisAPIClient(BaseAPIClient):
    """A client for the Moralis EVM API."""

    service_name = "Moralis API"
    error_class = MoralisAPIError
    rate_limit_error_class = MoralisAPIError

    DEFAULT_BASE_URL = "https://deep-index.moralis.io/api/v2.2"

    def __init__(
        self,
        api_key: str,
        chain: str = BASE_CHAIN_HEX,
        base_url: Optional[str] = None,
        max_retries: int = 2,
        base_delay: float = 0.5,
        timeout: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ValueError("API key is required for MoralisAPIClient.")
        super().__init__(
            base_url or self.DEFAULT_BASE_URL,
            max_retries=max_retries,
            base_delay=base_delay,
            timeout=timeout,
            client=client,
        )
        self.api_key = api_key
        self.chain = chain

    def _get_headers(self, is_post: bool = False) -> Dict[str, str]:
        headers = super()._get_headers(is_post)
        headers["X-API-Key"] = self.api_key
        return headers

    async def get_native_balance(self, address: str) -> Dict[str, Any]:
        """Native balance in wei: ``{"balance": "<wei>"}``."""
        response = await self._make_request_with_retries(
            "GET", f"/{address}/balance", params={"chain": self.chain}
        )
        return response.json()

    async def get_wallet_token_balances(self, address: str, token_addresses: List[str]) -> List[Dict[str, Any]]:
        """ERC20 balances held by ``address``, filtered to ``token_addresses``."""
        params: Dict[str, Any] = {"chain": self.chain}
        for i, token_address in enumerate(token_addresses):
            params[f"token_addresses[{i}]"] = token_address
        response = await self._make_request_with_retries("GET", f"/{address}/erc20", params=params)
        return response.json()

    async def get_token_price(self, token_address: str, include_percent_change: bool = True) -> Dict[str, Any]:
        """USD price for a token, optionally with its 24h change."""
        params = {"chain": self.chain}
        if include_percent_change:
            params["include"] = "percent_change"
        response = await self._make_request_with_retries(
            "GET", f"/erc20/{token_address}/price", params=params
        )
        return response.json()
