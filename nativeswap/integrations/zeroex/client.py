"""
0x Swap API client

Thin async wrapper around the 0x Swap API v2 price and quote endpoints.
"""
import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from nativeswap.exceptions import ZeroExAPIError, ZeroExRateLimitError
from nativeswap.integrations.base_client import BaseAPIClient

logger = logging.getLogger(__name__)


class ZeroExAPIClient(BaseAPIClient):
    """
    Client for the 0x Swap API.

    Price and quote calls return ``(status_code, payload)``: 4xx answers carry
    validation details the frame shows to the user, so they are handed back
    rather than raised.
    """

    service_name = "0x API"
    error_class = ZeroExAPIError
    rate_limit_error_class = ZeroExRateLimitError

    DEFAULT_BASE_URL = "https://api.0x.org"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        price_path: str = "/swap/permit2/price",
        quote_path: str = "/swap/permit2/quote",
        max_retries: int = 2,
        base_delay: float = 0.5,
        max_delay: float = 10.0,
        timeout: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ValueError("API key is required for ZeroExAPIClient.")
        super().__init__(
            base_url or self.DEFAULT_BASE_URL,
            max_retries=max_retries,
            base_delay=base_delay,
            max_delay=max_delay,
            timeout=timeout,
            client=client,
        )
        self.api_key = api_key
        self.price_path = price_path
        self.quote_path = quote_path

    def _get_headers(self, is_post: bool = False) -> Dict[str, str]:
        headers = super()._get_headers(is_post)
        headers["0x-api-key"] = self.api_key
        headers["0x-version"] = "v2"
        return headers

    @staticmethod
    def _clean_params(params: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in params.items() if v is not None and v != ""}

    async def _get(self, path: str, params: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        response = await self._make_request_with_retries(
            "GET", path, params=self._clean_params(params), raise_for_client_errors=False
        )
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        if response.status_code >= 400:
            logger.info(f"0x rejected {path} request with {response.status_code}: {payload}")
        return response.status_code, payload

    async def get_price(self, params: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """Fetch an indicative price."""
        return await self._get(self.price_path, params)

    async def get_quote(self, params: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """Fetch a firm quote including the transaction to submit."""
        return await self._get(self.quote_path, params)
