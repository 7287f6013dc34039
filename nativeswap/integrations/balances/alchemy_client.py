"""
Alchemy JSON-RPC client

Fallback balance provider. Alchemy has no price feed, so it only answers
balance and metadata lookups.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from nativeswap.exceptions import BalanceProviderError
from nativeswap.integrations.base_client import BaseAPIClient

logger = logging.getLogger(__name__)


class AlchemyAPIError(BalanceProviderError):
    def __init__(self, message: str):
        super().__init__("alchemy", message)


class AlchemyAPIClient(BaseAPIClient):
    service_name = "Alchemy API"
    error_class = AlchemyAPIError
    rate_limit_error_class = AlchemyAPIError

    def __init__(
        self,
        api_key: str,
        network: str = "base-mainnet",
        max_retries: int = 2,
        base_delay: float = 0.5,
        timeout: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not api_key:
            raise ValueError("API key is required for AlchemyAPIClient.")
        super().__init__(
            f"https://{network}.g.alchemy.com",
            max_retries=max_retries,
            base_delay=base_delay,
            timeout=timeout,
            client=client,
        )
        self.api_key = api_key
        self._request_id = 0

    async def _rpc(self, method: str, params: List[Any]) -> Any:
        self._request_id += 1
        payload = {"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params}
        response = await self._make_request_with_retries("POST", f"/v2/{self.api_key}", json_data=payload)
        body = response.json()
        if body.get("error"):
            raise AlchemyAPIError(f"{method} failed: {body['error'].get('message', body['error'])}")
        return body.get("result")

    async def get_native_balance(self, address: str) -> int:
        """Native balance in wei."""
        result = await self._rpc("eth_getBalance", [address, "latest"])
        return int(result, 16) if result else 0

    async def get_token_balance(self, address: str, token_address: str) -> int:
        """Raw ERC20 balance of ``token_address`` held by ``address``."""
        result = await self._rpc("alchemy_getTokenBalances", [address, [token_address]])
        balances = (result or {}).get("tokenBalances") or []
        for entry in balances:
            if entry.get("contractAddress", "").lower() == token_address.lower() and not entry.get("error"):
                raw = entry.get("tokenBalance")
                return int(raw, 16) if raw else 0
        return 0

    async def get_token_metadata(self, token_address: str) -> Dict[str, Any]:
        """``{name, symbol, decimals, logo}`` for a token contract."""
        return await self._rpc("alchemy_getTokenMetadata", [token_address]) or {}
