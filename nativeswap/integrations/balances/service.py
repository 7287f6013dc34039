"""
Balance Service

ETH and token balance lookups for a connected wallet. Moralis is the primary
provider; Alchemy answers when Moralis is missing or failing.
"""
import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from nativeswap.exceptions import BalanceProviderError
from nativeswap.utils.units import format_units

from .alchemy_client import AlchemyAPIClient
from .moralis_client import MoralisAPIClient

logger = logging.getLogger(__name__)


@dataclass
class EthBalance:
    balance: str
    balance_formatted: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TokenBalance:
    token_address: str
    symbol: str
    name: str
    logo: str
    thumbnail: str
    decimals: int
    balance: str
    balance_formatted: str
    usd_price: float
    usd_price_24hr_percent_change: float
    usd_value: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BalanceService:
    """Resolves wallet balances through whichever provider is configured."""

    def __init__(
        self,
        moralis: Optional[MoralisAPIClient] = None,
        alchemy: Optional[AlchemyAPIClient] = None,
    ):
        if not moralis and not alchemy:
            raise ValueError("BalanceService needs at least one provider")
        self.moralis = moralis
        self.alchemy = alchemy

    async def get_eth_balance(self, address: Optional[str]) -> Optional[EthBalance]:
        if not address:
            return None

        if self.moralis:
            try:
                response = await self.moralis.get_native_balance(address)
                raw = response.get("balance")
                if not raw:
                    return None
                return EthBalance(balance=str(raw), balance_formatted=format_units(raw, 18))
            except BalanceProviderError as e:
                if not self.alchemy:
                    raise
                logger.warning(f"Moralis ETH balance lookup failed, falling back to Alchemy: {e}")

        wei = await self.alchemy.get_native_balance(address)
        return EthBalance(balance=str(wei), balance_formatted=format_units(wei, 18))

    async def get_token_balance(self, address: Optional[str], token_address: str) -> Optional[TokenBalance]:
        if not address:
            return None

        if self.moralis:
            try:
                return await self._moralis_token_balance(address, token_address)
            except BalanceProviderError as e:
                if not self.alchemy:
                    raise
                logger.warning(f"Moralis token balance lookup failed, falling back to Alchemy: {e}")

        return await self._alchemy_token_balance(address, token_address)

    async def _moralis_token_balance(self, address: str, token_address: str) -> Optional[TokenBalance]:
        balances, price = await asyncio.gather(
            self.moralis.get_wallet_token_balances(address, [token_address]),
            self.moralis.get_token_price(token_address, include_percent_change=True),
        )
        if not balances:
            return None

        token = balances[0]
        decimals = int(token.get("decimals") or 0)
        raw_balance = str(token.get("balance") or "0")
        balance_formatted = format_units(raw_balance, decimals)
        usd_price = float(price.get("usdPrice") or 0)

        return TokenBalance(
            token_address=token.get("token_address", token_address),
            symbol=token.get("symbol") or "",
            name=token.get("name") or "",
            logo=token.get("logo") or "",
            thumbnail=token.get("thumbnail") or "",
            decimals=decimals,
            balance=raw_balance,
            balance_formatted=balance_formatted,
            usd_price=usd_price,
            usd_price_24hr_percent_change=float(price.get("24hrPercentChange") or 0),
            usd_value=float(balance_formatted) * usd_price,
        )

    async def _alchemy_token_balance(self, address: str, token_address: str) -> Optional[TokenBalance]:
        raw_balance, metadata = await asyncio.gather(
            self.alchemy.get_token_balance(address, token_address),
            self.alchemy.get_token_metadata(token_address),
        )
        if not raw_balance:
            return None

        decimals = int(metadata.get("decimals") or 18)
        return TokenBalance(
            token_address=token_address,
            symbol=metadata.get("symbol") or "",
            name=metadata.get("name") or "",
            logo=metadata.get("logo") or "",
            thumbnail="",
            decimals=decimals,
            balance=str(raw_balance),
            balance_formatted=format_units(raw_balance, decimals),
            usd_price=0.0,
            usd_price_24hr_percent_change=0.0,
            usd_value=0.0,
        )
