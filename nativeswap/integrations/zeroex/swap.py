"""
Swap Service

Builds 0x request parameters for the ETH <-> NATIVE pair and shapes the
price/quote answers for the frame's swap form.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from nativeswap.config import BASE_CHAIN_ID, ETH_TOKEN_ADDRESS, NATIVE_TOKEN_ADDRESS
from nativeswap.utils.units import format_units, parse_units

from .client import ZeroExAPIClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    symbol: str
    name: str
    image: str
    address: str
    decimals: int


ETH = Token(
    symbol="ETH",
    name="Ethereum",
    image="https://assets.coingecko.com/coins/images/279/small/ethereum.png",
    address=ETH_TOKEN_ADDRESS,
    decimals=18,
)

NATIVE_TOKEN = Token(
    symbol="NATIVE",
    name="Native Token",
    image="https://www.native.fun/images/native_logo_fill.png",
    address=NATIVE_TOKEN_ADDRESS,
    decimals=18,
)


@dataclass
class SwapTransaction:
    """Transaction fields a wallet needs to execute a quote."""

    to: str
    data: str
    value: int
    gas: Optional[int] = None

    @classmethod
    def from_quote(cls, quote: Dict[str, Any]) -> "SwapTransaction":
        tx = quote.get("transaction")
        if not tx or not tx.get("to") or not tx.get("data"):
            raise ValueError("Quote does not contain a transaction")
        gas = tx.get("gas")
        return cls(
            to=tx["to"],
            data=tx["data"],
            value=int(tx.get("value") or 0),
            gas=int(gas) if gas else None,
        )


def extract_validation_errors(payload: Dict[str, Any]) -> List[str]:
    """Collect user-facing validation messages from a 0x response."""
    errors = payload.get("validationErrors")
    if errors:
        return [e if isinstance(e, str) else e.get("reason", str(e)) for e in errors]

    details = (payload.get("data") or {}).get("details") or []
    return [d.get("reason") or d.get("field") or str(d) for d in details if d]


class SwapService:
    """Price and quote lookups for a single ETH/NATIVE swap direction."""

    def __init__(
        self,
        client: ZeroExAPIClient,
        fee_recipient: Optional[str] = None,
        fee_bps: int = 25,
        chain_id: int = BASE_CHAIN_ID,
    ):
        self.client = client
        self.fee_recipient = fee_recipient
        self.fee_bps = fee_bps
        self.chain_id = chain_id

    @staticmethod
    def tokens_for(is_selling: bool):
        """Return (sell_token, buy_token); selling means NATIVE -> ETH."""
        return (NATIVE_TOKEN, ETH) if is_selling else (ETH, NATIVE_TOKEN)

    def build_params(
        self,
        sell_amount: str,
        taker: Optional[str] = None,
        is_selling: bool = False,
    ) -> Dict[str, Any]:
        sell_token, buy_token = self.tokens_for(is_selling)
        params: Dict[str, Any] = {
            "chainId": self.chain_id,
            "sellToken": sell_token.address,
            "buyToken": buy_token.address,
            "sellAmount": str(parse_units(sell_amount, sell_token.decimals)),
            "taker": taker,
        }
        if self.fee_recipient:
            params.update(
                {
                    "swapFeeRecipient": self.fee_recipient,
                    "swapFeeBps": self.fee_bps,
                    "swapFeeToken": buy_token.address,
                    "tradeSurplusRecipient": self.fee_recipient,
                }
            )
        return params

    def _shape(self, status_code: int, payload: Dict[str, Any], is_selling: bool) -> Dict[str, Any]:
        _, buy_token = self.tokens_for(is_selling)
        buy_amount = payload.get("buyAmount")
        return {
            "status_code": status_code,
            "buy_amount": format_units(buy_amount, buy_token.decimals) if buy_amount else None,
            "validation_errors": extract_validation_errors(payload),
            "payload": payload,
        }

    async def price(self, sell_amount: str, taker: Optional[str] = None, is_selling: bool = False) -> Dict[str, Any]:
        params = self.build_params(sell_amount, taker, is_selling)
        status_code, payload = await self.client.get_price(params)
        return self._shape(status_code, payload, is_selling)

    async def quote(self, sell_amount: str, taker: str, is_selling: bool = False) -> Dict[str, Any]:
        params = self.build_params(sell_amount, taker, is_selling)
        status_code, payload = await self.client.get_quote(params)
        result = self._shape(status_code, payload, is_selling)
        if status_code < 400:
            try:
                result["transaction"] = SwapTransaction.from_quote(payload)
            except ValueError as e:
                logger.warning(f"Quote without executable transaction: {e}")
                result["transaction"] = None
        return result

    @staticmethod
    def success_notification(tx_hash: str, sell_amount: str, buy_amount: str, is_selling: bool = False) -> Dict[str, str]:
        """Notification announcing a confirmed swap."""
        sell_token, buy_token = SwapService.tokens_for(is_selling)
        return {
            "notification_id": tx_hash,
            "title": "Swap Successful! \U0001F389",
            "body": f"Successfully swapped {sell_amount} {sell_token.symbol} for {buy_amount} {buy_token.symbol}",
        }
