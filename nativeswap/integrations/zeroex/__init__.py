from .client import ZeroExAPIClient
from .swap import ETH, NATIVE_TOKEN, SwapService, SwapTransaction, Token

__all__ = ["ZeroExAPIClient", "SwapService", "SwapTransaction", "Token", "ETH", "NATIVE_TOKEN"]
