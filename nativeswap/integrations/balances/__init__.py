from .alchemy_client import AlchemyAPIClient
from .moralis_client import MoralisAPIClient
from .service import BalanceService, EthBalance, TokenBalance

__all__ = ["AlchemyAPIClient", "MoralisAPIClient", "BalanceService", "EthBalance", "TokenBalance"]
