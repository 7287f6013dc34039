"""
Tests for balance providers and the BalanceService that combines them.
"""

from unittest.mock import AsyncMock

import httpx
import pytest

from nativeswap.config import NATIVE_TOKEN_ADDRESS
from nativeswap.exceptions import BalanceProviderError
from nativeswap.integrations.balances import (
    AlchemyAPIClient,
    BalanceService,
    EthBalance,
    MoralisAPIClient,
)
from nativeswap.integrations.balances.moralis_client import MoralisAPIError

WALLET = "0x1111111111111111111111111111111111111111"


@pytest.fixture
def moralis():
    client = AsyncMock(spec=MoralisAPIClient)
    client.get_native_balance.return_value = {"balance": "1500000000000000000"}
    client.get_wallet_token_balances.return_value = [
        {
            "token_address": NATIVE_TOKEN_ADDRESS,
            "symbol": "NATIVE",
            "name": "Native",
            "logo": None,
            "thumbnail": "https://logo.example/thumb.png",
            "decimals": 18,
            "balance": "2000000000000000000000",
        }
    ]
    client.get_token_price.return_value = {"usdPrice": 0.5, "24hrPercentChange": "-3.25"}
    return client


@pytest.fixture
def alchemy():
    client = AsyncMock(spec=AlchemyAPIClient)
    client.get_native_balance.return_value = 3 * 10 ** 18
    client.get_token_balance.return_value = 5 * 10 ** 17
    client.get_token_metadata.return_value = {"symbol": "NATIVE", "name": "Native", "decimals": 18, "logo": None}
    return client


def test_requires_a_provider():
    with pytest.raises(ValueError):
        BalanceService()


@pytest.mark.asyncio
async def test_eth_balance_from_moralis(moralis):
    service = BalanceService(moralis=moralis)

    balance = await service.get_eth_balance(WALLET)

    assert balance == EthBalance(balance="1500000000000000000", balance_formatted="1.5")
    moralis.get_native_balance.assert_awaited_once_with(WALLET)


@pytest.mark.asyncio
async def test_no_address_skips_providers(moralis):
    service = BalanceService(moralis=moralis)

    assert await service.get_eth_balance(None) is None
    assert await service.get_token_balance("", NATIVE_TOKEN_ADDRESS) is None
    moralis.get_native_balance.assert_not_awaited()


@pytest.mark.asyncio
async def test_token_balance_combines_balance_and_price(moralis):
    service = BalanceService(moralis=moralis)

    balance = await service.get_token_balance(WALLET, NATIVE_TOKEN_ADDRESS)

    assert balance.symbol == "NATIVE"
    assert balance.logo == ""
    assert balance.balance_formatted == "2000"
    assert balance.usd_price == 0.5
    assert balance.usd_price_24hr_percent_change == -3.25
    assert balance.usd_value == 1000.0
    moralis.get_wallet_token_balances.assert_awaited_once_with(WALLET, [NATIVE_TOKEN_ADDRESS])


@pytest.mark.asyncio
async def test_token_balance_none_when_wallet_holds_nothing(moralis):
    moralis.get_wallet_token_balances.return_value = []
    service = BalanceService(moralis=moralis)

    assert await service.get_token_balance(WALLET, NATIVE_TOKEN_ADDRESS) is None


@pytest.mark.asyncio
async def test_falls_back_to_alchemy_when_moralis_fails(moralis, alchemy):
    moralis.get_native_balance.side_effect = MoralisAPIError("server error")
    moralis.get_wallet_token_balances.side_effect = MoralisAPIError("server error")
    service = BalanceService(moralis=moralis, alchemy=alchemy)

    eth = await service.get_eth_balance(WALLET)
    token = await service.get_token_balance(WALLET, NATIVE_TOKEN_ADDRESS)

    assert eth.balance_formatted == "3"
    assert token.balance_formatted == "0.5"
    assert token.usd_price == 0.0
    assert token.usd_value == 0.0


@pytest.mark.asyncio
async def test_moralis_failure_without_fallback_raises(moralis):
    moralis.get_native_balance.side_effect = MoralisAPIError("server error")
    service = BalanceService(moralis=moralis)

    with pytest.raises(BalanceProviderError):
        await service.get_eth_balance(WALLET)


@pytest.mark.asyncio
async def test_moralis_client_request_shape(mock_transport):
    transport = mock_transport([httpx.Response(200, json=[])])
    client = MoralisAPIClient(api_key="moralis_key", client=httpx.AsyncClient(transport=transport))

    await client.get_wallet_token_balances(WALLET, [NATIVE_TOKEN_ADDRESS])

    request = transport.requests[0]
    assert request.url.path == f"/api/v2.2/{WALLET}/erc20"
    assert request.url.params["chain"] == "0x2105"
    assert request.url.params["token_addresses[0]"] == NATIVE_TOKEN_ADDRESS
    assert request.headers["X-API-Key"] == "moralis_key"


@pytest.mark.asyncio
async def test_alchemy_client_parses_hex_balances(mock_transport):
    transport = mock_transport([
        httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0xde0b6b3a7640000"}),
        httpx.Response(
            200,
            json={
                "jsonrpc": "2.0",
                "id": 2,
                "result": {
                    "address": WALLET,
                    "tokenBalances": [{"contractAddress": NATIVE_TOKEN_ADDRESS, "tokenBalance": "0x64", "error": None}],
                },
            },
        ),
    ])
    client = AlchemyAPIClient(api_key="alchemy_key", client=httpx.AsyncClient(transport=transport))

    assert await client.get_native_balance(WALLET) == 10 ** 18
    assert await client.get_token_balance(WALLET, NATIVE_TOKEN_ADDRESS) == 100
    assert transport.requests[0].url.path == "/v2/alchemy_key"


@pytest.mark.asyncio
async def test_alchemy_rpc_error_raises(mock_transport):
    transport = mock_transport([
        httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "invalid address"}})
    ])
    client = AlchemyAPIClient(api_key="alchemy_key", client=httpx.AsyncClient(transport=transport))

    with pytest.raises(BalanceProviderError):
        await client.get_native_balance("not-an-address")
