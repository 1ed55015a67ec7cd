from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from connectors.base import ReservesSnapshot
from connectors.dex.uniswap_v2 import UniswapV2ChainClient
from core.config import UNISWAP_V2_FACTORY_MAINNET
from core.errors import TransportError
from core.resilience import RetryConfig

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
PAIR = "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc"


def make_client(w3):
    return UniswapV2ChainClient(
        rpc_url="http://localhost:8545",
        factory_address=UNISWAP_V2_FACTORY_MAINNET,
        retry_config=RetryConfig(max_retries=3, initial_delay=0.001, jitter=False),
        web3=w3,
    )


def fake_web3():
    w3 = MagicMock()
    w3.to_checksum_address.side_effect = lambda a: a
    factory = MagicMock()
    pair = MagicMock()
    w3.eth.contract.side_effect = lambda address, abi: factory if address == UNISWAP_V2_FACTORY_MAINNET else pair
    return w3, factory, pair


def test_resolve_pair_calls_factory():
    w3, factory, _ = fake_web3()
    factory.functions.getPair.return_value.call.return_value = PAIR
    client = make_client(w3)
    assert client.resolve_pair(WETH, USDC) == PAIR
    factory.functions.getPair.assert_called_once_with(WETH, USDC)


def test_get_reserves_returns_snapshot():
    w3, _, pair = fake_web3()
    pair.functions.getReserves.return_value.call.return_value = [10 ** 24, 5 * 10 ** 21, 1700000000]
    pair.functions.token0.return_value.call.return_value = USDC
    client = make_client(w3)
    snap = client.get_reserves(PAIR)
    assert snap == ReservesSnapshot(reserve0=10 ** 24, reserve1=5 * 10 ** 21, token0=USDC)


def test_get_gas_price():
    w3, _, _ = fake_web3()
    w3.eth.gas_price = 47888827
    client = make_client(w3)
    assert client.get_gas_price() == 47888827


def test_network_errors_retried_then_succeed():
    w3, factory, _ = fake_web3()
    factory.functions.getPair.return_value.call.side_effect = [ConnectionError("Connection reset"), PAIR]
    client = make_client(w3)
    assert client.resolve_pair(WETH, USDC) == PAIR
    assert factory.functions.getPair.return_value.call.call_count == 2


def test_persistent_failure_raises_transport_error():
    w3, factory, _ = fake_web3()
    factory.functions.getPair.return_value.call.side_effect = ConnectionError("Connection refused")
    client = make_client(w3)
    with pytest.raises(TransportError) as exc_info:
        client.resolve_pair(WETH, USDC)
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert factory.functions.getPair.return_value.call.call_count == 3


def test_contract_errors_not_retried():
    w3, _, pair = fake_web3()
    pair.functions.getReserves.return_value.call.side_effect = ValueError("execution reverted")
    client = make_client(w3)
    with pytest.raises(TransportError):
        client.get_reserves(PAIR)
    assert pair.functions.getReserves.return_value.call.call_count == 1


def test_is_connected_handles_errors():
    w3, _, _ = fake_web3()
    w3.is_connected.side_effect = ConnectionError("down")
    assert make_client(w3).is_connected() is False
    w3.is_connected.side_effect = None
    w3.is_connected.return_value = True
    assert make_client(w3).is_connected() is True


def test_real_web3_checksums_addresses():
    client = UniswapV2ChainClient(rpc_url="http://localhost:8545", factory_address=UNISWAP_V2_FACTORY_MAINNET.lower())
    assert client.to_checksum(WETH) == "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
    assert client._factory_address == UNISWAP_V2_FACTORY_MAINNET

