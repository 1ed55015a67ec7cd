"""Pytest configuration: shared fakes and plugin blocking."""

import threading
import time

import pytest

from connectors.base import ZERO_ADDRESS, ChainClient, ReservesSnapshot

# Disable web3.tools.pytest_ethereum plugin which has compatibility issues
pytest_plugins = []


def pytest_configure(config):
    """Configure pytest to skip problematic plugins."""
    config.pluginmanager.set_blocked("web3.tools.pytest_ethereum")


WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
WETH_USDC_PAIR = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"


class FakeChainClient(ChainClient):
    """In-memory chain: pairs keyed by unordered token set, call counters, optional latency."""

    def __init__(self, gas_price=30_000_000_000, delay=0.0):
        self.gas_price = gas_price
        self.delay = delay
        self.pairs = {}
        self.reserves = {}
        self.calls = {"resolve_pair": 0, "get_reserves": 0, "get_gas_price": 0}
        self.fail_with = {}
        self._lock = threading.Lock()

    def add_pair(self, token0, token1, reserve0, reserve1, pair_address):
        self.pairs[frozenset((token0.lower(), token1.lower()))] = pair_address
        self.reserves[pair_address.lower()] = ReservesSnapshot(reserve0, reserve1, token0)

    def _enter(self, name):
        with self._lock:
            self.calls[name] += 1
        if self.delay:
            time.sleep(self.delay)
        err = self.fail_with.get(name)
        if err is not None:
            raise err

    def resolve_pair(self, token_a, token_b):
        self._enter("resolve_pair")
        return self.pairs.get(frozenset((token_a.lower(), token_b.lower())), ZERO_ADDRESS)

    def get_reserves(self, pair_address):
        self._enter("get_reserves")
        return self.reserves[pair_address.lower()]

    def get_gas_price(self):
        self._enter("get_gas_price")
        return self.gas_price


@pytest.fixture
def fake_chain():
    chain = FakeChainClient()
    # token0 = USDC (6 decimal token treated as 18 here), token1 = WETH
    chain.add_pair(USDC, WETH, 50_000_000 * 10 ** 18, 20_000 * 10 ** 18, WETH_USDC_PAIR)
    return chain


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
