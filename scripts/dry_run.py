from __future__ import annotations

from connectors.base import ZERO_ADDRESS, ChainClient, ReservesSnapshot
from core.config import PriceServiceConfig
from cli.main import build_api

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"
PAIR = "0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc"


class FakeChainClient(ChainClient):
    def __init__(self):
        self.reads = 0

    def resolve_pair(self, token_a, token_b):
        if {token_a.lower(), token_b.lower()} == {WETH, USDC}:
            return PAIR
        return ZERO_ADDRESS

    def get_reserves(self, pair_address):
        self.reads += 1
        return ReservesSnapshot(50_000_000 * 10 ** 18, 20_000 * 10 ** 18, USDC)

    def get_gas_price(self):
        return 25_000_000_000


if __name__ == "__main__":
    fake = FakeChainClient()
    api = build_api(PriceServiceConfig(rpc_url="http://localhost:8545"), chain_client=fake)
    api.gas_monitor.start()
    print("-- gas price --")
    print(api.handle("gasPrice"))
    print("-- swap estimate --")
    print(api.handle("swapEstimate", WETH, USDC, "1"))
    print("-- swap estimate (cached) --")
    print(api.handle("swapEstimate", WETH, USDC, "1"))
    print(f"reserve reads: {fake.reads}")
    print("-- missing pair --")
    print(api.handle("swapEstimate", WETH, DAI, "1"))
    api.gas_monitor.stop()
    print("Done.")
