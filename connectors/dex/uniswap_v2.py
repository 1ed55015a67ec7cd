from __future__ import annotations

from typing import Dict, List, Optional

from web3 import Web3
from web3.contract import Contract

from connectors.base import ChainClient, ReservesSnapshot
from core.errors import TransportError
from core.resilience import RetryConfig, resilient_call


class UniswapV2ChainClient(ChainClient):
    """
    Reads Uniswap V2 factory/pair state and the network gas price over JSON-RPC.

    Every read goes through resilient_call (network errors are retried) and
    any failure that survives is raised as TransportError.
    """

    # Minimal Uniswap V2 Factory ABI subset
    FACTORY_ABI: List[Dict] = [
        {
            "constant": True,
            "inputs": [
                {"internalType": "address", "name": "", "type": "address"},
                {"internalType": "address", "name": "", "type": "address"},
            ],
            "name": "getPair",
            "outputs": [{"internalType": "address", "name": "", "type": "address"}],
            "stateMutability": "view",
            "type": "function",
        },
    ]

    # Minimal Uniswap V2 Pair ABI subset
    PAIR_ABI: List[Dict] = [
        {
            "constant": True,
            "inputs": [],
            "name": "getReserves",
            "outputs": [
                {"internalType": "uint112", "name": "_reserve0", "type": "uint112"},
                {"internalType": "uint112", "name": "_reserve1", "type": "uint112"},
                {"internalType": "uint32", "name": "_blockTimestampLast", "type": "uint32"},
            ],
            "stateMutability": "view",
            "type": "function",
        },
        {"constant": True, "inputs": [], "name": "token0", "outputs": [{"internalType": "address", "name": "", "type": "address"}], "stateMutability": "view", "type": "function"},
        {"constant": True, "inputs": [], "name": "token1", "outputs": [{"internalType": "address", "name": "", "type": "address"}], "stateMutability": "view", "type": "function"},
    ]

    def __init__(
        self,
        rpc_url: str,
        factory_address: str,
        request_timeout: int = 15,
        retry_config: Optional[RetryConfig] = None,
        web3: Optional[Web3] = None,
    ) -> None:
        # Add request timeout to avoid indefinite hangs on slow/unresponsive RPCs
        self.web3 = web3 or Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout}))
        self.retry_config = retry_config or RetryConfig()
        self._factory_address = self.to_checksum(factory_address)
        self._factory: Contract = self.web3.eth.contract(address=self._factory_address, abi=self.FACTORY_ABI)

    def to_checksum(self, address: str) -> str:
        return self.web3.to_checksum_address(address)

    def is_connected(self) -> bool:
        try:
            return bool(self.web3.is_connected())
        except Exception:
            return False

    def pair(self, pair_address: str) -> Contract:
        return self.web3.eth.contract(address=self.to_checksum(pair_address), abi=self.PAIR_ABI)

    def _read(self, what: str, func):
        def on_retry(attempt: int, error: Exception) -> None:
            print(f"[UniswapV2ChainClient] {what} attempt {attempt + 1}/{self.retry_config.max_retries} failed: {error}")

        try:
            return resilient_call(func, retry_config=self.retry_config, on_retry=on_retry)
        except Exception as exc:
            raise TransportError(f"Failed to {what}: {exc}") from exc

    def resolve_pair(self, token_a: str, token_b: str) -> str:
        a = self.to_checksum(token_a)
        b = self.to_checksum(token_b)
        pair = self._read("get pair", lambda: self._factory.functions.getPair(a, b).call())
        return str(pair)

    def get_reserves(self, pair_address: str) -> ReservesSnapshot:
        contract = self.pair(pair_address)
        reserve0, reserve1, _ = self._read("get reserves", lambda: contract.functions.getReserves().call())
        token0 = self._read("get token0", lambda: contract.functions.token0().call())
        return ReservesSnapshot(reserve0=int(reserve0), reserve1=int(reserve1), token0=str(token0))

    def get_gas_price(self) -> int:
        return int(self._read("get gas price", lambda: self.web3.eth.gas_price))
