from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.fixed_point import PRECISION

UNISWAP_V2_FACTORY_MAINNET = "0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f"


@dataclass
class PriceServiceConfig:
    rpc_url: str
    factory_address: str = UNISWAP_V2_FACTORY_MAINNET
    # Seconds between background gas price refreshes
    gas_refresh_interval: float = 30.0
    # Seconds a swap quote stays cached
    quote_ttl: float = 60.0
    request_timeout: int = 15
    decimals: int = PRECISION

    def __post_init__(self) -> None:
        if self.gas_refresh_interval <= 0:
            raise ValueError(f"gas_refresh_interval must be positive: {self.gas_refresh_interval}")
        if self.quote_ttl <= 0:
            raise ValueError(f"quote_ttl must be positive: {self.quote_ttl}")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive: {self.request_timeout}")
        if not 0 <= self.decimals <= 77:
            raise ValueError(f"decimals out of range: {self.decimals}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PriceServiceConfig":
        """
        Build config from environment variables.

        ETHEREUM_RPC_URL is required. CACHE_TTL is in milliseconds (default 60000),
        GAS_REFRESH_INTERVAL and RPC_TIMEOUT in seconds.
        """
        env = os.environ if environ is None else environ
        rpc_url = env.get("ETHEREUM_RPC_URL", "").strip()
        if not rpc_url:
            raise ValueError("ETHEREUM_RPC_URL is not set")
        return cls(
            rpc_url=rpc_url,
            factory_address=env.get("UNISWAP_V2_FACTORY") or UNISWAP_V2_FACTORY_MAINNET,
            gas_refresh_interval=float(env.get("GAS_REFRESH_INTERVAL", 30)),
            quote_ttl=float(env.get("CACHE_TTL", 60_000)) / 1000.0,
            request_timeout=int(env.get("RPC_TIMEOUT", 15)),
        )
