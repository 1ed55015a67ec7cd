from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class ReservesSnapshot:
    reserve0: int
    reserve1: int
    token0: str


class ChainClient(ABC):
    """
    Read-only chain access needed by the price services.

    Implementations block on network I/O and may raise any exception on
    failure; callers make no assumption about its type.
    """

    @abstractmethod
    def resolve_pair(self, token_a: str, token_b: str) -> str:
        """Return the pair address for two tokens, or ZERO_ADDRESS when no pair exists."""

    @abstractmethod
    def get_reserves(self, pair_address: str) -> ReservesSnapshot:
        """Return the pair's reserves in token0/token1 order plus the token0 address."""

    @abstractmethod
    def get_gas_price(self) -> int:
        """Return the current network gas price in wei."""
