from __future__ import annotations

from typing import NamedTuple, Optional

from web3 import Web3

from connectors.base import ZERO_ADDRESS, ChainClient
from core.amm_pricer import AmmPricer
from core.errors import (
    InsufficientLiquidityError,
    InvalidAddressError,
    InvalidAmountError,
    PairNotFoundError,
    ReserveFetchFailedError,
)
from core.fixed_point import PRECISION, format_units, parse_units
from core.ttl_cache import TtlCache

# Caller-actionable errors; everything else becomes ReserveFetchFailedError
PASS_THROUGH_ERRORS = (
    InvalidAddressError,
    InvalidAmountError,
    PairNotFoundError,
    InsufficientLiquidityError,
    ReserveFetchFailedError,
)


class QuoteKey(NamedTuple):
    from_token: str
    to_token: str
    # Kept verbatim: "1.0" and "1" are different keys
    amount_in: str


class SwapEstimator:
    """
    Quotes the output of a single-pair constant-product swap.

    Quotes are cached per (from, to, amount text) for `quote_ttl` seconds and
    computed at most once concurrently per key. Unexpected failures while
    resolving the pair or reading reserves surface as ReserveFetchFailedError.
    """

    def __init__(
        self,
        chain_client: ChainClient,
        cache: Optional[TtlCache] = None,
        pricer: Optional[AmmPricer] = None,
        quote_ttl: float = 60.0,
        decimals: int = PRECISION,
    ) -> None:
        self.chain_client = chain_client
        self.cache: TtlCache = cache if cache is not None else TtlCache(default_ttl=quote_ttl)
        self.pricer = pricer or AmmPricer()
        self.quote_ttl = quote_ttl
        self.decimals = decimals

    @staticmethod
    def _validate_address(address: str, label: str) -> str:
        if not isinstance(address, str) or not address.startswith("0x") or not Web3.is_address(address):
            raise InvalidAddressError(f"Invalid {label} token address: {address!r}")
        body = address[2:]
        # Mixed case means EIP-55: the casing must be a valid checksum
        if body != body.lower() and body != body.upper() and not Web3.is_checksum_address(address):
            raise InvalidAddressError(f"Invalid {label} token address checksum: {address!r}")
        return address

    def estimate(self, from_token: str, to_token: str, amount_in: str) -> str:
        self._validate_address(from_token, "from")
        self._validate_address(to_token, "to")
        amount_in_wei = parse_units(amount_in, self.decimals)
        if amount_in_wei == 0:
            raise InvalidAmountError("Amount in must be greater than zero")

        try:
            pair_address = self.chain_client.resolve_pair(from_token, to_token)
            if not pair_address or pair_address.lower() == ZERO_ADDRESS:
                raise PairNotFoundError(f"No pair found for {from_token} / {to_token}")

            key = QuoteKey(from_token.lower(), to_token.lower(), amount_in)
            return self.cache.get_or_load(
                key,
                lambda: self._compute(pair_address, from_token, to_token, amount_in_wei),
                ttl=self.quote_ttl,
            )
        except PASS_THROUGH_ERRORS:
            raise
        except Exception as e:
            print(f"[SwapEstimator] Error getting pair reserves: {e!r}")
            raise ReserveFetchFailedError("Failed to get pair reserves") from e

    def _compute(self, pair_address: str, from_token: str, to_token: str, amount_in_wei: int) -> str:
        snapshot = self.chain_client.get_reserves(pair_address)
        token0 = str(snapshot.token0).lower()
        if token0 == from_token.lower():
            reserve_in, reserve_out = snapshot.reserve0, snapshot.reserve1
        elif token0 == to_token.lower():
            reserve_in, reserve_out = snapshot.reserve1, snapshot.reserve0
        else:
            raise ReserveFetchFailedError(
                f"Pair {pair_address} token0 {snapshot.token0} matches neither {from_token} nor {to_token}"
            )
        amount_out = self.pricer.estimate_out(int(reserve_in), int(reserve_out), amount_in_wei)
        return format_units(amount_out, self.decimals)
