"""
Constant-product (x * y = k) output pricing with a proportional input fee.

Starting from reserve_in * reserve_out = (reserve_in + amount_in) * (reserve_out - amount_out)
and solving for amount_out gives amount_in * reserve_out / (reserve_in + amount_in).
The fee is applied to amount_in first; both sides are scaled by the fee
denominator so everything stays in integers.
"""
from __future__ import annotations

from dataclasses import dataclass

from core.errors import InsufficientLiquidityError, InvalidAmountError
from core.fixed_point import add, div_trunc, mul

FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000


def estimate_out(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> int:
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidityError("Insufficient liquidity")
    if amount_in <= 0:
        raise InvalidAmountError("Amount in must be greater than zero")

    amount_in_with_fee = div_trunc(mul(amount_in, fee_numerator), fee_denominator)
    numerator = mul(amount_in_with_fee, reserve_out)
    denominator = add(mul(reserve_in, fee_denominator), amount_in_with_fee)
    return div_trunc(numerator, denominator)


@dataclass(frozen=True)
class AmmPricer:
    """Carries the pool fee so estimators can be built against other fee tiers."""

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR

    def __post_init__(self) -> None:
        if not 0 < self.fee_numerator <= self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in (0, {self.fee_denominator}]: {self.fee_numerator}"
            )

    def estimate_out(self, reserve_in: int, reserve_out: int, amount_in: int) -> int:
        return estimate_out(reserve_in, reserve_out, amount_in, self.fee_numerator, self.fee_denominator)
