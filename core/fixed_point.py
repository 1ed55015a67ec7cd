"""
Integer arithmetic for token amounts.

Amounts live on chain as unsigned integers scaled by 10**decimals. Python ints
are arbitrary precision, so reserves near 2**112 and their products are exact.
"""
from __future__ import annotations

import re

from core.errors import InvalidAmountError

PRECISION = 18
SCALE = 10 ** PRECISION

_DECIMAL_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?")


def _check(*values: int) -> None:
    for v in values:
        if v < 0:
            raise InvalidAmountError(f"Negative amount: {v}")


def add(a: int, b: int) -> int:
    _check(a, b)
    return a + b


def mul(a: int, b: int) -> int:
    _check(a, b)
    return a * b


def div_trunc(a: int, b: int) -> int:
    """Integer division truncating toward zero, like the EVM's DIV."""
    _check(a, b)
    if b == 0:
        raise ZeroDivisionError("division by zero")
    return a // b


def parse_units(text: str, decimals: int = PRECISION) -> int:
    """
    Convert human decimal text ("1.5") into the scaled integer (1.5 * 10**decimals).

    Raises InvalidAmountError for anything that is not a plain non-negative
    decimal, or that carries more fractional digits than `decimals`.
    """
    if not isinstance(text, str):
        raise InvalidAmountError(f"Amount must be a string, got {type(text).__name__}")
    m = _DECIMAL_RE.fullmatch(text)
    if m is None:
        raise InvalidAmountError(f"Amount is not numeric: {text!r}")
    whole, frac = m.group(1), m.group(2) or ""
    if not whole and not frac:
        raise InvalidAmountError(f"Amount is not numeric: {text!r}")
    if len(frac) > decimals:
        raise InvalidAmountError(
            f"Amount {text!r} has {len(frac)} fractional digits, max is {decimals}"
        )
    return int(whole or "0") * 10 ** decimals + int(frac.ljust(decimals, "0") or "0")


def format_units(value: int, decimals: int = PRECISION) -> str:
    """Inverse of parse_units. Always keeps one fractional digit: 10**18 -> "1.0"."""
    _check(value)
    whole, frac = divmod(value, 10 ** decimals)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{whole}.{frac_text or '0'}"
