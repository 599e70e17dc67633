from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

PRICE_PLACES = 2
BASIS_POINTS = Decimal(10_000)

DecimalLike = Union[Decimal, int, str, float]


def to_decimal(value: DecimalLike) -> Decimal:
    """Convert a broker or config value to an exact Decimal.

    Floats go through their shortest repr so 150.15 stays 150.15 instead of
    picking up the binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"not a decimal value: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"not a decimal value: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"not a finite decimal value: {value!r}")
    return result


def bps_factor(bps: int) -> Decimal:
    """1 + bps/10000, exact."""
    return (BASIS_POINTS + Decimal(bps)) / BASIS_POINTS


def round_price(value: Decimal, places: int = PRICE_PLACES) -> Decimal:
    # Half away from zero.
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def marked_up_price(price: Decimal, bps: int) -> Decimal:
    return round_price(price * bps_factor(bps))


def fraction_to_percent(fraction: Optional[Decimal]) -> Decimal:
    if fraction is None:
        return Decimal(0)
    return fraction * 100


def format_decimal(value: Decimal) -> str:
    """Plain notation without exponent, keeping the value's own scale."""
    return format(value, "f")
