from __future__ import annotations

import math
from decimal import Decimal
from typing import Optional

from safeguard.adapters.broker._ib_client import UNSET_DOUBLE
from safeguard.core.money import to_decimal
from safeguard.core.orders.models import TimeInForce

_TIME_IN_FORCE_BY_IB_TIF = {
    "DAY": TimeInForce.TODAY,
    "GTC": TimeInForce.UNTIL_CANCELED,
    "OPG": TimeInForce.UNTIL_MARKET_OPEN,
}


def ib_decimal(value: object) -> Optional[Decimal]:
    """Broker double -> Decimal, treating IB's unset sentinel and NaN as missing."""
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number >= UNSET_DOUBLE:
        return None
    return to_decimal(number if isinstance(value, float) else str(value))


def ib_positive_decimal(value: object) -> Optional[Decimal]:
    result = ib_decimal(value)
    if result is None or result <= 0:
        return None
    return result


def ib_time_in_force(value: object) -> TimeInForce:
    tif = str(value or "").strip().upper()
    # GTD, IOC and the like expire within the session or on a date.
    return _TIME_IN_FORCE_BY_IB_TIF.get(tif, TimeInForce.TODAY)


def ib_text(value: object, *, upper: bool = False) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text.upper() if upper else text
