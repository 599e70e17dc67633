"""Single import point for the IB client library."""

from __future__ import annotations

from ib_async import IB, LimitOrder, Order, Stock, StopLimitOrder, Trade
from ib_async.util import UNSET_DOUBLE

IB_CLIENT_BACKEND = "ib_async"

__all__ = [
    "IB",
    "IB_CLIENT_BACKEND",
    "LimitOrder",
    "Order",
    "Stock",
    "StopLimitOrder",
    "Trade",
    "UNSET_DOUBLE",
]
