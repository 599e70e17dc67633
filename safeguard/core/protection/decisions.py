from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from safeguard.core.orders.models import OrderSide

MULTIPLE_STOP_ORDERS = "found multiple stop-loss orders"
NOTIONAL_UNSUPPORTED = "notional orders are currently unsupported"
LONG_ONLY = "only long positions are currently supported"


def not_valid_until_canceled(order_id: str) -> str:
    return f"opposing order {order_id} is not valid-until-canceled"


@dataclass(frozen=True)
class NoActionNeeded:
    reason: str = ""


@dataclass(frozen=True)
class AmendOrder:
    order_id: str
    new_quantity: Decimal
    new_limit_price: Decimal
    new_stop_price: Decimal


@dataclass(frozen=True)
class SubmitNewOrder:
    symbol: str
    quantity: Decimal
    limit_price: Decimal
    stop_price: Decimal
    side: OrderSide = OrderSide.SELL


@dataclass(frozen=True)
class Rejected:
    reason: str


Decision = Union[NoActionNeeded, AmendOrder, SubmitNewOrder, Rejected]


def is_actionable(decision: Decision) -> bool:
    return isinstance(decision, (AmendOrder, SubmitNewOrder))
