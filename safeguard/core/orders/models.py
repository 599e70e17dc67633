from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"
    STOP = "STOP"
    STOP_LIMIT = "STOP_LIMIT"


class TimeInForce(str, Enum):
    TODAY = "DAY"
    UNTIL_CANCELED = "GTC"
    UNTIL_MARKET_OPEN = "OPG"
    UNTIL_MARKET_CLOSE = "CLS"


@dataclass(frozen=True)
class QuantityAmount:
    quantity: Decimal


@dataclass(frozen=True)
class NotionalAmount:
    notional: Decimal


OrderAmount = Union[QuantityAmount, NotionalAmount]


@dataclass(frozen=True)
class OrderSnapshot:
    order_id: str
    symbol: str
    side: OrderSide
    amount: OrderAmount
    limit_price: Optional[Decimal] = None
    stop_price: Optional[Decimal] = None
    time_in_force: TimeInForce = TimeInForce.TODAY

    @property
    def order_type(self) -> OrderType:
        return derive_order_type(self.limit_price, self.stop_price)


@dataclass(frozen=True)
class OrderSpec:
    symbol: str
    side: OrderSide
    quantity: Decimal
    limit_price: Optional[Decimal] = None
    stop_price: Optional[Decimal] = None
    time_in_force: TimeInForce = TimeInForce.UNTIL_CANCELED

    @property
    def order_type(self) -> OrderType:
        return derive_order_type(self.limit_price, self.stop_price)


@dataclass(frozen=True)
class OrderReplaceSpec:
    order_id: str
    quantity: Optional[Decimal] = None
    limit_price: Optional[Decimal] = None
    stop_price: Optional[Decimal] = None


@dataclass(frozen=True)
class OrderAck:
    order_id: Optional[str]
    status: Optional[str]
    submitted_at: datetime

    @classmethod
    def now(cls, *, order_id: Optional[str], status: Optional[str]) -> "OrderAck":
        return cls(order_id=order_id, status=status, submitted_at=datetime.now(timezone.utc))


def derive_order_type(limit_price: Optional[Decimal], stop_price: Optional[Decimal]) -> OrderType:
    if limit_price is not None and stop_price is not None:
        return OrderType.STOP_LIMIT
    if stop_price is not None:
        return OrderType.STOP
    if limit_price is not None:
        return OrderType.LIMIT
    return OrderType.MARKET
