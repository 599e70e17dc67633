from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class PositionSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


@dataclass(frozen=True)
class Position:
    symbol: str
    side: PositionSide
    quantity: Decimal
    average_entry_price: Decimal
    current_price: Optional[Decimal] = None
    unrealized_gain_total_percent: Optional[Decimal] = None
    account: Optional[str] = None

    @property
    def market_value(self) -> Decimal:
        if self.current_price is None:
            return Decimal(0)
        return self.quantity * self.current_price
