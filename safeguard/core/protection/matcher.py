from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from safeguard.core.orders.models import OrderSide, OrderSnapshot
from safeguard.core.positions.models import Position, PositionSide
from safeguard.core.protection.config import normalize_symbol

_OPPOSING_SIDE = {
    PositionSide.LONG: OrderSide.SELL,
    PositionSide.SHORT: OrderSide.BUY,
}


@dataclass(frozen=True)
class NoProtectiveOrder:
    pass


@dataclass(frozen=True)
class SingleProtectiveOrder:
    order: OrderSnapshot


@dataclass(frozen=True)
class MultipleProtectiveOrders:
    orders: tuple[OrderSnapshot, ...]


ProtectiveOrderMatch = Union[NoProtectiveOrder, SingleProtectiveOrder, MultipleProtectiveOrders]


def opposing_sides(position: Position, order: OrderSnapshot) -> bool:
    return _OPPOSING_SIDE.get(position.side) == order.side


def is_protective_order(position: Position, order: OrderSnapshot) -> bool:
    return (
        normalize_symbol(order.symbol) == normalize_symbol(position.symbol)
        and opposing_sides(position, order)
        and order.stop_price is not None
    )


def match_protective_orders(
    position: Position,
    orders: Sequence[OrderSnapshot],
) -> ProtectiveOrderMatch:
    """Find the stop orders guarding ``position``.

    More than one candidate is reported as such; callers must not pick one.
    """
    candidates = tuple(order for order in orders if is_protective_order(position, order))
    if not candidates:
        return NoProtectiveOrder()
    if len(candidates) == 1:
        return SingleProtectiveOrder(order=candidates[0])
    return MultipleProtectiveOrders(orders=candidates)