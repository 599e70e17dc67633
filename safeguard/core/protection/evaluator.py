from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from loguru import logger

from safeguard.core.money import fraction_to_percent, marked_up_price
from safeguard.core.orders.models import NotionalAmount, OrderSide, OrderSnapshot, TimeInForce
from safeguard.core.positions.models import Position, PositionSide
from safeguard.core.protection.config import ProtectionConfig, normalize_symbol, normalize_symbols
from safeguard.core.protection.decisions import (
    LONG_ONLY,
    MULTIPLE_STOP_ORDERS,
    NOTIONAL_UNSUPPORTED,
    AmendOrder,
    Decision,
    NoActionNeeded,
    Rejected,
    SubmitNewOrder,
    not_valid_until_canceled,
)
from safeguard.core.protection.matcher import (
    MultipleProtectiveOrders,
    SingleProtectiveOrder,
    match_protective_orders,
)


@dataclass(frozen=True)
class ProtectionTarget:
    limit_price: Decimal
    stop_price: Decimal


def desired_protection(position: Position, config: ProtectionConfig) -> ProtectionTarget:
    """Stop-limit prices derived from the entry price, rounded once to cents."""
    # TODO: for sub-dollar entries the rounded limit can equal the entry price.
    return ProtectionTarget(
        limit_price=marked_up_price(position.average_entry_price, config.limit_markup_bps),
        stop_price=marked_up_price(position.average_entry_price, config.effective_stop_markup_bps),
    )


def evaluate_position(
    position: Position,
    orders: Sequence[OrderSnapshot],
    config: ProtectionConfig,
) -> Decision:
    target = desired_protection(position, config)
    match = match_protective_orders(position, orders)

    if isinstance(match, MultipleProtectiveOrders):
        return Rejected(reason=MULTIPLE_STOP_ORDERS)
    if isinstance(match, SingleProtectiveOrder):
        return _evaluate_existing(position, match.order, target)
    return _evaluate_unprotected(position, target, config)


def evaluate(
    positions: Sequence[Position],
    orders: Sequence[OrderSnapshot],
    config: Optional[ProtectionConfig] = None,
    symbols: Optional[Iterable[str]] = None,
) -> list[tuple[str, Decision]]:
    config = config or ProtectionConfig()
    wanted = normalize_symbols(symbols) if symbols is not None else config.symbol_filter

    results: list[tuple[str, Decision]] = []
    seen: set[str] = set()
    for position in positions:
        key = normalize_symbol(position.symbol)
        if wanted is not None and key not in wanted:
            continue
        seen.add(key)
        if position.quantity <= 0:
            logger.debug("skipping {} position without open quantity", position.symbol)
            continue
        with logger.contextualize(symbol=position.symbol):
            decision = evaluate_position(position, orders, config)
            if isinstance(decision, Rejected):
                logger.warning("failed to evaluate {} position: {}", position.symbol, decision.reason)
        results.append((position.symbol, decision))

    if wanted is not None:
        for symbol in sorted(wanted - seen):
            logger.debug("no open position for {}", symbol)
    return results


def _evaluate_existing(
    position: Position,
    order: OrderSnapshot,
    target: ProtectionTarget,
) -> Decision:
    if order.time_in_force != TimeInForce.UNTIL_CANCELED:
        return Rejected(reason=not_valid_until_canceled(order.order_id))
    if isinstance(order.amount, NotionalAmount):
        return Rejected(reason=NOTIONAL_UNSUPPORTED)

    quantity = order.amount.quantity
    limit = order.limit_price if order.limit_price is not None else Decimal(0)
    stop = order.stop_price if order.stop_price is not None else Decimal(0)

    if quantity != position.quantity or limit < target.limit_price or stop < target.stop_price:
        if order.side != OrderSide.SELL:
            return Rejected(reason=LONG_ONLY)
        return AmendOrder(
            order_id=order.order_id,
            new_quantity=position.quantity,
            new_limit_price=target.limit_price,
            new_stop_price=target.stop_price,
        )

    logger.info("order {} is satisfying stop-loss order", order.order_id)
    return NoActionNeeded(reason=f"order {order.order_id} already protects the position")


def _evaluate_unprotected(
    position: Position,
    target: ProtectionTarget,
    config: ProtectionConfig,
) -> Decision:
    total_gain = fraction_to_percent(position.unrealized_gain_total_percent)
    if total_gain < config.min_gain_percent:
        logger.info("total gain ({:.2f}%) is below {}%", total_gain, config.min_gain_percent)
        return NoActionNeeded(reason="gain below threshold")

    if config.min_value is not None:
        total_value = position.market_value
        if total_value < config.min_value:
            logger.info("total value ({}) is still less than {:.2f}", total_value, config.min_value)
            return NoActionNeeded(reason="value below threshold")

    if position.side != PositionSide.LONG:
        return Rejected(reason=LONG_ONLY)

    return SubmitNewOrder(
        symbol=position.symbol,
        quantity=position.quantity,
        limit_price=target.limit_price,
        stop_price=target.stop_price,
    )
