from __future__ import annotations

from typing import Optional

from safeguard.core.money import format_decimal
from safeguard.core.orders.models import OrderAck, OrderReplaceSpec, OrderSpec, TimeInForce
from safeguard.core.orders.service import OrderService
from safeguard.core.protection.config import DEFAULT_CLI_COMMAND
from safeguard.core.protection.decisions import AmendOrder, Decision, SubmitNewOrder


class ProtectionActionEmitter:
    """Issue the broker call a decision asks for.

    Errors from the order service propagate unchanged; retrying is the
    caller's business.
    """

    def __init__(self, order_service: OrderService) -> None:
        self._order_service = order_service

    async def apply(self, decision: Decision) -> Optional[OrderAck]:
        if isinstance(decision, AmendOrder):
            return await self._order_service.replace_order(replace_spec_for(decision))
        if isinstance(decision, SubmitNewOrder):
            return await self._order_service.submit_order(order_spec_for(decision))
        return None


def replace_spec_for(decision: AmendOrder) -> OrderReplaceSpec:
    return OrderReplaceSpec(
        order_id=decision.order_id,
        quantity=decision.new_quantity,
        limit_price=decision.new_limit_price,
        stop_price=decision.new_stop_price,
    )


def order_spec_for(decision: SubmitNewOrder) -> OrderSpec:
    return OrderSpec(
        symbol=decision.symbol,
        side=decision.side,
        quantity=decision.quantity,
        limit_price=decision.limit_price,
        stop_price=decision.stop_price,
        time_in_force=TimeInForce.UNTIL_CANCELED,
    )


def describe_decision(
    symbol: str,
    decision: Decision,
    cli: str = DEFAULT_CLI_COMMAND,
) -> Optional[str]:
    """Render an actionable decision as the equivalent order command."""
    if isinstance(decision, AmendOrder):
        return (
            f"{cli} order change {decision.order_id}"
            f" --quantity {format_decimal(decision.new_quantity)}"
            f" --limit-price {format_decimal(decision.new_limit_price)}"
            f" --stop-price {format_decimal(decision.new_stop_price)}"
        )
    if isinstance(decision, SubmitNewOrder):
        return (
            f"{cli} order submit {decision.side.value.lower()} {symbol}"
            f" --quantity {format_decimal(decision.quantity)}"
            f" --limit-price {format_decimal(decision.limit_price)}"
            f" --stop-price {format_decimal(decision.stop_price)}"
        )
    return None
