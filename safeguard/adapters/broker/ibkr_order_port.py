from __future__ import annotations

import asyncio
import copy
import time
from typing import Optional

from loguru import logger

from safeguard.adapters.broker._ib_client import IB, LimitOrder, Stock, StopLimitOrder, Trade
from safeguard.adapters.broker.ibkr_connection import IBKRConnection
from safeguard.adapters.broker.ibkr_open_orders_port import trade_order_id
from safeguard.core.orders.models import OrderAck, OrderReplaceSpec, OrderSpec, OrderType
from safeguard.core.orders.ports import OrderPort

_AMENDABLE_ORDER_TYPES = {"STP", "STPLMT"}


class IBKROrderPort(OrderPort):
    def __init__(
        self,
        connection: IBKRConnection,
        *,
        exchange: str = "SMART",
        currency: str = "USD",
    ) -> None:
        self._connection = connection
        self._ib: IB = connection.ib
        self._exchange = exchange
        self._currency = currency

    async def submit_order(self, spec: OrderSpec) -> OrderAck:
        self._connection.ensure_connected()

        contract = Stock(spec.symbol, self._exchange, self._currency)
        contracts = await self._ib.qualifyContractsAsync(contract)
        if not contracts:
            raise RuntimeError(f"Could not qualify contract for {spec.symbol}")
        qualified = contracts[0]

        if spec.order_type == OrderType.STOP_LIMIT:
            order = StopLimitOrder(
                spec.side.value,
                float(spec.quantity),
                float(spec.limit_price),
                float(spec.stop_price),
                tif=spec.time_in_force.value,
            )
        elif spec.order_type == OrderType.LIMIT:
            order = LimitOrder(
                spec.side.value,
                float(spec.quantity),
                float(spec.limit_price),
                tif=spec.time_in_force.value,
            )
        else:
            raise RuntimeError(f"Unsupported order type: {spec.order_type.value}")
        if self._connection.config.account:
            order.account = self._connection.config.account

        trade = self._ib.placeOrder(qualified, order)
        logger.info(
            "{} {} x{} limit={} stop={} tif={}",
            spec.side.value,
            spec.symbol,
            spec.quantity,
            spec.limit_price,
            spec.stop_price,
            spec.time_in_force.value,
        )
        status = await _wait_for_order_status(trade)
        return OrderAck.now(order_id=trade_order_id(trade), status=status)

    async def replace_order(self, spec: OrderReplaceSpec) -> OrderAck:
        self._connection.ensure_connected()

        trade = find_trade_by_order_id(self._ib, spec.order_id)
        if trade is None:
            raise RuntimeError(f"Order {spec.order_id} not found in current session")
        order = copy.copy(trade.order)
        order_type = "".join(ch for ch in str(getattr(order, "orderType", "")).upper() if ch.isalnum())
        if order_type not in _AMENDABLE_ORDER_TYPES:
            raise RuntimeError("Only stop and stop-limit orders can be amended")
        if spec.quantity is not None:
            order.totalQuantity = float(spec.quantity)
        if spec.limit_price is not None:
            # A limit on a plain stop turns it into a stop-limit.
            order.orderType = "STP LMT"
            order.lmtPrice = float(spec.limit_price)
        if spec.stop_price is not None:
            order.auxPrice = float(spec.stop_price)

        updated_trade = self._ib.placeOrder(trade.contract, order)
        logger.info(
            "Amend order {} qty={} limit={} stop={}",
            spec.order_id,
            spec.quantity,
            spec.limit_price,
            spec.stop_price,
        )
        status = await _wait_for_order_status(updated_trade)
        return OrderAck.now(order_id=spec.order_id, status=status)


def find_trade_by_order_id(ib: IB, order_id: str) -> Optional[Trade]:
    for trade in ib.openTrades():
        if trade_order_id(trade) == order_id:
            return trade
        if str(getattr(getattr(trade, "order", None), "orderId", "")) == order_id:
            return trade
    return None


async def _wait_for_order_status(
    trade: Trade,
    *,
    timeout: float = 2.0,
    poll_interval: float = 0.1,
) -> Optional[str]:
    status = trade.orderStatus.status
    deadline = time.time() + timeout
    while not status and time.time() < deadline:
        await asyncio.sleep(poll_interval)
        status = trade.orderStatus.status
    return status or None
