from __future__ import annotations

import asyncio
from typing import Optional

from loguru import logger

from safeguard.adapters.broker._ib_client import IB, Trade
from safeguard.adapters.broker._ibkr_values import (
    ib_decimal,
    ib_positive_decimal,
    ib_text,
    ib_time_in_force,
)
from safeguard.adapters.broker.ibkr_connection import IBKRConnection
from safeguard.core.orders.models import (
    NotionalAmount,
    OrderAmount,
    OrderSide,
    OrderSnapshot,
    QuantityAmount,
)
from safeguard.core.orders.ports import OpenOrdersPort

_INACTIVE_ORDER_STATUSES = {"inactive", "cancelled", "apicancelled", "filled"}
_LIMIT_ORDER_TYPES = {"LMT", "STPLMT"}
_STOP_ORDER_TYPES = {"STP", "STPLMT"}


class IBKROpenOrdersPort(OpenOrdersPort):
    def __init__(self, connection: IBKRConnection) -> None:
        self._connection = connection
        self._ib: IB = connection.ib

    async def list_open_orders(self) -> list[OrderSnapshot]:
        self._connection.ensure_connected()

        timeout = max(self._connection.config.timeout, 1.0)
        trades = await asyncio.wait_for(self._ib.reqAllOpenOrdersAsync(), timeout=timeout)
        account = self._connection.config.account

        snapshots: list[OrderSnapshot] = []
        for trade in trades or []:
            if not is_open(trade):
                continue
            if account and ib_text(getattr(trade.order, "account", None)) not in {None, account}:
                continue
            snapshot = to_order_snapshot(trade)
            if snapshot is None:
                logger.debug("skipping unmappable open order {}", getattr(trade.order, "permId", None))
                continue
            snapshots.append(snapshot)
        return snapshots


def trade_order_id(trade: Trade) -> Optional[str]:
    order = getattr(trade, "order", None)
    perm_id = getattr(order, "permId", None)
    if perm_id:
        return str(perm_id)
    order_id = getattr(order, "orderId", None)
    if order_id:
        return str(order_id)
    return None


def is_open(trade: Trade) -> bool:
    status = getattr(getattr(trade, "orderStatus", None), "status", None)
    if not status:
        return True
    normalized = str(status).strip().lower().replace(" ", "")
    return normalized not in _INACTIVE_ORDER_STATUSES


def to_order_snapshot(trade: Trade) -> Optional[OrderSnapshot]:
    order = getattr(trade, "order", None)
    contract = getattr(trade, "contract", None)
    if order is None:
        return None

    order_id = trade_order_id(trade)
    symbol = ib_text(getattr(contract, "symbol", None), upper=True)
    action = ib_text(getattr(order, "action", None), upper=True)
    amount = _order_amount(order)
    if order_id is None or not symbol or action not in {"BUY", "SELL"} or amount is None:
        return None

    order_type = _normalize_order_type(getattr(order, "orderType", None))
    limit_price = None
    stop_price = None
    if order_type in _LIMIT_ORDER_TYPES:
        limit_price = ib_positive_decimal(getattr(order, "lmtPrice", None))
    if order_type in _STOP_ORDER_TYPES:
        stop_price = ib_positive_decimal(getattr(order, "auxPrice", None))
    return OrderSnapshot(
        order_id=order_id,
        symbol=symbol,
        side=OrderSide(action),
        amount=amount,
        limit_price=limit_price,
        stop_price=stop_price,
        time_in_force=ib_time_in_force(getattr(order, "tif", None)),
    )


def _order_amount(order: object) -> Optional[OrderAmount]:
    quantity = ib_decimal(getattr(order, "totalQuantity", None))
    if quantity is not None and quantity > 0:
        return QuantityAmount(quantity=quantity)
    notional = ib_positive_decimal(getattr(order, "cashQty", None))
    if notional is not None:
        return NotionalAmount(notional=notional)
    return None


def _normalize_order_type(value: object) -> str:
    return "".join(ch for ch in str(value or "").upper() if ch.isalnum())

