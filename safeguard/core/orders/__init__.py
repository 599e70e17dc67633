from safeguard.core.orders.models import (
    NotionalAmount,
    OrderAck,
    OrderAmount,
    OrderReplaceSpec,
    OrderSide,
    OrderSnapshot,
    OrderSpec,
    OrderType,
    QuantityAmount,
    TimeInForce,
)
from safeguard.core.orders.ports import OpenOrdersPort, OrderPort
from safeguard.core.orders.service import OpenOrdersService, OrderService, OrderValidationError

__all__ = [
    "NotionalAmount",
    "OrderAck",
    "OrderAmount",
    "OrderReplaceSpec",
    "OrderSide",
    "OrderSnapshot",
    "OrderSpec",
    "OrderType",
    "QuantityAmount",
    "TimeInForce",
    "OpenOrdersPort",
    "OrderPort",
    "OpenOrdersService",
    "OrderService",
    "OrderValidationError",
]
