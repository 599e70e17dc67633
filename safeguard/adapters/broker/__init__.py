"""Broker adapters for safeguard."""

from safeguard.adapters.broker.ibkr_connection import (
    IBKRConnection,
    IBKRConnectionConfig,
)
from safeguard.adapters.broker.ibkr_open_orders_port import IBKROpenOrdersPort
from safeguard.adapters.broker.ibkr_order_port import IBKROrderPort
from safeguard.adapters.broker.ibkr_positions_port import IBKRPositionsPort

__all__ = [
    "IBKRConnection",
    "IBKRConnectionConfig",
    "IBKROpenOrdersPort",
    "IBKROrderPort",
    "IBKRPositionsPort",
]
