from __future__ import annotations

from typing import Protocol

from safeguard.core.orders.models import OrderAck, OrderReplaceSpec, OrderSnapshot, OrderSpec


class OpenOrdersPort(Protocol):
    async def list_open_orders(self) -> list[OrderSnapshot]:
        """Return orders whose status is open at the broker."""
        raise NotImplementedError


class OrderPort(Protocol):
    async def submit_order(self, spec: OrderSpec) -> OrderAck:
        """Submit an order to the broker and return an acknowledgement."""
        raise NotImplementedError

    async def replace_order(self, spec: OrderReplaceSpec) -> OrderAck:
        """Amend an existing order at the broker and return an acknowledgement."""
        raise NotImplementedError
