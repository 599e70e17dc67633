from __future__ import annotations

from dataclasses import replace
from typing import Type, TypeVar

from safeguard.core.orders.models import (
    OrderAck,
    OrderReplaceSpec,
    OrderSide,
    OrderSnapshot,
    OrderSpec,
    TimeInForce,
)
from safeguard.core.orders.ports import OpenOrdersPort, OrderPort

_EnumT = TypeVar("_EnumT", bound=object)


class OrderValidationError(ValueError):
    """Raised when an OrderSpec or OrderReplaceSpec fails validation."""


class OpenOrdersService:
    def __init__(self, port: OpenOrdersPort) -> None:
        self._port = port

    async def list_open_orders(self) -> list[OrderSnapshot]:
        return await self._port.list_open_orders()


class OrderService:
    def __init__(self, order_port: OrderPort) -> None:
        self._order_port = order_port

    async def submit_order(self, spec: OrderSpec) -> OrderAck:
        normalized = self._normalize_spec(spec)
        self._validate(normalized)
        return await self._order_port.submit_order(normalized)

    async def replace_order(self, spec: OrderReplaceSpec) -> OrderAck:
        normalized = self._normalize_replace_spec(spec)
        self._validate_replace(normalized)
        return await self._order_port.replace_order(normalized)

    def _normalize_spec(self, spec: OrderSpec) -> OrderSpec:
        side = _coerce_enum(OrderSide, spec.side, "side")
        time_in_force = _coerce_enum(TimeInForce, spec.time_in_force, "time_in_force")
        symbol = spec.symbol.strip().upper()
        return replace(spec, symbol=symbol, side=side, time_in_force=time_in_force)

    def _normalize_replace_spec(self, spec: OrderReplaceSpec) -> OrderReplaceSpec:
        return replace(spec, order_id=str(spec.order_id).strip())

    def _validate(self, spec: OrderSpec) -> None:
        if not spec.symbol:
            raise OrderValidationError("symbol is required")
        if spec.quantity <= 0:
            raise OrderValidationError("quantity must be greater than zero")
        if spec.limit_price is not None and spec.limit_price <= 0:
            raise OrderValidationError("limit_price must be greater than zero")
        if spec.stop_price is not None and spec.stop_price <= 0:
            raise OrderValidationError("stop_price must be greater than zero")

    def _validate_replace(self, spec: OrderReplaceSpec) -> None:
        if not spec.order_id:
            raise OrderValidationError("order_id is required")
        if spec.quantity is None and spec.limit_price is None and spec.stop_price is None:
            raise OrderValidationError("replace requires at least one change")
        if spec.quantity is not None and spec.quantity <= 0:
            raise OrderValidationError("quantity must be greater than zero")
        if spec.limit_price is not None and spec.limit_price <= 0:
            raise OrderValidationError("limit_price must be greater than zero")
        if spec.stop_price is not None and spec.stop_price <= 0:
            raise OrderValidationError("stop_price must be greater than zero")


def _coerce_enum(enum_cls: Type[_EnumT], value: object, name: str) -> _EnumT:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().upper()
        try:
            return enum_cls(normalized)  # type: ignore[arg-type]
        except ValueError:
            pass
    raise OrderValidationError(f"invalid {name}: {value}")
