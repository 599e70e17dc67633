from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from safeguard.core.orders.models import (
    OrderAck,
    OrderReplaceSpec,
    OrderSide,
    OrderSpec,
    TimeInForce,
)
from safeguard.core.orders.service import OrderService, OrderValidationError


class _FakeOrderPort:
    def __init__(self) -> None:
        self.submitted: list[OrderSpec] = []
        self.replaced: list[OrderReplaceSpec] = []

    async def submit_order(self, spec: OrderSpec) -> OrderAck:
        self.submitted.append(spec)
        return OrderAck.now(order_id="1", status="Submitted")

    async def replace_order(self, spec: OrderReplaceSpec) -> OrderAck:
        self.replaced.append(spec)
        return OrderAck.now(order_id=spec.order_id, status="Submitted")


def _run(coro):
    return asyncio.run(coro)


def _spec(**overrides) -> OrderSpec:
    values = {
        "symbol": "AAPL",
        "side": OrderSide.SELL,
        "quantity": Decimal(100),
        "limit_price": Decimal("150.15"),
        "stop_price": Decimal("151.50"),
    }
    values.update(overrides)
    return OrderSpec(**values)


def test_submit_normalizes_symbol_and_enum_strings() -> None:
    port = _FakeOrderPort()
    service = OrderService(port)

    _run(service.submit_order(_spec(symbol=" aapl ", side="sell", time_in_force="gtc")))

    spec = port.submitted[0]
    assert spec.symbol == "AAPL"
    assert spec.side == OrderSide.SELL
    assert spec.time_in_force == TimeInForce.UNTIL_CANCELED


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"symbol": "  "}, "symbol is required"),
        ({"quantity": Decimal(0)}, "quantity must be greater than zero"),
        ({"limit_price": Decimal(0)}, "limit_price must be greater than zero"),
        ({"stop_price": Decimal("-1")}, "stop_price must be greater than zero"),
        ({"side": "hold"}, "invalid side: hold"),
    ],
)
def test_submit_rejects_invalid_specs(overrides: dict, message: str) -> None:
    port = _FakeOrderPort()

    with pytest.raises(OrderValidationError, match=message):
        _run(OrderService(port).submit_order(_spec(**overrides)))
    assert port.submitted == []


def test_replace_requires_a_change() -> None:
    with pytest.raises(OrderValidationError, match="replace requires at least one change"):
        _run(OrderService(_FakeOrderPort()).replace_order(OrderReplaceSpec(order_id="abc")))


def test_replace_rejects_non_positive_values() -> None:
    service = OrderService(_FakeOrderPort())

    with pytest.raises(OrderValidationError, match="quantity must be greater than zero"):
        _run(service.replace_order(OrderReplaceSpec(order_id="abc", quantity=Decimal(0))))
    with pytest.raises(OrderValidationError, match="order_id is required"):
        _run(service.replace_order(OrderReplaceSpec(order_id=" ", quantity=Decimal(1))))


def test_replace_passes_through_to_port() -> None:
    port = _FakeOrderPort()
    spec = OrderReplaceSpec(order_id="abc", stop_price=Decimal("151.50"))

    ack = _run(OrderService(port).replace_order(spec))

    assert ack.order_id == "abc"
    assert port.replaced == [spec]


def test_submit_passes_stop_limit_with_limit_above_stop_unchanged() -> None:
    port = _FakeOrderPort()
    spec = _spec(limit_price=Decimal("150.15"), stop_price=Decimal("150.00"))

    _run(OrderService(port).submit_order(spec))

    assert port.submitted == [spec]
