from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Optional

from safeguard.adapters.broker._ib_client import IB
from safeguard.adapters.broker._ibkr_values import ib_decimal, ib_positive_decimal, ib_text
from safeguard.adapters.broker.ibkr_connection import IBKRConnection
from safeguard.core.positions.models import Position, PositionSide
from safeguard.core.positions.ports import PositionsPort


class IBKRPositionsPort(PositionsPort):
    def __init__(self, connection: IBKRConnection) -> None:
        self._connection = connection
        self._ib: IB = connection.ib

    async def list_positions(self) -> list[Position]:
        self._connection.ensure_connected()

        account = self._connection.config.account
        accounts = [account] if account else [acct for acct in self._ib.managedAccounts() if acct]
        if len(accounts) > 1:
            # Positions in one pass come from a single account.
            raise RuntimeError(
                f"Multiple managed accounts ({', '.join(accounts)}); set IB_ACCOUNT to choose one"
            )
        timeout = max(self._connection.config.timeout, 1.0)

        positions: list[Position] = []
        for acct in accounts:
            await asyncio.wait_for(self._ib.reqAccountUpdatesAsync(acct), timeout=timeout)
            for item in self._ib.portfolio(acct):
                position = to_position(item, acct)
                if position is not None:
                    positions.append(position)
        positions.sort(key=lambda item: item.symbol)
        return positions


def to_position(item: object, account: Optional[str]) -> Optional[Position]:
    contract = getattr(item, "contract", None)
    symbol = ib_text(getattr(contract, "symbol", None), upper=True)
    signed_qty = ib_decimal(getattr(item, "position", None))
    average_cost = ib_positive_decimal(getattr(item, "averageCost", None))
    if not symbol or signed_qty is None or signed_qty == 0 or average_cost is None:
        return None

    side = PositionSide.LONG if signed_qty > 0 else PositionSide.SHORT
    current_price = ib_positive_decimal(getattr(item, "marketPrice", None))
    return Position(
        symbol=symbol,
        side=side,
        quantity=abs(signed_qty),
        average_entry_price=average_cost,
        current_price=current_price,
        unrealized_gain_total_percent=_gain_fraction(side, average_cost, current_price),
        account=ib_text(getattr(item, "account", None)) or account,
    )


def _gain_fraction(
    side: PositionSide,
    average_cost: Decimal,
    current_price: Optional[Decimal],
) -> Optional[Decimal]:
    if current_price is None:
        return None
    change = current_price - average_cost
    if side == PositionSide.SHORT:
        change = -change
    return change / average_cost
