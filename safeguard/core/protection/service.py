from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Callable, Optional

from loguru import logger

from safeguard.core.orders.models import OrderAck
from safeguard.core.orders.service import OpenOrdersService
from safeguard.core.positions.service import PositionsService
from safeguard.core.protection.config import ProtectionConfig
from safeguard.core.protection.decisions import (
    AmendOrder,
    Decision,
    NoActionNeeded,
    Rejected,
    SubmitNewOrder,
    is_actionable,
)
from safeguard.core.protection.emitter import ProtectionActionEmitter
from safeguard.core.protection.evaluator import evaluate
from safeguard.core.protection.events import (
    ProtectionActionApplied,
    ProtectionActionFailed,
    ProtectionDecisionMade,
    ProtectionPassCompleted,
)


@dataclass(frozen=True)
class ProtectionActionResult:
    symbol: str
    decision: Decision
    ack: Optional[OrderAck] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ProtectionPassReport:
    position_count: int
    order_count: int
    decisions: list[tuple[str, Decision]]
    results: list[ProtectionActionResult] = field(default_factory=list)

    @property
    def evaluated_count(self) -> int:
        return len(self.decisions)

    @property
    def no_action_count(self) -> int:
        return self._count(NoActionNeeded)

    @property
    def amend_count(self) -> int:
        return self._count(AmendOrder)

    @property
    def submit_count(self) -> int:
        return self._count(SubmitNewOrder)

    @property
    def rejected_count(self) -> int:
        return self._count(Rejected)

    @property
    def applied_count(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed_count(self) -> int:
        return sum(1 for result in self.results if not result.ok)

    @property
    def rejections(self) -> list[tuple[str, Rejected]]:
        return [
            (symbol, decision) for symbol, decision in self.decisions if isinstance(decision, Rejected)
        ]

    @property
    def actions(self) -> list[tuple[str, Decision]]:
        return [(symbol, decision) for symbol, decision in self.decisions if is_actionable(decision)]

    def _count(self, kind: type) -> int:
        return sum(1 for _, decision in self.decisions if isinstance(decision, kind))


class ProtectionService:
    def __init__(
        self,
        positions_service: PositionsService,
        open_orders_service: OpenOrdersService,
        emitter: ProtectionActionEmitter,
        config: Optional[ProtectionConfig] = None,
        *,
        event_logger: Optional[Callable[[object], None]] = None,
    ) -> None:
        self._positions_service = positions_service
        self._open_orders_service = open_orders_service
        self._emitter = emitter
        self._config = config or ProtectionConfig()
        self._event_logger = event_logger

    @property
    def config(self) -> ProtectionConfig:
        return self._config

    async def run_pass(
        self,
        *,
        apply: bool = False,
        symbols: Optional[Iterable[str]] = None,
    ) -> ProtectionPassReport:
        # Read failures end the pass; nothing can be evaluated without both snapshots.
        positions, orders = await asyncio.gather(
            self._positions_service.list_positions(),
            self._open_orders_service.list_open_orders(),
        )
        logger.debug("retrieved {} positions and {} open orders", len(positions), len(orders))

        decisions = evaluate(positions, orders, self._config, symbols)
        for symbol, decision in decisions:
            self._log_event(ProtectionDecisionMade.now(symbol, decision))

        results: list[ProtectionActionResult] = []
        if apply:
            results = await self._apply_all(
                [(symbol, decision) for symbol, decision in decisions if is_actionable(decision)]
            )

        report = ProtectionPassReport(
            position_count=len(positions),
            order_count=len(orders),
            decisions=decisions,
            results=results,
        )
        self._log_event(
            ProtectionPassCompleted.now(
                position_count=report.position_count,
                order_count=report.order_count,
                evaluated_count=report.evaluated_count,
                amend_count=report.amend_count,
                submit_count=report.submit_count,
                rejected_count=report.rejected_count,
                applied_count=report.applied_count,
                failed_count=report.failed_count,
            )
        )
        return report

    async def _apply_all(
        self,
        actions: list[tuple[str, Decision]],
    ) -> list[ProtectionActionResult]:
        if not actions:
            return []
        semaphore = asyncio.Semaphore(self._config.max_concurrency)

        async def _guarded(symbol: str, decision: Decision) -> ProtectionActionResult:
            async with semaphore:
                return await self._apply_one(symbol, decision)

        return list(await asyncio.gather(*(_guarded(symbol, decision) for symbol, decision in actions)))

    async def _apply_one(self, symbol: str, decision: Decision) -> ProtectionActionResult:
        try:
            ack = await self._emitter.apply(decision)
        except Exception as exc:
            logger.error("failed to apply {} for {}: {}", type(decision).__name__, symbol, exc)
            self._log_event(ProtectionActionFailed.now(symbol, decision, exc))
            return ProtectionActionResult(
                symbol=symbol,
                decision=decision,
                error=f"{type(exc).__name__}: {exc}",
            )
        if ack is not None:
            logger.info(
                "{} for {} acknowledged (orderId={}, status={})",
                type(decision).__name__,
                symbol,
                ack.order_id,
                ack.status,
            )
            self._log_event(ProtectionActionApplied.now(symbol, decision, ack))
        return ProtectionActionResult(symbol=symbol, decision=decision, ack=ack)

    def _log_event(self, event: object) -> None:
        if self._event_logger:
            self._event_logger(event)
