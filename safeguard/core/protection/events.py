from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from safeguard.core.orders.models import OrderAck
from safeguard.core.protection.decisions import Decision


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ProtectionDecisionMade:
    symbol: str
    decision: Decision
    timestamp: datetime

    @classmethod
    def now(cls, symbol: str, decision: Decision) -> "ProtectionDecisionMade":
        return cls(symbol=symbol, decision=decision, timestamp=_now())


@dataclass(frozen=True)
class ProtectionActionApplied:
    symbol: str
    decision: Decision
    order_id: Optional[str]
    status: Optional[str]
    timestamp: datetime

    @classmethod
    def now(cls, symbol: str, decision: Decision, ack: OrderAck) -> "ProtectionActionApplied":
        return cls(
            symbol=symbol,
            decision=decision,
            order_id=ack.order_id,
            status=ack.status,
            timestamp=_now(),
        )


@dataclass(frozen=True)
class ProtectionActionFailed:
    symbol: str
    decision: Decision
    error_type: str
    message: str
    timestamp: datetime

    @classmethod
    def now(cls, symbol: str, decision: Decision, exc: BaseException) -> "ProtectionActionFailed":
        return cls(
            symbol=symbol,
            decision=decision,
            error_type=type(exc).__name__,
            message=str(exc),
            timestamp=_now(),
        )


@dataclass(frozen=True)
class ProtectionPassCompleted:
    position_count: int
    order_count: int
    evaluated_count: int
    amend_count: int
    submit_count: int
    rejected_count: int
    applied_count: int
    failed_count: int
    timestamp: datetime

    @classmethod
    def now(
        cls,
        *,
        position_count: int,
        order_count: int,
        evaluated_count: int,
        amend_count: int,
        submit_count: int,
        rejected_count: int,
        applied_count: int,
        failed_count: int,
    ) -> "ProtectionPassCompleted":
        return cls(
            position_count=position_count,
            order_count=order_count,
            evaluated_count=evaluated_count,
            amend_count=amend_count,
            submit_count=submit_count,
            rejected_count=rejected_count,
            applied_count=applied_count,
            failed_count=failed_count,
            timestamp=_now(),
        )
