"""Stop-loss protection reconciliation for open positions."""

from safeguard.core.protection.config import ProtectionConfig, ProtectionConfigError
from safeguard.core.protection.decisions import (
    AmendOrder,
    Decision,
    NoActionNeeded,
    Rejected,
    SubmitNewOrder,
)
from safeguard.core.protection.emitter import ProtectionActionEmitter, describe_decision
from safeguard.core.protection.evaluator import desired_protection, evaluate, evaluate_position
from safeguard.core.protection.matcher import (
    MultipleProtectiveOrders,
    NoProtectiveOrder,
    ProtectiveOrderMatch,
    SingleProtectiveOrder,
    match_protective_orders,
)
from safeguard.core.protection.service import (
    ProtectionActionResult,
    ProtectionPassReport,
    ProtectionService,
)

__all__ = [
    "AmendOrder",
    "Decision",
    "NoActionNeeded",
    "Rejected",
    "SubmitNewOrder",
    "ProtectionConfig",
    "ProtectionConfigError",
    "ProtectionActionEmitter",
    "describe_decision",
    "desired_protection",
    "evaluate",
    "evaluate_position",
    "MultipleProtectiveOrders",
    "NoProtectiveOrder",
    "ProtectiveOrderMatch",
    "SingleProtectiveOrder",
    "match_protective_orders",
    "ProtectionActionResult",
    "ProtectionPassReport",
    "ProtectionService",
]
