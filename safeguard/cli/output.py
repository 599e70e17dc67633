from __future__ import annotations

from typing import Optional

from safeguard.core.protection.decisions import AmendOrder, Rejected, is_actionable
from safeguard.core.protection.emitter import describe_decision
from safeguard.core.protection.service import ProtectionPassReport


def action_lines(report: ProtectionPassReport, *, cli: str) -> list[str]:
    """One ``SYMBOL:`` header plus the order command for every actionable position."""
    lines: list[str] = []
    for symbol, decision in report.decisions:
        if not is_actionable(decision):
            continue
        command = describe_decision(symbol, decision, cli)
        lines.append(f"{symbol}:")
        lines.append(command or "")
    return lines


def result_lines(report: ProtectionPassReport) -> list[str]:
    lines: list[str] = []
    for result in report.results:
        if not result.ok or result.ack is None:
            continue
        kind = "amended" if isinstance(result.decision, AmendOrder) else "submitted"
        lines.append(
            f"{result.symbol}: {kind} order {result.ack.order_id} (status {result.ack.status})"
        )
    return lines


def problem_lines(report: ProtectionPassReport) -> list[str]:
    lines = [
        f"failed to evaluate {symbol} position: {decision.reason}"
        for symbol, decision in report.decisions
        if isinstance(decision, Rejected)
    ]
    lines.extend(
        f"failed to apply order for {result.symbol} position: {result.error}"
        for result in report.results
        if not result.ok
    )
    return lines


def exit_code(report: ProtectionPassReport) -> int:
    return 1 if report.rejected_count or report.failed_count else 0


def summary_line(report: ProtectionPassReport) -> Optional[str]:
    if not report.actions and not report.rejections:
        return None
    return (
        f"evaluated={report.evaluated_count} amend={report.amend_count} "
        f"submit={report.submit_count} rejected={report.rejected_count} "
        f"applied={report.applied_count} failed={report.failed_count}"
    )
