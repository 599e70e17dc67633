from __future__ import annotations

from decimal import Decimal

from safeguard.cli.output import (
    action_lines,
    exit_code,
    problem_lines,
    result_lines,
    summary_line,
)
from safeguard.core.orders.models import OrderAck
from safeguard.core.protection.decisions import (
    AmendOrder,
    NoActionNeeded,
    Rejected,
    SubmitNewOrder,
)
from safeguard.core.protection.service import ProtectionActionResult, ProtectionPassReport

_SUBMIT = SubmitNewOrder(
    symbol="AAPL",
    quantity=Decimal(100),
    limit_price=Decimal("150.15"),
    stop_price=Decimal("151.50"),
)
_AMEND = AmendOrder(
    order_id="321",
    new_quantity=Decimal(10),
    new_limit_price=Decimal("300.30"),
    new_stop_price=Decimal("303.00"),
)


def _report(decisions, results=None) -> ProtectionPassReport:
    return ProtectionPassReport(
        position_count=len(decisions),
        order_count=1,
        decisions=decisions,
        results=results or [],
    )


def test_action_lines_print_symbol_and_command() -> None:
    report = _report([("AAPL", _SUBMIT), ("MSFT", _AMEND), ("TSLA", NoActionNeeded())])

    assert action_lines(report, cli="apcacli") == [
        "AAPL:",
        "apcacli order submit sell AAPL --quantity 100 --limit-price 150.15 --stop-price 151.50",
        "MSFT:",
        "apcacli order change 321 --quantity 10 --limit-price 300.30 --stop-price 303.00",
    ]


def test_problem_lines_cover_rejections_and_failed_applies() -> None:
    report = _report(
        [("AAPL", _SUBMIT), ("MSFT", Rejected(reason="found multiple stop-loss orders"))],
        [ProtectionActionResult(symbol="AAPL", decision=_SUBMIT, error="RuntimeError: boom")],
    )

    assert problem_lines(report) == [
        "failed to evaluate MSFT position: found multiple stop-loss orders",
        "failed to apply order for AAPL position: RuntimeError: boom",
    ]
    assert exit_code(report) == 1


def test_clean_pass_is_silent() -> None:
    report = _report([("TSLA", NoActionNeeded())])

    assert action_lines(report, cli="apcacli") == []
    assert problem_lines(report) == []
    assert summary_line(report) is None
    assert exit_code(report) == 0


def test_result_lines_report_each_applied_action() -> None:
    report = _report(
        [("AAPL", _SUBMIT), ("MSFT", _AMEND), ("NVDA", _SUBMIT)],
        [
            ProtectionActionResult(
                symbol="AAPL",
                decision=_SUBMIT,
                ack=OrderAck.now(order_id="9001", status="PreSubmitted"),
            ),
            ProtectionActionResult(
                symbol="MSFT",
                decision=_AMEND,
                ack=OrderAck.now(order_id="321", status="Submitted"),
            ),
            ProtectionActionResult(symbol="NVDA", decision=_SUBMIT, error="RuntimeError: boom"),
        ],
    )

    assert result_lines(report) == [
        "AAPL: submitted order 9001 (status PreSubmitted)",
        "MSFT: amended order 321 (status Submitted)",
    ]
    assert exit_code(report) == 1
