import asyncio
import os
import sys
from dataclasses import replace

from dotenv import load_dotenv
from loguru import logger

from safeguard.adapters.broker.ibkr_connection import IBKRConnection, IBKRConnectionConfig
from safeguard.adapters.broker.ibkr_open_orders_port import IBKROpenOrdersPort
from safeguard.adapters.broker.ibkr_order_port import IBKROrderPort
from safeguard.adapters.broker.ibkr_positions_port import IBKRPositionsPort
from safeguard.adapters.logging.jsonl_logger import JsonlEventLogger
from safeguard.cli.output import (
    action_lines,
    exit_code,
    problem_lines,
    result_lines,
    summary_line,
)
from safeguard.core.orders.service import OpenOrdersService, OrderService
from safeguard.core.positions.service import PositionsService
from safeguard.core.protection.config import ProtectionConfig
from safeguard.core.protection.emitter import ProtectionActionEmitter
from safeguard.core.protection.service import ProtectionService


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra} {message}",
    )


async def _async_main() -> int:
    load_dotenv()
    configure_logging(os.getenv("SAFEGUARD_LOG_LEVEL", "WARNING"))
    config = ProtectionConfig.from_env()
    apply = os.getenv("SAFEGUARD_APPLY", "0") == "1"

    connection_config = IBKRConnectionConfig.from_env()
    if not apply and not connection_config.readonly:
        connection_config = replace(connection_config, readonly=True)
    connection = IBKRConnection(connection_config)

    log_path = os.getenv("SAFEGUARD_EVENT_LOG_PATH", "journal/safeguard.jsonl")
    event_logger = JsonlEventLogger(log_path).handle if log_path else None

    service = ProtectionService(
        PositionsService(IBKRPositionsPort(connection)),
        OpenOrdersService(IBKROpenOrdersPort(connection)),
        ProtectionActionEmitter(OrderService(IBKROrderPort(connection))),
        config,
        event_logger=event_logger,
    )

    await connection.connect()
    try:
        report = await service.run_pass(apply=apply)
    finally:
        connection.disconnect()

    lines = result_lines(report) if apply else action_lines(report, cli=config.cli_command)
    for line in lines:
        print(line)
    for line in problem_lines(report):
        print(line, file=sys.stderr)
    summary = summary_line(report)
    if summary:
        logger.info(summary)
    return exit_code(report)


def main() -> None:
    try:
        code = asyncio.run(_async_main())
    except KeyboardInterrupt:
        code = 130
    except Exception as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        code = 1
    sys.stdout.flush()
    sys.exit(code)


if __name__ == "__main__":
    main()
