from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from loguru import logger

from safeguard.adapters.broker._ib_client import IB


@dataclass(frozen=True)
class IBKRConnectionConfig:
    host: str
    port: int
    client_id: int
    readonly: bool
    timeout: float
    paper_only: bool
    paper_port: int
    account: Optional[str] = None

    @classmethod
    def from_env(cls) -> "IBKRConnectionConfig":
        return cls(
            host=os.getenv("IB_HOST", "127.0.0.1"),
            port=int(os.getenv("IB_PORT", "7497")),
            client_id=int(os.getenv("IB_CLIENT_ID", "1001")),
            readonly=os.getenv("IB_READONLY", "0") == "1",
            timeout=float(os.getenv("IB_TIMEOUT", "5")),
            paper_only=os.getenv("PAPER_ONLY", "1") == "1",
            paper_port=int(os.getenv("IB_PAPER_PORT", "7497")),
            account=os.getenv("IB_ACCOUNT") or None,
        )


class IBKRConnection:
    def __init__(self, config: IBKRConnectionConfig, ib: Optional[IB] = None) -> None:
        self._config = config
        self._ib = ib or IB()

    @property
    def ib(self) -> IB:
        return self._ib

    @property
    def config(self) -> IBKRConnectionConfig:
        return self._config

    def _assert_paper_mode(self, port: int) -> None:
        if self._config.paper_only and port != self._config.paper_port:
            raise RuntimeError("PAPER_ONLY=1 but IB port is not the paper port.")

    async def connect(self, *, readonly: Optional[bool] = None) -> IBKRConnectionConfig:
        new_readonly = readonly if readonly is not None else self._config.readonly
        self._assert_paper_mode(self._config.port)
        if self._ib.isConnected():
            self._ib.disconnect()

        logger.info(
            "Connecting IB {}:{} clientId={} readonly={}",
            self._config.host,
            self._config.port,
            self._config.client_id,
            new_readonly,
        )
        await self._ib.connectAsync(
            self._config.host,
            self._config.port,
            clientId=self._config.client_id,
            timeout=self._config.timeout,
            readonly=new_readonly,
            account=self._config.account or "",
        )
        self._config = replace(self._config, readonly=new_readonly)
        logger.info("Connected.")
        return self._config

    def disconnect(self) -> None:
        if self._ib.isConnected():
            self._ib.disconnect()
            logger.info("Disconnected from IB {}:{}", self._config.host, self._config.port)

    def ensure_connected(self) -> None:
        if not self._ib.isConnected():
            raise RuntimeError("IBKR is not connected")

    def status(self) -> dict[str, object]:
        return {
            "connected": self._ib.isConnected(),
            "host": self._config.host,
            "port": self._config.port,
            "client_id": self._config.client_id,
            "readonly": self._config.readonly,
            "paper_only": self._config.paper_only,
            "account": self._config.account,
        }
