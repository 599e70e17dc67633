from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from safeguard.core.money import to_decimal

DEFAULT_LIMIT_MARKUP_BPS = 10
DEFAULT_STOP_MARKUP_BPS = 100
DEFAULT_MIN_GAIN_PERCENT = 5
DEFAULT_MAX_CONCURRENCY = 4
DEFAULT_CLI_COMMAND = "apcacli"


class ProtectionConfigError(ValueError):
    """Raised when a ProtectionConfig holds an unusable value."""


@dataclass(frozen=True)
class ProtectionConfig:
    limit_markup_bps: int = DEFAULT_LIMIT_MARKUP_BPS
    stop_markup_bps: int = DEFAULT_STOP_MARKUP_BPS
    min_gain_percent: int = DEFAULT_MIN_GAIN_PERCENT
    min_value: Optional[Decimal] = None
    symbol_filter: Optional[frozenset[str]] = None
    # Percentage points; overrides stop_markup_bps when set.
    stop_percent: Optional[int] = None
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    cli_command: str = DEFAULT_CLI_COMMAND

    def __post_init__(self) -> None:
        if self.limit_markup_bps < 0:
            raise ProtectionConfigError("limit_markup_bps must be zero or greater")
        if self.stop_markup_bps < 0:
            raise ProtectionConfigError("stop_markup_bps must be zero or greater")
        if self.stop_percent is not None and self.stop_percent < 0:
            raise ProtectionConfigError("stop_percent must be zero or greater")
        if self.min_gain_percent < 0:
            raise ProtectionConfigError("min_gain_percent must be zero or greater")
        if self.min_value is not None and self.min_value < 0:
            raise ProtectionConfigError("min_value must be zero or greater")
        if self.max_concurrency < 1:
            raise ProtectionConfigError("max_concurrency must be at least 1")

    @property
    def effective_stop_markup_bps(self) -> int:
        if self.stop_percent is not None:
            return self.stop_percent * 100
        return self.stop_markup_bps

    def includes(self, symbol: str) -> bool:
        return self.symbol_filter is None or normalize_symbol(symbol) in self.symbol_filter

    @classmethod
    def from_env(cls) -> "ProtectionConfig":
        min_value = os.getenv("SAFEGUARD_MIN_VALUE")
        stop_percent = os.getenv("SAFEGUARD_STOP_PERCENT")
        return cls(
            limit_markup_bps=_int_env("SAFEGUARD_LIMIT_MARKUP_BPS", DEFAULT_LIMIT_MARKUP_BPS),
            stop_markup_bps=_int_env("SAFEGUARD_STOP_MARKUP_BPS", DEFAULT_STOP_MARKUP_BPS),
            min_gain_percent=_int_env("SAFEGUARD_MIN_GAIN_PERCENT", DEFAULT_MIN_GAIN_PERCENT),
            min_value=_decimal_or_none(min_value, "SAFEGUARD_MIN_VALUE"),
            symbol_filter=parse_symbols(os.getenv("SAFEGUARD_SYMBOLS")),
            stop_percent=int(stop_percent) if stop_percent else None,
            max_concurrency=_int_env("SAFEGUARD_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY),
            cli_command=os.getenv("APCACLI") or DEFAULT_CLI_COMMAND,
        )


def parse_symbols(value: Optional[str]) -> Optional[frozenset[str]]:
    if not value:
        return None
    symbols = normalize_symbols(value.split(","))
    return symbols or None


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def normalize_symbols(values: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_symbol(item) for item in values if item and item.strip())


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ProtectionConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _decimal_or_none(raw: Optional[str], name: str) -> Optional[Decimal]:
    if raw is None or not raw.strip():
        return None
    try:
        return to_decimal(raw)
    except ValueError as exc:
        raise ProtectionConfigError(f"{name} must be a number, got {raw!r}") from exc
