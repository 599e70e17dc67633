from __future__ import annotations

from decimal import Decimal

import pytest

from safeguard.core.protection.config import ProtectionConfig, ProtectionConfigError, parse_symbols

_ENV_NAMES = (
    "SAFEGUARD_LIMIT_MARKUP_BPS",
    "SAFEGUARD_STOP_MARKUP_BPS",
    "SAFEGUARD_STOP_PERCENT",
    "SAFEGUARD_MIN_GAIN_PERCENT",
    "SAFEGUARD_MIN_VALUE",
    "SAFEGUARD_SYMBOLS",
    "SAFEGUARD_MAX_CONCURRENCY",
    "APCACLI",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = ProtectionConfig()

    assert config.limit_markup_bps == 10
    assert config.stop_markup_bps == 100
    assert config.effective_stop_markup_bps == 100
    assert config.min_gain_percent == 5
    assert config.min_value is None
    assert config.symbol_filter is None
    assert config.includes("ANY")


def test_from_env_reads_every_option(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAFEGUARD_LIMIT_MARKUP_BPS", "20")
    monkeypatch.setenv("SAFEGUARD_STOP_MARKUP_BPS", "150")
    monkeypatch.setenv("SAFEGUARD_STOP_PERCENT", "2")
    monkeypatch.setenv("SAFEGUARD_MIN_GAIN_PERCENT", "8")
    monkeypatch.setenv("SAFEGUARD_MIN_VALUE", "2500")
    monkeypatch.setenv("SAFEGUARD_SYMBOLS", "aapl, msft,,")
    monkeypatch.setenv("SAFEGUARD_MAX_CONCURRENCY", "2")
    monkeypatch.setenv("APCACLI", "/usr/local/bin/apcacli")

    config = ProtectionConfig.from_env()

    assert config.limit_markup_bps == 20
    assert config.stop_markup_bps == 150
    assert config.effective_stop_markup_bps == 200
    assert config.min_gain_percent == 8
    assert config.min_value == Decimal(2500)
    assert config.symbol_filter == frozenset({"AAPL", "MSFT"})
    assert config.max_concurrency == 2
    assert config.cli_command == "/usr/local/bin/apcacli"
    assert not config.includes("TSLA")


def test_from_env_uses_defaults_when_unset() -> None:
    assert ProtectionConfig.from_env() == ProtectionConfig()


def test_from_env_rejects_non_numeric_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAFEGUARD_MIN_GAIN_PERCENT", "five")

    with pytest.raises(ProtectionConfigError, match="SAFEGUARD_MIN_GAIN_PERCENT must be an integer"):
        ProtectionConfig.from_env()


def test_from_env_rejects_non_numeric_min_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAFEGUARD_MIN_VALUE", "lots")

    with pytest.raises(ProtectionConfigError, match="SAFEGUARD_MIN_VALUE must be a number"):
        ProtectionConfig.from_env()


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"limit_markup_bps": -1}, "limit_markup_bps must be zero or greater"),
        ({"stop_markup_bps": -1}, "stop_markup_bps must be zero or greater"),
        ({"stop_percent": -1}, "stop_percent must be zero or greater"),
        ({"min_gain_percent": -1}, "min_gain_percent must be zero or greater"),
        ({"min_value": Decimal("-0.01")}, "min_value must be zero or greater"),
        ({"max_concurrency": 0}, "max_concurrency must be at least 1"),
    ],
)
def test_invalid_values_are_rejected(kwargs: dict, message: str) -> None:
    with pytest.raises(ProtectionConfigError, match=message):
        ProtectionConfig(**kwargs)


def test_parse_symbols_treats_blank_as_no_filter() -> None:
    assert parse_symbols(None) is None
    assert parse_symbols(" , ") is None
