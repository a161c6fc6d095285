"""Data models for queries, results and reference data."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class CurrencyInfo:
    code: str
    name: str
    symbol: str


class InputCurrency(enum.Enum):
    """Which currency the user-supplied investment amount is stated in."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class Instrument:
    symbol: str
    name: str
    description: str
    sector: str
    prices: Mapping[int, float]  # year -> unit price in primary currency
    note: str | None = None


@dataclass(frozen=True, slots=True)
class Dataset:
    primary_currency: str
    secondary_currency: str
    current_year: int
    current_exchange_rate: float
    exchange_rates: Mapping[int, float]  # year -> secondary per 1 primary
    instruments: Mapping[str, Instrument]


@dataclass(frozen=True, slots=True)
class Query:
    symbol: str
    start_year: int
    amount: float
    input_currency: InputCurrency = InputCurrency.SECONDARY


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    year: int
    value: int  # rounded, secondary currency


@dataclass(frozen=True, slots=True)
class Result:
    symbol: str
    name: str
    start_year: int
    current_year: int
    primary_currency: str
    secondary_currency: str
    input_currency: InputCurrency
    initial_investment_primary: float
    initial_investment_secondary: float
    current_value_primary: float
    current_value_secondary: float
    total_return_pct: float
    total_gain_secondary: float
    annual_return_pct: float
    shares: float
    initial_price: float
    current_price: float
    initial_exchange_rate: float
    current_exchange_rate: float
    exchange_change_pct: float
    years_elapsed: int
    series: tuple[SeriesPoint, ...] = ()
    skipped_years: tuple[int, ...] = field(default_factory=tuple)


def freeze(mapping: Mapping) -> Mapping:
    """Read-only view over a copy of ``mapping``."""
    return MappingProxyType(dict(mapping))


# --- Currency registry ---

def _build_currency_info() -> dict[str, CurrencyInfo]:
    entries = [
        CurrencyInfo("USD", "US Dollar", "$"),
        CurrencyInfo("KRW", "Korean Won", "₩"),
    ]
    return {e.code: e for e in entries}


CURRENCY_INFO = _build_currency_info()
