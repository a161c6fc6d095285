"""Pure calculation functions for historical investment returns."""

from __future__ import annotations

import logging
import math
from typing import Iterator, Mapping

from invsim.errors import ComputationError, InvalidQuery, NotFound, ReferenceDataGap
from invsim.models import Instrument, InputCurrency, Query, Result, SeriesPoint
from invsim.store import ReferenceDataStore

logger = logging.getLogger(__name__)

# Years tried, in order, as the base of the long-run change shown per instrument.
LONG_RUN_BASE_YEARS = (2000, 1999, 1998)


def convert_to_currency(value_base: float, fx_rate: float) -> float:
    """Convert a base-currency value using an FX rate (units of target per 1 base)."""
    return value_base * fx_rate


def convert_from_currency(value_target: float, fx_rate: float) -> float:
    """Inverse of ``convert_to_currency``."""
    return value_target / fx_rate


def share_count(amount: float, unit_price: float) -> float:
    """Fractional number of units ``amount`` buys at ``unit_price``."""
    return amount / unit_price


def total_return(start_value: float, end_value: float) -> float:
    """Total return as a decimal (0.232 = 23.2%)."""
    return (end_value - start_value) / start_value


def cagr(start_value: float, end_value: float, years: float) -> float:
    """Compound Annual Growth Rate as a decimal.

    Raises ``ComputationError`` unless both values are positive and the
    period is positive, so callers never see NaN or a complex number.
    """
    if years <= 0:
        raise ComputationError("Period must be positive")
    if start_value <= 0 or end_value <= 0:
        raise ComputationError(
            f"CAGR undefined for start={start_value!r}, end={end_value!r}"
        )
    rate = (end_value / start_value) ** (1 / years)
    if isinstance(rate, complex) or not math.isfinite(rate):
        raise ComputationError(f"CAGR is not a real number: {rate!r}")
    return float(rate) - 1


def fx_change(fx_start: float, fx_end: float) -> float:
    """Change in FX rate as a decimal.

    Positive means the primary currency buys more of the secondary one.
    """
    return (fx_end / fx_start) - 1


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves up."""
    return math.floor(value + 0.5)


def _validate(query: Query, store: ReferenceDataStore) -> Instrument:
    try:
        inst = store.instrument(query.symbol)
    except NotFound as exc:
        raise InvalidQuery(str(exc)) from None

    amount = query.amount
    if (
        isinstance(amount, bool)
        or not isinstance(amount, (int, float))
        or not math.isfinite(amount)
        or amount <= 0
    ):
        raise InvalidQuery(f"Amount must be a finite positive number, got {amount!r}")

    year = query.start_year
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidQuery(f"Start year must be an integer, got {year!r}")
    if year >= store.current_year:
        raise InvalidQuery(
            f"Start year {year} must be before {store.current_year}"
        )
    if year not in inst.prices:
        raise InvalidQuery(f"No {inst.symbol} price for {year}")
    try:
        store.exchange_rate(year)
    except NotFound as exc:
        raise InvalidQuery(str(exc)) from None
    return inst


def value_series(
    store: ReferenceDataStore, symbol: str, start_year: int, shares: float
) -> tuple[list[SeriesPoint], list[int]]:
    """Rounded secondary-currency value of ``shares`` for each covered year.

    Spans ``start_year`` through the current year inclusive. Years missing
    from either table are skipped and returned separately. Raises
    ``ComputationError`` when a point overflows.
    """
    points: list[SeriesPoint] = []
    skipped: list[int] = []
    for year in range(start_year, store.current_year + 1):
        try:
            store.require_coverage(symbol, year)
        except ReferenceDataGap as gap:
            logger.debug("Skipping series point: %s", gap)
            skipped.append(year)
            continue
        value = shares * store.price(symbol, year) * store.exchange_rate(year)
        if not math.isfinite(value):
            raise ComputationError(f"Value for {year} is not a finite number")
        points.append(SeriesPoint(year=year, value=round_half_up(value)))
    return points, skipped


def calculate(query: Query, store: ReferenceDataStore) -> Result:
    """Project ``query`` forward to the store's current year.

    Raises ``InvalidQuery`` for unusable inputs and ``ComputationError`` when
    a derived figure is not a real number. No partial result is returned.
    """
    inst = _validate(query, store)
    year = query.start_year

    initial_rate = store.exchange_rate(year)
    current_rate = store.current_exchange_rate
    initial_price = inst.prices[year]
    current_price_year = store.current_price_year(inst.symbol)
    current_price = inst.prices[current_price_year]
    logger.debug(
        "%s %d: rate %.2f -> %.2f, price %.2f -> %.2f (priced %d)",
        inst.symbol,
        year,
        initial_rate,
        current_rate,
        initial_price,
        current_price,
        current_price_year,
    )

    # Both conversions use the start-year rate.
    if query.input_currency is InputCurrency.PRIMARY:
        amount_primary = float(query.amount)
        amount_secondary = convert_to_currency(amount_primary, initial_rate)
    else:
        amount_secondary = float(query.amount)
        amount_primary = convert_from_currency(amount_secondary, initial_rate)

    shares = share_count(amount_primary, initial_price)
    current_value_primary = shares * current_price
    current_value_secondary = convert_to_currency(current_value_primary, current_rate)

    years_elapsed = store.current_year - year
    annual = cagr(amount_secondary, current_value_secondary, years_elapsed)

    points, skipped = value_series(store, inst.symbol, year, shares)

    return Result(
        symbol=inst.symbol,
        name=inst.name,
        start_year=year,
        current_year=store.current_year,
        primary_currency=store.primary_currency,
        secondary_currency=store.secondary_currency,
        input_currency=query.input_currency,
        initial_investment_primary=amount_primary,
        initial_investment_secondary=amount_secondary,
        current_value_primary=current_value_primary,
        current_value_secondary=current_value_secondary,
        total_return_pct=total_return(amount_secondary, current_value_secondary) * 100,
        total_gain_secondary=current_value_secondary - amount_secondary,
        annual_return_pct=annual * 100,
        shares=shares,
        initial_price=initial_price,
        current_price=current_price,
        initial_exchange_rate=initial_rate,
        current_exchange_rate=current_rate,
        exchange_change_pct=fx_change(initial_rate, current_rate) * 100,
        years_elapsed=years_elapsed,
        series=tuple(points),
        skipped_years=tuple(skipped),
    )


def long_run_change(inst: Instrument, store: ReferenceDataStore) -> float | None:
    """Percent change from the first priced base year to the current price.

    None when the instrument has no price in any of ``LONG_RUN_BASE_YEARS``.
    """
    for base_year in LONG_RUN_BASE_YEARS:
        if base_year in inst.prices:
            old = inst.prices[base_year]
            break
    else:
        return None
    return total_return(old, store.current_price(inst.symbol)) * 100


def year_over_year(
    table: Mapping[int, float],
) -> Iterator[tuple[int, float, float | None]]:
    """Yield ``(year, value, change_pct)`` newest first.

    ``change_pct`` compares against the immediately preceding calendar year
    and is None when that year is absent.
    """
    for year in sorted(table, reverse=True):
        value = table[year]
        prev = table.get(year - 1)
        change = total_return(prev, value) * 100 if prev is not None else None
        yield year, value, change
