"""Output formatters for table, JSON, and CSV."""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Mapping

from rich import box
from rich.console import Console
from rich.table import Table

from invsim.calculator import long_run_change, round_half_up, year_over_year
from invsim.models import CURRENCY_INFO, Result
from invsim.store import ReferenceDataStore

CHART_WIDTH = 50
CHART_BAR = "█"


def _fmt_pct(val: float, plus_sign: bool = True, places: int = 2) -> str:
    """Format a percentage value (already x100)."""
    if plus_sign and val > 0:
        return f"+{val:.{places}f}%"
    return f"{val:.{places}f}%"


def _fmt_return(val: float) -> str:
    """Result percentages: zero counts as non-negative and gets a "+"."""
    if val >= 0:
        return f"+{abs(val):.2f}%"
    return f"{val:.2f}%"


def _fmt_number(value: float) -> str:
    """Format a number with K/M/B suffix, keeping max 3 digits left of the decimal."""
    abs_val = abs(value)
    if abs_val >= 1_000_000_000:
        return f"{value / 1_000_000_000:.2f}B"
    if abs_val >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    if abs_val >= 1_000:
        return f"{value / 1_000:.2f}K"
    return f"{value:.2f}"


def _symbol(currency: str) -> str:
    info = CURRENCY_INFO.get(currency)
    return info.symbol if info else f"{currency} "


def _fmt_money(value: float, currency: str) -> str:
    """Whole-unit amount with thousands separators, e.g. ₩1,234,567."""
    return f"{_symbol(currency)}{round_half_up(value):,}"


def _fmt_price(value: float, currency: str) -> str:
    return f"{_symbol(currency)}{value:,.2f}"


def _console(buf: io.StringIO) -> Console:
    return Console(file=buf, width=120, no_color=True)


def format_table(result: Result) -> str:
    """Format a result as a Rich table rendered to string."""
    buf = io.StringIO()
    rich_console = _console(buf)
    pri = result.primary_currency
    sec = result.secondary_currency

    header = (
        f"Investment Return Simulation\n"
        f"============================\n"
        f"{result.symbol} - {result.name}\n"
        f"Period: {result.start_year} → {result.current_year} "
        f"({result.years_elapsed} years)\n"
    )

    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("Metric", style="bold")
    table.add_column(sec, justify="right")
    table.add_column(pri, justify="right")

    table.add_row(
        "Initial investment",
        _fmt_money(result.initial_investment_secondary, sec),
        _fmt_price(result.initial_investment_primary, pri),
    )
    table.add_row(
        "Current value",
        _fmt_money(result.current_value_secondary, sec),
        _fmt_price(result.current_value_primary, pri),
    )
    table.add_row("Total gain", _fmt_money(result.total_gain_secondary, sec), "")
    table.add_row("Total return", _fmt_return(result.total_return_pct), "")
    table.add_row("Annual return", _fmt_return(result.annual_return_pct), "")
    table.add_row("Shares", "", f"{result.shares:,.2f}")
    table.add_row(
        "Share price",
        "",
        f"{_fmt_price(result.initial_price, pri)} → "
        f"{_fmt_price(result.current_price, pri)}",
    )
    table.add_row(
        f"{sec}/{pri} rate",
        f"{_fmt_price(result.initial_exchange_rate, sec)} → "
        f"{_fmt_price(result.current_exchange_rate, sec)}",
        "",
    )
    table.add_row("Rate change", _fmt_return(result.exchange_change_pct), "")

    rich_console.print(header, end="")
    rich_console.print(table)

    if result.skipped_years:
        skipped = ", ".join(str(y) for y in result.skipped_years)
        rich_console.print(f"⚠ No reference data for: {skipped}")

    return buf.getvalue()


def format_chart(result: Result) -> str:
    """Render the value series as a horizontal bar chart."""
    buf = io.StringIO()
    rich_console = _console(buf)
    sec = result.secondary_currency

    table = Table(
        title=f"Investment value ({sec})", box=box.SIMPLE, pad_edge=False
    )
    table.add_column("Year")
    table.add_column("Value", justify="right")
    table.add_column("")

    peak = max((p.value for p in result.series), default=0)
    for point in result.series:
        width = round(point.value / peak * CHART_WIDTH) if peak > 0 else 0
        table.add_row(
            str(point.year),
            f"{_symbol(sec)}{_fmt_number(point.value)}",
            CHART_BAR * width,
        )

    rich_console.print(table)
    return buf.getvalue()


def fun_facts(result: Result) -> list[str]:
    """Short narrative lines summarising a result."""
    sec = result.secondary_currency
    outcome = "gain" if result.total_return_pct > 0 else "loss"
    facts = [
        f"Holding {result.symbol} for {result.years_elapsed} years means "
        f"{result.shares:.2f} shares.",
        f"An initial {_fmt_money(result.initial_investment_secondary, sec)} "
        f"is now worth {_fmt_money(result.current_value_secondary, sec)}.",
        f"That is a {abs(result.total_return_pct):.1f}% {outcome}.",
        f"The average annual return was {abs(result.annual_return_pct):.1f}%.",
        f"The exchange rate moved {result.exchange_change_pct:.1f}%.",
    ]
    if result.total_return_pct > 1000:
        facts.append("Remarkable: more than a 1000% return!")
    elif result.total_return_pct > 500:
        facts.append("Great call: the investment grew more than fivefold!")
    elif result.total_return_pct > 100:
        facts.append("A fine investment choice!")
    return facts


def format_facts(result: Result) -> str:
    return "".join(f"  • {fact}\n" for fact in fun_facts(result))


def format_json(result: Result) -> str:
    """Format a result as JSON."""
    data: dict[str, Any] = {
        "symbol": result.symbol,
        "name": result.name,
        "period": {
            "start_year": result.start_year,
            "current_year": result.current_year,
            "years": result.years_elapsed,
        },
        "currencies": {
            "primary": result.primary_currency,
            "secondary": result.secondary_currency,
            "input": result.input_currency.value,
        },
        "initial_investment_primary": round(result.initial_investment_primary, 2),
        "initial_investment_secondary": round_half_up(
            result.initial_investment_secondary
        ),
        "current_value_primary": round(result.current_value_primary, 2),
        "current_value_secondary": round_half_up(result.current_value_secondary),
        "total_gain_secondary": round_half_up(result.total_gain_secondary),
        "total_return_pct": round(result.total_return_pct, 2),
        "annual_return_pct": round(result.annual_return_pct, 2),
        "shares": round(result.shares, 4),
        "initial_price": round(result.initial_price, 2),
        "current_price": round(result.current_price, 2),
        "initial_exchange_rate": result.initial_exchange_rate,
        "current_exchange_rate": result.current_exchange_rate,
        "exchange_change_pct": round(result.exchange_change_pct, 2),
        "series": [{"year": p.year, "value": p.value} for p in result.series],
    }
    if result.skipped_years:
        data["skipped_years"] = list(result.skipped_years)

    return json.dumps(data, indent=2)


def format_csv(result: Result) -> str:
    """Format the value series as CSV, one row per year."""
    buf = io.StringIO()
    fields = ["symbol", "year", "value", "currency"]
    writer = csv.DictWriter(buf, fieldnames=fields)
    writer.writeheader()

    for p in result.series:
        writer.writerow(
            {
                "symbol": result.symbol,
                "year": p.year,
                "value": p.value,
                "currency": result.secondary_currency,
            }
        )

    return buf.getvalue()


def format_instruments(store: ReferenceDataStore) -> str:
    """Overview of every instrument in the dataset."""
    buf = io.StringIO()
    rich_console = _console(buf)
    pri = store.primary_currency

    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Sector")
    table.add_column("Current Price", justify="right")
    table.add_column("Long-run", justify="right")
    table.add_column("Years", justify="right")

    for symbol in store.symbols:
        inst = store.instrument(symbol)
        change = long_run_change(inst, store)
        years = store.available_years(symbol)
        table.add_row(
            inst.symbol,
            inst.name,
            inst.sector,
            _fmt_price(store.current_price(symbol), pri),
            _fmt_pct(change, places=1) if change is not None else "—",
            f"{min(years)}-{max(years)}" if years else "—",
        )

    rich_console.print(table)
    return buf.getvalue()


def _history_table(
    title: str, values: Mapping[int, float], currency: str, note: str | None = None
) -> str:
    buf = io.StringIO()
    rich_console = _console(buf)

    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("Year")
    table.add_column("Value", justify="right")
    table.add_column("Change", justify="right")

    for year, value, change in year_over_year(values):
        table.add_row(
            str(year),
            _fmt_price(value, currency),
            _fmt_pct(change) if change is not None else "—",
        )

    rich_console.print(title)
    rich_console.print(table)
    if note:
        rich_console.print(f"Note: {note}")
    return buf.getvalue()


def format_rates(store: ReferenceDataStore) -> str:
    """Exchange-rate history, newest first."""
    sec = store.secondary_currency
    return _history_table(
        f"{sec}/{store.primary_currency} exchange rates",
        store.dataset.exchange_rates,
        sec,
    )


def format_prices(store: ReferenceDataStore, symbol: str) -> str:
    """Price history of one instrument, newest first."""
    inst = store.instrument(symbol)
    return _history_table(
        f"{inst.symbol} - {inst.name} (split-adjusted)",
        inst.prices,
        store.primary_currency,
        note=inst.note,
    )
