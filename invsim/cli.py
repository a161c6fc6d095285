"""CLI entry point for invsim."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from invsim import calculator, formatters
from invsim.dataset import DATASET_ENV_VAR, load_dataset
from invsim.errors import InvsimError, NotFound
from invsim.models import InputCurrency, Query
from invsim.store import ReferenceDataStore


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_store(dataset_path: str | None) -> ReferenceDataStore:
    try:
        return ReferenceDataStore(load_dataset(dataset_path))
    except InvsimError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _check_symbol(store: ReferenceDataStore, symbol: str) -> str:
    try:
        return store.instrument(symbol).symbol
    except NotFound as exc:
        supported = ", ".join(store.symbols)
        raise click.BadParameter(f"{exc}. Supported: {supported}") from exc


@click.command()
@click.option("--symbol", required=False, help="Instrument symbol, e.g. AAPL")
@click.option("--year", required=False, type=int, help="Year the investment was made")
@click.option("--amount", required=False, type=float, help="Amount invested")
@click.option(
    "--usd",
    "primary_input",
    is_flag=True,
    help="Amount is in the primary currency (USD) instead of the secondary (KRW)",
)
@click.option(
    "--output",
    "output_format",
    default="table",
    type=click.Choice(["table", "json", "csv"]),
    help="Output format",
)
@click.option("--chart", is_flag=True, help="Include the value-by-year chart")
@click.option("--facts", is_flag=True, help="Include fun facts about the result")
@click.option("--list-stocks", is_flag=True, help="List available instruments")
@click.option(
    "--list-years", metavar="SYMBOL", help="List selectable start years for SYMBOL"
)
@click.option("--rates", "show_rates", is_flag=True, help="Show exchange-rate history")
@click.option("--prices", metavar="SYMBOL", help="Show price history for SYMBOL")
@click.option(
    "--dataset",
    "dataset_path",
    envvar=DATASET_ENV_VAR,
    type=click.Path(exists=True, dir_okay=False),
    help=f"Alternate reference dataset (JSON). Also read from {DATASET_ENV_VAR}.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(
    symbol: str | None,
    year: int | None,
    amount: float | None,
    primary_input: bool,
    output_format: str,
    chart: bool,
    facts: bool,
    list_stocks: bool,
    list_years: str | None,
    show_rates: bool,
    prices: str | None,
    dataset_path: str | None,
    verbose: bool,
) -> None:
    """Historical Investment Return Simulator.

    Shows what an investment in a stock or ETF made in a past year would be
    worth today in the secondary currency (won for the bundled data), using
    annual price and exchange-rate tables.
    """
    _configure_logging(verbose)
    store = _load_store(dataset_path)

    # Handle reference-data views
    if list_stocks:
        click.echo(formatters.format_instruments(store), nl=False)
        return

    if list_years:
        sym = _check_symbol(store, list_years)
        years = store.available_years(sym)
        click.echo(" ".join(str(y) for y in years))
        return

    if show_rates:
        click.echo(formatters.format_rates(store), nl=False)
        return

    if prices:
        sym = _check_symbol(store, prices)
        click.echo(formatters.format_prices(store, sym), nl=False)
        return

    # Show help if no calculation options provided
    if symbol is None and year is None and amount is None:
        click.echo(click.get_current_context().get_help())
        return

    # Validate required options for calculation
    missing = []
    if not symbol:
        missing.append("--symbol")
    if year is None:
        missing.append("--year")
    if amount is None:
        missing.append("--amount")
    if missing:
        click.echo(f"Error: Missing required options: {', '.join(missing)}", err=True)
        sys.exit(1)

    assert symbol is not None
    assert year is not None
    assert amount is not None

    if amount <= 0:
        click.echo("Error: --amount must be positive.", err=True)
        sys.exit(1)

    sym = _check_symbol(store, symbol)
    if year not in store.available_years(sym):
        years = store.available_years(sym)
        span = f"{min(years)}-{max(years)}" if years else "none"
        click.echo(
            f"Error: No data for {sym} in {year}. Available years: {span}",
            err=True,
        )
        sys.exit(1)

    query = Query(
        symbol=sym,
        start_year=year,
        amount=amount,
        input_currency=(
            InputCurrency.PRIMARY if primary_input else InputCurrency.SECONDARY
        ),
    )

    try:
        result = calculator.calculate(query, store)
    except InvsimError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    # Format and output
    if output_format == "json":
        click.echo(formatters.format_json(result))
    elif output_format == "csv":
        click.echo(formatters.format_csv(result), nl=False)
    else:
        click.echo(formatters.format_table(result), nl=False)
        if chart:
            click.echo(formatters.format_chart(result), nl=False)
        if facts:
            click.echo("Fun facts:")
            click.echo(formatters.format_facts(result), nl=False)


if __name__ == "__main__":
    main()
