"""Read-only lookups over a reference dataset."""

from __future__ import annotations

from invsim.errors import NotFound, ReferenceDataGap
from invsim.models import Dataset, Instrument


class ReferenceDataStore:
    """Exchange-rate and price lookups for one dataset snapshot.

    Built once per process and passed explicitly to the engine and the
    formatters. Nothing here mutates the dataset.
    """

    __slots__ = ("_dataset",)

    def __init__(self, dataset: Dataset) -> None:
        self._dataset = dataset

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def current_year(self) -> int:
        return self._dataset.current_year

    @property
    def current_exchange_rate(self) -> float:
        return self._dataset.current_exchange_rate

    @property
    def primary_currency(self) -> str:
        return self._dataset.primary_currency

    @property
    def secondary_currency(self) -> str:
        return self._dataset.secondary_currency

    @property
    def symbols(self) -> list[str]:
        return list(self._dataset.instruments)

    def years(self) -> list[int]:
        """Years covered by the exchange-rate table, ascending."""
        return sorted(self._dataset.exchange_rates)

    def exchange_rate(self, year: int) -> float:
        try:
            return self._dataset.exchange_rates[year]
        except KeyError:
            raise NotFound(f"No exchange rate for {year}") from None

    def instrument(self, symbol: str) -> Instrument:
        try:
            return self._dataset.instruments[symbol.strip().upper()]
        except KeyError:
            raise NotFound(f"Unknown instrument {symbol!r}") from None

    def price(self, symbol: str, year: int) -> float:
        inst = self.instrument(symbol)
        try:
            return inst.prices[year]
        except KeyError:
            raise NotFound(f"No {inst.symbol} price for {year}") from None

    def has_coverage(self, symbol: str, year: int) -> bool:
        """True when both the price and the exchange-rate tables have ``year``."""
        return (
            year in self.instrument(symbol).prices
            and year in self._dataset.exchange_rates
        )

    def require_coverage(self, symbol: str, year: int) -> None:
        if not self.has_coverage(symbol, year):
            raise ReferenceDataGap(self.instrument(symbol).symbol, year)

    def available_years(self, symbol: str) -> list[int]:
        """Selectable start years for ``symbol``, most recent first.

        A year qualifies only if it has a price, an exchange rate and lies
        strictly before the current year.
        """
        inst = self.instrument(symbol)
        return sorted(
            (
                y
                for y in inst.prices
                if y < self.current_year and y in self._dataset.exchange_rates
            ),
            reverse=True,
        )

    def current_price_year(self, symbol: str) -> int:
        """Year whose price stands in for the current price.

        The current year itself when priced, otherwise the latest earlier
        year with a price.
        """
        inst = self.instrument(symbol)
        if self.current_year in inst.prices:
            return self.current_year
        earlier = [y for y in inst.prices if y < self.current_year]
        if not earlier:
            raise NotFound(
                f"No {inst.symbol} price at or before {self.current_year}"
            )
        return max(earlier)

    def current_price(self, symbol: str) -> float:
        return self.price(symbol, self.current_price_year(symbol))
