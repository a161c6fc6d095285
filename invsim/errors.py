"""Exception types raised by the store, the dataset loader and the engine."""

from __future__ import annotations


class InvsimError(ValueError):
    """Base class for all invsim errors."""


class InvalidQuery(InvsimError):
    """The query cannot be evaluated against the reference data."""


class ComputationError(InvsimError):
    """A derived quantity did not come out as a finite real number."""


class NotFound(InvsimError, KeyError):
    """A lookup in the reference data store missed."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class ReferenceDataGap(InvsimError):
    """A year is covered by one reference table but not the other."""

    def __init__(self, symbol: str, year: int) -> None:
        super().__init__(f"No complete reference data for {symbol} in {year}")
        self.symbol = symbol
        self.year = year


class DatasetError(InvsimError):
    """A reference dataset document is malformed."""
