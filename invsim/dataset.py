"""Loading and validation of reference dataset snapshots.

A dataset is a JSON document holding the annual exchange-rate table, the
instrument price tables and the "current" boundary (year and rate) the
engine projects up to. The bundled snapshot ships as package data; an
alternate snapshot can be supplied by path or through ``INVSIM_DATASET``.

Document layout:
    {
        "primary_currency": "USD",
        "secondary_currency": "KRW",
        "current_year": 2025,
        "current_exchange_rate": 1439.01,
        "exchange_rates": {"1994": 803.45, ...},
        "instruments": [
            {"symbol": "AAPL", "name": ..., "description": ...,
             "sector": ..., "note": null, "prices": {"1994": 0.89, ...}}
        ]
    }
"""

from __future__ import annotations

import json
import logging
import math
from importlib import resources
from pathlib import Path
from typing import Any

from invsim.errors import DatasetError
from invsim.models import Dataset, Instrument, freeze

logger = logging.getLogger(__name__)

BUNDLED_DATASET = "reference.json"
DATASET_ENV_VAR = "INVSIM_DATASET"


def _year(raw: Any) -> int:
    try:
        year = int(raw)
    except (TypeError, ValueError) as exc:
        raise DatasetError(f"Invalid year key: {raw!r}") from exc
    if str(year) != str(raw).strip():
        raise DatasetError(f"Invalid year key: {raw!r}")
    return year


def _positive(raw: Any, what: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise DatasetError(f"{what} must be a number, got {raw!r}")
    value = float(raw)
    if not math.isfinite(value) or value <= 0:
        raise DatasetError(f"{what} must be positive, got {raw!r}")
    return value


def _year_table(raw: Any, what: str) -> dict[int, float]:
    if not isinstance(raw, dict) or not raw:
        raise DatasetError(f"{what} must be a non-empty mapping of year to value")
    table: dict[int, float] = {}
    for key, value in raw.items():
        year = _year(key)
        table[year] = _positive(value, f"{what} for {year}")
    return dict(sorted(table.items()))


def _instrument(raw: Any) -> Instrument:
    if not isinstance(raw, dict):
        raise DatasetError(f"Instrument entry must be an object, got {raw!r}")
    try:
        symbol = str(raw["symbol"]).strip().upper()
        prices = _year_table(raw["prices"], f"{symbol} price")
        return Instrument(
            symbol=symbol,
            name=str(raw["name"]),
            description=str(raw.get("description", "")),
            sector=str(raw.get("sector", "")),
            prices=freeze(prices),
            note=raw.get("note"),
        )
    except KeyError as exc:
        raise DatasetError(f"Instrument entry missing {exc.args[0]!r}") from exc


def parse_dataset(data: dict[str, Any]) -> Dataset:
    """Validate a decoded dataset document and build a ``Dataset``."""
    if not isinstance(data, dict):
        raise DatasetError("Dataset document must be a JSON object")
    try:
        rates = _year_table(data["exchange_rates"], "Exchange rate")
        current_year = _year(data["current_year"])
        current_rate = _positive(
            data["current_exchange_rate"], "Current exchange rate"
        )
        raw_instruments = data["instruments"]
        primary = str(data.get("primary_currency", "USD")).upper()
        secondary = str(data.get("secondary_currency", "KRW")).upper()
    except KeyError as exc:
        raise DatasetError(f"Dataset missing {exc.args[0]!r}") from exc

    if not isinstance(raw_instruments, list) or not raw_instruments:
        raise DatasetError("Dataset must list at least one instrument")

    instruments: dict[str, Instrument] = {}
    for entry in raw_instruments:
        inst = _instrument(entry)
        if inst.symbol in instruments:
            raise DatasetError(f"Duplicate instrument symbol {inst.symbol!r}")
        if not any(y <= current_year for y in inst.prices):
            raise DatasetError(
                f"{inst.symbol} has no price at or before {current_year}"
            )
        instruments[inst.symbol] = inst

    return Dataset(
        primary_currency=primary,
        secondary_currency=secondary,
        current_year=current_year,
        current_exchange_rate=current_rate,
        exchange_rates=freeze(rates),
        instruments=freeze(instruments),
    )


def load_dataset(path: Path | str | None = None) -> Dataset:
    """Load a dataset from ``path``, or the bundled snapshot when omitted."""
    if path is None:
        source = resources.files("invsim") / "data" / BUNDLED_DATASET
        text = source.read_text(encoding="utf-8")
        origin = f"bundled {BUNDLED_DATASET}"
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise DatasetError(f"Cannot read dataset {str(path)!r}: {exc}") from exc
        origin = str(path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"Dataset {origin} is not valid JSON: {exc}") from exc

    dataset = parse_dataset(data)
    logger.debug(
        "Loaded dataset from %s: %d instruments, rates %d-%d",
        origin,
        len(dataset.instruments),
        min(dataset.exchange_rates),
        max(dataset.exchange_rates),
    )
    return dataset
