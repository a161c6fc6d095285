"""Test helpers: a small reference dataset with deliberate coverage gaps."""

from __future__ import annotations

import json
from pathlib import Path


def small_document() -> dict:
    # 2003 has an ETF price but no exchange rate; GAPPY has no 2005 price.
    return {
        "primary_currency": "USD",
        "secondary_currency": "KRW",
        "current_year": 2005,
        "current_exchange_rate": 1200.0,
        "exchange_rates": {
            "2000": 1000.0,
            "2001": 1100.0,
            "2002": 1250.0,
            "2004": 1150.0,
            "2005": 1200.0,
        },
        "instruments": [
            {
                "symbol": "ETF",
                "name": "Example ETF",
                "description": "Tracks an example index",
                "sector": "ETF",
                "note": None,
                "prices": {
                    "1999": 8.0,
                    "2000": 10.0,
                    "2001": 12.0,
                    "2002": 9.0,
                    "2003": 11.0,
                    "2004": 15.0,
                    "2005": 20.0,
                },
            },
            {
                "symbol": "GAPPY",
                "name": "Gappy Corp.",
                "description": "Stopped reporting before the current year",
                "sector": "Technology",
                "note": "Split-adjusted for 2:1 split (2002)",
                "prices": {"2001": 5.0, "2002": 4.0, "2004": 6.0},
            },
        ],
    }


def write_document(path: Path, doc: dict | None = None) -> Path:
    path.write_text(json.dumps(doc if doc is not None else small_document()))
    return path
