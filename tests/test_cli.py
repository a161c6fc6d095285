"""Tests for CLI entry point."""

from __future__ import annotations

import json
from unittest.mock import patch

from click.testing import CliRunner

from helpers import small_document, write_document
from invsim.cli import main
from invsim.errors import ComputationError


class TestCliValidation:
    def test_missing_required(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--symbol", "AAPL"])
        assert result.exit_code != 0
        assert "Missing required" in result.output

    def test_zero_amount(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["--symbol", "AAPL", "--year", "1999", "--amount", "0"]
        )
        assert result.exit_code != 0
        assert "must be positive" in result.output

    def test_unknown_symbol(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["--symbol", "NOPE", "--year", "1999", "--amount", "1000"]
        )
        assert result.exit_code != 0
        assert "Unknown instrument" in result.output

    def test_year_without_exchange_rate(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["--symbol", "SPY", "--year", "1993", "--amount", "1000"]
        )
        assert result.exit_code != 0
        assert "No data for SPY in 1993" in result.output
        assert "1994-2024" in result.output

    def test_current_year_rejected(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["--symbol", "AAPL", "--year", "2025", "--amount", "1000"]
        )
        assert result.exit_code != 0

    @patch("invsim.cli.calculator.calculate")
    def test_engine_error_reported(self, mock_calculate) -> None:  # type: ignore[no-untyped-def]
        mock_calculate.side_effect = ComputationError("CAGR is not a real number")
        runner = CliRunner()
        result = runner.invoke(
            main, ["--symbol", "AAPL", "--year", "1999", "--amount", "1000"]
        )
        assert result.exit_code == 1
        assert "Error: CAGR is not a real number" in result.output


class TestCliOutput:
    def test_table_output(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["--symbol", "AAPL", "--year", "1999", "--amount", "1000000"]
        )
        assert result.exit_code == 0
        assert "AAPL - Apple Inc." in result.output
        assert "₩104,687,662" in result.output
        assert "+10368.77%" in result.output

    def test_usd_input(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--symbol", "AAPL", "--year", "1999", "--amount", "1000", "--usd",
             "--output", "json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["currencies"]["input"] == "primary"
        assert data["initial_investment_primary"] == 1000.0
        assert data["initial_investment_secondary"] == 1_188_820

    def test_json_output(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--symbol", "aapl", "--year", "1999", "--amount", "1000000",
             "--output", "json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["symbol"] == "AAPL"
        assert data["series"][0]["year"] == 1999
        assert data["series"][-1]["year"] == 2025

    def test_csv_output(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--symbol", "SPY", "--year", "2020", "--amount", "1000000",
             "--output", "csv"],
        )
        assert result.exit_code == 0
        assert result.output.startswith("symbol,year,value,currency")
        assert len(result.output.strip().splitlines()) == 7

    def test_chart_and_facts(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--symbol", "NVDA", "--year", "2015", "--amount", "1000000",
             "--chart", "--facts"],
        )
        assert result.exit_code == 0
        assert "Investment value (KRW)" in result.output
        assert "Fun facts:" in result.output
        assert "1000%" in result.output


class TestCliReferenceViews:
    def test_list_stocks(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--list-stocks"])
        assert result.exit_code == 0
        assert "BRK.A" in result.output
        assert "Vanguard FTSE Developed Markets ETF" in result.output

    def test_list_years(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--list-years", "spy"])
        assert result.exit_code == 0
        years = result.output.split()
        assert years[0] == "2024"
        assert years[-1] == "1994"
        assert "1993" not in years

    def test_list_years_unknown(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--list-years", "NOPE"])
        assert result.exit_code != 0
        assert "Supported:" in result.output

    def test_rates(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--rates"])
        assert result.exit_code == 0
        assert "1401.44" in result.output.replace(",", "")

    def test_prices(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--prices", "AMZN"])
        assert result.exit_code == 0
        assert "20:1 split" in result.output


class TestCliDataset:
    def test_alternate_dataset(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        path = write_document(tmp_path / "data.json")
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--dataset", str(path), "--symbol", "ETF", "--year", "2000",
             "--amount", "1000000", "--output", "json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["current_value_secondary"] == 2_400_000
        assert data["skipped_years"] == [2003]

    def test_dataset_from_env(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        path = write_document(tmp_path / "data.json")
        runner = CliRunner()
        result = runner.invoke(
            main, ["--list-years", "GAPPY"], env={"INVSIM_DATASET": str(path)}
        )
        assert result.exit_code == 0
        assert result.output.split() == ["2004", "2002", "2001"]

    def test_malformed_dataset(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        path = tmp_path / "bad.json"
        path.write_text('{"current_year": 2025}')
        runner = CliRunner()
        result = runner.invoke(main, ["--dataset", str(path), "--list-stocks"])
        assert result.exit_code == 1
        assert "Dataset missing" in result.output

    def test_dataset_with_unpriced_instrument(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        doc = small_document()
        doc["instruments"][1]["prices"] = {"2007": 9.0}
        path = write_document(tmp_path / "data.json", doc)
        runner = CliRunner()
        result = runner.invoke(main, ["--dataset", str(path), "--list-stocks"])
        assert result.exit_code == 1
        assert "Error: GAPPY has no price at or before 2005" in result.output

    def test_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Historical Investment Return Simulator" in result.output

    def test_no_options_shows_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [])
        assert result.exit_code == 0
        assert "Usage:" in result.output
