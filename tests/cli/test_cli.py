# tests/cli/test_cli.py
"""Tests for the bigcsv CLI."""

from __future__ import annotations

import gzip
import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from bigcsv import __version__
from bigcsv.cli import app
from tests.helpers.rows import numbers_csv

runner = CliRunner()


def _summary(output: str) -> dict[str, Any]:
    """The JSON summary is always the last line written to stdout."""
    result: dict[str, Any] = json.loads(output.strip().splitlines()[-1])
    return result


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "numbers.csv"
    path.write_text(numbers_csv(5))
    return path


class TestCLIBasics:
    """Basic CLI functionality."""

    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"bigcsv version {__version__}" in result.stdout

    def test_help_lists_scan(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "scan" in result.stdout


class TestScan:
    """bigcsv scan."""

    def test_console_summary(self, csv_file: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "-q", "scan", str(csv_file)])

        assert result.exit_code == 0
        assert "Rows:     5" in result.stdout
        assert "Errors:   0" in result.stdout
        assert "Workers:  1" in result.stdout

    def test_json_summary(self, csv_file: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "-q", "scan", str(csv_file), "--format", "json", "-w", "3"])

        assert result.exit_code == 0
        summary = _summary(result.stdout)
        assert summary["rows"] == 5
        assert summary["rows_read"] == 5
        assert summary["rows_failed"] == 0
        assert summary["columns"] is None
        assert summary["max_concurrent"] <= 3
        assert summary["cancelled"] is False

    def test_header_is_reported_and_not_counted(self, tmp_path: Path) -> None:
        path = tmp_path / "people.csv"
        path.write_text("id,name\n1,ada\n2,grace\n")

        result = runner.invoke(app, ["--no-dotenv", "-q", "scan", str(path), "--header", "-f", "json"])

        assert result.exit_code == 0
        summary = _summary(result.stdout)
        assert summary["columns"] == ["id", "name"]
        assert summary["rows"] == 2

    def test_delimiter_option(self, tmp_path: Path) -> None:
        path = tmp_path / "semi.csv"
        path.write_text("1;a\n2;b\n")

        result = runner.invoke(app, ["--no-dotenv", "-q", "scan", str(path), "-d", ";", "--header", "-f", "json"])

        assert _summary(result.stdout)["columns"] == ["1", "a"]

    def test_limit_stops_reading(self, tmp_path: Path) -> None:
        path = tmp_path / "many.csv"
        path.write_text(numbers_csv(100))

        result = runner.invoke(app, ["--no-dotenv", "-q", "scan", str(path), "--limit", "10", "-f", "json"])

        assert result.exit_code == 0
        summary = _summary(result.stdout)
        assert summary["rows"] == 10
        assert summary["cancelled"] is True
        assert summary["rows_read"] == 10

    def test_gzip_source(self, tmp_path: Path) -> None:
        path = tmp_path / "numbers.csv.gz"
        path.write_bytes(gzip.compress(numbers_csv(7).encode()))

        result = runner.invoke(app, ["--no-dotenv", "-q", "scan", str(path), "-f", "json"])

        assert result.exit_code == 0
        assert _summary(result.stdout)["rows"] == 7

    def test_row_errors_counted(self, tmp_path: Path) -> None:
        path = tmp_path / "ragged.csv"
        path.write_text("1,a\n2\n3,c\n")

        result = runner.invoke(app, ["--no-dotenv", "-q", "scan", str(path), "-f", "json"])

        assert result.exit_code == 0
        summary = _summary(result.stdout)
        assert summary["read_errors"] == 1
        assert summary["rows"] == 2

    def test_missing_file_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "scan", str(tmp_path / "missing.csv")])

        assert result.exit_code == 1

    def test_settings_file_applied(self, csv_file: Path, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("workers: 2\nheader: true\n")

        result = runner.invoke(app, ["--no-dotenv", "-q", "scan", str(csv_file), "-s", str(settings), "-f", "json"])

        assert result.exit_code == 0
        summary = _summary(result.stdout)
        assert summary["columns"] == ["1", "row-1"]
        assert summary["rows"] == 4

    def test_invalid_settings_fail(self, csv_file: Path, tmp_path: Path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("workers: 0\n")

        result = runner.invoke(app, ["--no-dotenv", "scan", str(csv_file), "-s", str(settings)])

        assert result.exit_code == 1

    def test_missing_settings_fail(self, csv_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "scan", str(csv_file), "-s", str(tmp_path / "none.yaml")])

        assert result.exit_code == 1

    def test_invalid_worker_option_fails(self, csv_file: Path) -> None:
        result = runner.invoke(app, ["--no-dotenv", "scan", str(csv_file), "-w", "0"])

        assert result.exit_code == 1
