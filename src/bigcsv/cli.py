# src/bigcsv/cli.py
"""bigcsv Command Line Interface.

Entry point for the bigcsv CLI tool. `bigcsv scan` streams a CSV file or URL
through the engine, counting rows and reporting row errors.
"""

from __future__ import annotations

import csv
import json
import sys
import threading
from pathlib import Path
from typing import Any, Literal

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from bigcsv import __version__
from bigcsv.contracts import ConfigError, RowError, SourceOpenError
from bigcsv.core.config import BigCSVSettings, load_settings
from bigcsv.engine import Parser, RowCallbacks
from bigcsv.parsing import ReaderConfig
from bigcsv.streams import FileStream, HTTPStream, ReadStream, Stream

__all__ = ["app"]

app = typer.Typer(
    name="bigcsv",
    help="bigcsv: stream large CSV files through concurrent row workers.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"bigcsv version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,  # existence checked in _load_dotenv for a clearer message
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log warnings and errors.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """bigcsv: stream large CSV files through concurrent row workers."""
    from bigcsv.core.logging import configure_logging

    log_level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    configure_logging(json_output=json_logs, level=log_level)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _fail(message: str) -> typer.Exit:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    return typer.Exit(1)


def _resolve_settings(
    settings_path: Path | None,
    workers: int | None,
    header: bool | None,
    delimiter: str | None,
) -> BigCSVSettings:
    """Load settings from file (or defaults) and apply command-line overrides."""
    try:
        settings = load_settings(settings_path) if settings_path is not None else BigCSVSettings()
    except FileNotFoundError as e:
        raise _fail(str(e)) from e
    except (YamlParserError, YamlScannerError) as e:
        raise _fail(f"invalid YAML in {settings_path}: {e}") from e
    except ValidationError as e:
        raise _fail(f"invalid settings:\n{e}") from e

    overrides: dict[str, Any] = {}
    if workers is not None:
        overrides["workers"] = workers
    if header is not None:
        overrides["header"] = header
    if delimiter is not None:
        overrides["reader"] = {**settings.reader.model_dump(), "delimiter": delimiter}
    if not overrides:
        return settings

    try:
        return BigCSVSettings(**{**settings.model_dump(), **overrides})
    except ValidationError as e:
        raise _fail(f"invalid option:\n{e}") from e


def _stream_for(source: str, settings: BigCSVSettings) -> Stream:
    if source == "-":
        return ReadStream(sys.stdin.buffer, close=False)
    if source.startswith(("http://", "https://")):
        return HTTPStream(source, timeout=settings.http.timeout, headers=settings.http.headers)
    return FileStream(source)


@app.command()
def scan(
    source: str = typer.Argument(
        ...,
        help="CSV path (.gz is decompressed), http(s):// URL, or '-' for stdin.",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-w",
        help="Concurrent row workers (default from settings, else 1).",
    ),
    header: bool | None = typer.Option(
        None,
        "--header/--no-header",
        help="Treat the first record as a header.",
    ),
    delimiter: str | None = typer.Option(
        None,
        "--delimiter",
        "-d",
        help="Field delimiter (default ',').",
    ),
    limit: int | None = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Stop reading after this many rows have been processed.",
    ),
    settings_path: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="YAML settings file (BIGCSV_* env vars override it).",
    ),
    output_format: Literal["console", "json"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Summary output format.",
    ),
) -> None:
    """Stream SOURCE through the engine and report rows and errors."""
    settings = _resolve_settings(settings_path, workers, header, delimiter)

    try:
        parser: Parser[list[str]] = Parser(_stream_for(source, settings), reader_config=settings.reader)
    except SourceOpenError as e:
        raise _fail(str(e)) from e

    columns: list[str] | None = None
    if settings.header:
        try:
            first = parser.reader.read()
        except (csv.Error, OSError, EOFError, UnicodeDecodeError) as e:
            parser.close()
            raise _fail(f"could not read header: {e}") from e
        columns = list(first) if first is not None else []

    cancel = threading.Event()
    lock = threading.Lock()
    counted = 0

    def on_row(fields: list[str]) -> None:
        nonlocal counted
        with lock:
            if limit is not None and counted >= limit:
                return
            counted += 1
            if limit is not None and counted >= limit:
                cancel.set()

    def on_error(error: RowError) -> None:
        with lock:
            if output_format == "json":
                typer.echo(json.dumps(error.to_payload()), err=True)
            else:
                typer.secho(str(error), fg=typer.colors.YELLOW, err=True)

    parser.callbacks = RowCallbacks(on_row=on_row, on_error=on_error)

    try:
        result = parser.run(cancel=cancel, workers=settings.workers)
    except ConfigError as e:
        raise _fail(str(e)) from e

    if output_format == "json":
        summary = {"source": source, "rows": counted, "columns": columns, **result.to_dict()}
        typer.echo(json.dumps(summary))
        return

    typer.echo(f"Source:   {source}")
    if columns is not None:
        typer.echo(f"Columns:  {len(columns)} ({', '.join(columns)})")
    typer.echo(f"Rows:     {counted}")
    typer.echo(f"Errors:   {result.error_count}")
    typer.echo(f"Workers:  {settings.workers} (peak {result.max_concurrent})")
    if result.cancelled:
        typer.echo(f"Stopped after --limit {limit}")
    typer.echo(f"Elapsed:  {result.elapsed_seconds:.3f}s")


if __name__ == "__main__":
    app()
