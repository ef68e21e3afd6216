"""Switchyard CLI.

Package structure:
    cli/
    ├── __init__.py       # This file - app assembly and global options
    ├── helpers.py        # Logging state, client profile loading
    ├── output.py         # Rich formatting
    └── commands/
        ├── fetch.py      # fetch command
        └── validate.py   # validate command
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from switchyard import __version__

from . import helpers as helpers
from .commands import fetch, validate
from .helpers import configure_global_logging, set_log_file, set_log_format, set_log_level
from .output import console

app = typer.Typer(
    name="switchyard",
    help="Request dispatching with endpoint failover",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Switchyard v{__version__}")
        raise typer.Exit()


def log_level_callback(value: str | None) -> str | None:
    """Set log level from CLI option."""
    if value:
        set_log_level(value)
    return value


def log_file_callback(value: Path | None) -> Path | None:
    """Set log file path from CLI option."""
    if value:
        set_log_file(value)
    return value


def log_format_callback(value: str | None) -> str | None:
    """Set log format from CLI option."""
    if value:
        set_log_format(value)
    return value


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-L",
            callback=log_level_callback,
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
            envvar="SWITCHYARD_LOG_LEVEL",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            callback=log_file_callback,
            help="Path for log file output",
            envvar="SWITCHYARD_LOG_FILE",
        ),
    ] = None,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            callback=log_format_callback,
            help="Log format: json, console, or both",
            envvar="SWITCHYARD_LOG_FORMAT",
        ),
    ] = None,
) -> None:
    """Switchyard - request dispatching with endpoint failover."""
    configure_global_logging(console)


app.command()(fetch)
app.command()(validate)


__all__ = ["app", "main"]
