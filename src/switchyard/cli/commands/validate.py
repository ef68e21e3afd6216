"""Validate command for the Switchyard CLI.

Checks a YAML client profile and shows what the fetch command would use.

Exit codes:
  0: Valid
  1: Invalid (unreadable, unparseable or failing schema validation)
"""

from __future__ import annotations

from pathlib import Path

import typer

from switchyard.core.exceptions import ConfigurationError

from ..helpers import configure_global_logging, load_client_config
from ..output import console, create_config_table, output_error


def validate(
    config_file: Path = typer.Argument(
        ...,
        help="Path to YAML client profile",
        exists=True,
        readable=True,
        dir_okay=False,
    ),
) -> None:
    """Validate a client profile file."""
    configure_global_logging(console)

    try:
        config = load_client_config(config_file)
    except ConfigurationError as e:
        output_error(str(e))
        raise typer.Exit(1) from None

    console.print(f"[green]✓[/green] {config_file.name} is valid")
    console.print()
    console.print(create_config_table(config))
