"""Rich output formatting for the Switchyard CLI."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from switchyard.core.config import ClientConfig
from switchyard.core.constants import HEALTH_GREEN, HEALTH_RED, HEALTH_YELLOW

# Command modules print through this console; CliRunner captures it.
console = Console()


class StatusColors:
    """Color mappings for endpoint status values."""

    HEALTH: dict[str, str] = {
        HEALTH_GREEN: "green",
        HEALTH_YELLOW: "yellow",
        HEALTH_RED: "red",
    }

    @classmethod
    def get_health_color(cls, status: Any) -> str:
        """Color for a status; "yellow-N" shares the yellow color."""
        if not isinstance(status, str):
            return "white"
        key = status.strip().lower().split("-", 1)[0]
        return cls.HEALTH.get(key, "dim")


def create_stats_table(stats: Mapping[Any, Any], title: str = "Endpoint Status") -> Table:
    """Build a table of endpoint -> status."""
    table = Table(title=title)
    table.add_column("Endpoint", style="cyan", no_wrap=True)
    table.add_column("Status", style="bold")
    for endpoint, status in stats.items():
        color = StatusColors.get_health_color(status)
        table.add_row(escape(str(endpoint)), f"[{color}]{escape(str(status))}[/{color}]")
    return table


def create_config_table(config: ClientConfig) -> Table:
    """Build a key-value summary of a client profile."""
    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")
    table.add_row("Endpoints", "\n".join(config.endpoints))
    table.add_row("Timeout", f"{config.timeout_seconds:g}s")
    table.add_row(
        "Max attempts",
        str(config.max_attempts) if config.max_attempts else "one per endpoint",
    )
    table.add_row("Health path", config.health_path or "[dim]none[/dim]")
    table.add_row("Headers", ", ".join(sorted(config.headers)) or "[dim]none[/dim]")
    table.add_row("Follow redirects", "yes" if config.follow_redirects else "no")
    return table


def output_error(message: str, *, hints: list[str] | None = None) -> None:
    """Print a red error line followed by optional dim hints."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    if hints:
        console.print()
        console.print("[dim]Hints:[/dim]")
        for hint in hints:
            console.print(f"  - {escape(hint)}")
