"""Fetch command for the Switchyard CLI.

Performs one HTTP request through a Dispatcher, failing over between the
configured endpoints, and prints the response body.

Exit codes:
  0: Success
  1: Request failed (every endpoint failed, or the status was fatal)
  2: Invalid configuration
"""

from __future__ import annotations

from pathlib import Path

import httpx
import typer

from switchyard.core.exceptions import ConfigurationError, NoResultError
from switchyard.execution import Dispatcher
from switchyard.transports import HttpFetcher

from ..helpers import ErrorMessages, configure_global_logging, load_client_config
from ..output import console, create_stats_table, output_error


def fetch(
    path: str = typer.Argument(
        "/",
        help="Request path, joined to each endpoint",
    ),
    endpoint: list[str] | None = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Endpoint base URL (repeatable)",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML client profile",
        exists=True,
        readable=True,
        dir_okay=False,
    ),
    method: str = typer.Option(
        "GET",
        "--method",
        "-X",
        help="HTTP method",
    ),
    max_attempts: int | None = typer.Option(
        None,
        "--max-attempts",
        help="Attempt limit (default: each endpoint once)",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds",
    ),
    health_path: str | None = typer.Option(
        None,
        "--health-path",
        help="Path probed before using an endpoint",
    ),
    stats: bool = typer.Option(
        False,
        "--stats",
        help="Show endpoint status after the request",
    ),
) -> None:
    """Fetch PATH from the first endpoint that answers."""
    configure_global_logging(console)

    try:
        client_config = load_client_config(
            config_file,
            endpoints=endpoint,
            timeout_seconds=timeout,
            max_attempts=max_attempts,
            health_path=health_path,
        )
    except ConfigurationError as e:
        output_error(str(e))
        raise typer.Exit(2) from None

    with HttpFetcher(
        timeout=client_config.timeout_seconds,
        headers=client_config.headers,
        follow_redirects=client_config.follow_redirects,
    ) as fetcher:
        health_check = (
            fetcher.probe(client_config.health_path) if client_config.health_path else None
        )
        dispatcher = Dispatcher(
            client_config.endpoints,
            name="cli",
            retry=client_config.max_attempts,
            health_check=health_check,
        )

        try:
            response = dispatcher.request(fetcher.operation(method, path))
        except NoResultError as e:
            output_error(
                f"{ErrorMessages.NO_RESULT}: {e}",
                hints=["Check that the endpoints are reachable", "Raise --max-attempts"],
            )
            raise typer.Exit(1) from None
        except httpx.HTTPStatusError as e:
            output_error(
                f"{ErrorMessages.FATAL_STATUS}: HTTP {e.response.status_code} "
                f"from {e.request.url}"
            )
            raise typer.Exit(1) from None
        finally:
            if stats:
                console.print(create_stats_table(dispatcher.get_stats()))

    console.print(response.text, markup=False, highlight=False, soft_wrap=True)
