"""Shared utilities for Switchyard CLI commands.

- Logging configuration state set by the global options
- Client profile loading (YAML file plus command-line overrides)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console

from switchyard.core.config import ClientConfig
from switchyard.core.exceptions import ConfigurationError
from switchyard.core.logging import configure_logging, get_logger

_logger = get_logger("cli")


class ErrorMessages:
    """Constants for CLI error messages."""

    CONFIG_LOAD_ERROR = "Error loading config"
    NO_ENDPOINTS = "No endpoints given; use --endpoint or --config"
    NO_RESULT = "Request failed on every endpoint"
    FATAL_STATUS = "Request rejected"


# =============================================================================
# Logging configuration
# =============================================================================


@dataclass
class CliLoggingConfig:
    """CLI logging configuration collected from the global options."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: Path | None = None
    format: Literal["json", "console", "both"] = "console"
    configured: bool = False


_log_config = CliLoggingConfig()


def get_log_level() -> str:
    return _log_config.level


def set_log_level(level: str) -> None:
    _log_config.level = level.upper()  # type: ignore[assignment]


def get_log_file() -> Path | None:
    return _log_config.file


def set_log_file(path: Path | None) -> None:
    _log_config.file = path


def get_log_format() -> str:
    return _log_config.format


def set_log_format(fmt: str) -> None:
    _log_config.format = fmt  # type: ignore[assignment]


def configure_global_logging(console: Console) -> None:
    """Configure logging from the global CLI options, once per session.

    Raises:
        typer.Exit: If the logging options are inconsistent.
    """
    if _log_config.configured:
        return

    # A log file with the default console format means console plus file
    log_format = _log_config.format
    if _log_config.file is not None and log_format == "console":
        log_format = "both"

    try:
        configure_logging(
            level=_log_config.level,
            format=log_format,
            file_path=_log_config.file,
        )
        _log_config.configured = True
    except ValueError as e:
        # e.g. format="both" without a log file
        console.print(f"[red]Logging configuration error:[/red] {e}")
        raise typer.Exit(1) from None


def reset_logging_state() -> None:
    """Reset the CLI logging state (used by tests)."""
    _log_config.level = "WARNING"
    _log_config.file = None
    _log_config.format = "console"
    _log_config.configured = False


# =============================================================================
# Client profile loading
# =============================================================================


def load_client_config(
    config_file: Path | None = None,
    *,
    endpoints: list[str] | None = None,
    timeout_seconds: float | None = None,
    max_attempts: int | None = None,
    health_path: str | None = None,
) -> ClientConfig:
    """Build a ClientConfig from an optional YAML file and CLI overrides.

    Endpoints given on the command line are appended to those from the file
    (duplicates dropped). Other overrides replace the file's values.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or the
            merged profile is invalid.
    """
    data: dict[str, Any] = {}
    if config_file is not None:
        try:
            loaded = yaml.safe_load(config_file.read_text())
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"{ErrorMessages.CONFIG_LOAD_ERROR}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(
                f"{ErrorMessages.CONFIG_LOAD_ERROR}: top level must be a mapping"
            )
        data = dict(loaded or {})

    merged_endpoints = list(data.get("endpoints") or [])
    for endpoint in endpoints or []:
        if endpoint not in merged_endpoints:
            merged_endpoints.append(endpoint)
    if not merged_endpoints:
        raise ConfigurationError(ErrorMessages.NO_ENDPOINTS)
    data["endpoints"] = merged_endpoints

    if timeout_seconds is not None:
        data["timeout_seconds"] = timeout_seconds
    if max_attempts is not None:
        data["max_attempts"] = max_attempts
    if health_path is not None:
        data["health_path"] = health_path

    try:
        config = ClientConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e

    _logger.debug(
        "cli.client_config_loaded",
        source=str(config_file) if config_file else None,
        endpoint_count=len(config.endpoints),
    )
    return config


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
