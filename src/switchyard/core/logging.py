"""Structured logging infrastructure for Switchyard.

Provides structured logging using structlog with dispatcher-specific context
such as request_id and dispatcher name. Supports console and JSON output and
an optional size-rotated log file.

Example usage:
    from switchyard.core.logging import configure_logging, get_logger

    # Configure once at startup
    configure_logging(level="DEBUG", format="console")

    # Get a component-specific logger
    logger = get_logger("dispatcher")

    # Log with structured fields
    logger.info("dispatcher.health_check_succeeded", endpoint="http://a")

    # Correlate every entry of one request
    from switchyard.core.logging import DispatchContext, with_context

    with with_context(DispatchContext(dispatcher="billing")):
        logger.error("dispatcher.exception_rescued")  # includes request_id
"""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal, Protocol, runtime_checkable

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("json", "console", "both")

# Field name fragments whose values are never written to a log
SENSITIVE_PATTERNS = frozenset({
    "api_key",
    "apikey",
    "api-key",
    "token",
    "secret",
    "password",
    "credential",
    "auth",
    "bearer",
    "authorization",
})


@runtime_checkable
class DispatchLogger(Protocol):
    """Logging interface the dispatcher writes to.

    Any object with these methods can be injected through the ``logger``
    option; ``SwitchyardLogger`` is the default implementation.
    """

    def debug(self, event: str, **kw: Any) -> None: ...

    def info(self, event: str, **kw: Any) -> None: ...

    def warning(self, event: str, **kw: Any) -> None: ...

    def error(self, event: str, **kw: Any) -> None: ...


@dataclass(frozen=True)
class DispatchContext:
    """Immutable context for correlating log entries of one request.

    Attributes:
        dispatcher: Name of the dispatcher handling the request.
        request_id: Unique id of the request (generated when omitted).
        parent_request_id: Id of an enclosing request, for nested dispatches.
    """

    dispatcher: str = "default"
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    parent_request_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging (None values omitted)."""
        result: dict[str, Any] = {
            "dispatcher": self.dispatcher,
            "request_id": self.request_id,
        }
        if self.parent_request_id is not None:
            result["parent_request_id"] = self.parent_request_id
        return result


_current_context: ContextVar[DispatchContext | None] = ContextVar(
    "switchyard_context", default=None
)


def get_current_context() -> DispatchContext | None:
    """Get the current DispatchContext if one is active."""
    return _current_context.get()


@contextmanager
def with_context(ctx: DispatchContext) -> Iterator[DispatchContext]:
    """Context manager that sets a DispatchContext for the duration of a block.

    When a context is already active the new one becomes its child, so nested
    dispatches keep a pointer to the request that issued them.

    Args:
        ctx: The DispatchContext to use for the block.

    Yields:
        The DispatchContext that was set.
    """
    outer = _current_context.get()
    if outer is not None and ctx.parent_request_id is None:
        ctx = DispatchContext(
            dispatcher=ctx.dispatcher,
            request_id=ctx.request_id,
            parent_request_id=outer.request_id,
        )
    token = _current_context.set(ctx)
    try:
        yield ctx
    finally:
        _current_context.reset(token)


def _sanitize_value(key: str, value: Any) -> Any:
    """Return "[REDACTED]" for values whose key looks sensitive."""
    key_lower = key.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in key_lower:
            return "[REDACTED]"
    return value


def _sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that redacts sensitive fields, one level deep."""
    sanitized: EventDict = {}
    for key, value in event_dict.items():
        if isinstance(value, dict):
            sanitized[key] = {
                k: _sanitize_value(k, v) for k, v in value.items()
            }
        else:
            sanitized[key] = _sanitize_value(key, value)
    return sanitized


def _add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds an ISO8601 UTC timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def _add_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that merges the active DispatchContext.

    Explicitly logged fields take precedence over context fields.
    """
    ctx = get_current_context()
    if ctx is not None:
        for key, value in ctx.to_dict().items():
            if key not in event_dict:
                event_dict[key] = value
    return event_dict


class SwitchyardLogger:
    """Switchyard logger wrapper around structlog.

    Bound to a component name, with optional extra context. The underlying
    structlog logger is fetched on every call so loggers created at import
    time still honour a later configure_logging().
    """

    def __init__(
        self,
        component: str,
        **initial_context: Any,
    ) -> None:
        self._component = component
        self._context: dict[str, Any] = {"component": component, **initial_context}

    def _get_logger(self) -> structlog.stdlib.BoundLogger:
        logger: structlog.stdlib.BoundLogger = structlog.get_logger().bind(**self._context)
        return logger

    def debug(self, event: str, **kw: Any) -> None:
        self._get_logger().debug(event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._get_logger().info(event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._get_logger().warning(event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._get_logger().error(event, **kw)


def _get_processors(
    renderer: Processor,
    include_timestamps: bool,
    include_context: bool,
) -> list[Processor]:
    """Build the structlog processor chain ending in ``renderer``."""
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        _sanitize_event_dict,
    ]

    if include_context:
        processors.append(_add_context)

    if include_timestamps:
        processors.append(_add_timestamp)

    processors.extend([
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ])
    return processors


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    format: Literal["json", "console", "both"] = "console",  # noqa: A002
    file_path: Path | None = None,
    max_file_size_mb: int = 50,
    backup_count: int = 5,
    include_timestamps: bool = True,
    include_context: bool = True,
) -> None:
    """Configure Switchyard structured logging.

    Call once at application startup. Libraries embedding the dispatcher can
    skip this and configure structlog themselves.

    Args:
        level: Minimum log level to capture.
        format: "console" for human-readable stderr output, "json" for JSON
            lines (to file_path, or stdout without one), "both" for console
            output on stderr and the same lines appended to file_path.
        file_path: Optional log file. Required if format="both".
        max_file_size_mb: Size at which the log file is rotated.
        backup_count: Number of rotated files to keep.
        include_timestamps: Whether to add ISO8601 timestamps.
        include_context: Whether to merge DispatchContext fields.

    Raises:
        ValueError: If format="both" but file_path is not provided, or the
            level or format is unknown.
    """
    if format == "both" and file_path is None:
        raise ValueError("file_path is required when format='both'")
    if format not in _LOG_FORMATS:
        raise ValueError(f"Unknown log format {format!r}; expected one of {_LOG_FORMATS}")
    if level not in _LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {_LOG_LEVELS}")

    log_level = getattr(logging, level)
    handlers: list[logging.Handler] = []

    if format in ("console", "both"):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        handlers.append(console_handler)

    if format in ("json", "both"):
        if file_path:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            handlers.append(file_handler)
        else:
            json_handler = logging.StreamHandler(sys.stdout)
            json_handler.setLevel(log_level)
            handlers.append(json_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    renderer: Processor
    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    # cache_logger_on_first_use=False so module-level loggers pick up this config
    structlog.configure(
        processors=_get_processors(renderer, include_timestamps, include_context),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str, **initial_context: Any) -> SwitchyardLogger:
    """Get a Switchyard logger for a component.

    Args:
        component: The component name (e.g., "dispatcher", "round_robin").
        **initial_context: Additional context to bind.

    Returns:
        A SwitchyardLogger bound to the component.
    """
    return SwitchyardLogger(component, **initial_context)


__all__ = [
    "DispatchContext",
    "DispatchLogger",
    "SENSITIVE_PATTERNS",
    "SwitchyardLogger",
    "configure_logging",
    "get_current_context",
    "get_logger",
    "with_context",
]
