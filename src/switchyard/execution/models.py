"""Per-request records kept by the dispatcher.

Attempt and FailureRecord only live for one call to Dispatcher.request(); they
are created when the request starts and dropped when it returns or raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AttemptOutcome(str, Enum):
    """How a single selection-invoke-observe cycle ended."""

    SUCCEEDED = "succeeded"
    """The operation returned a result."""

    RETRYABLE = "retryable"
    """The operation raised a failure that allows trying another endpoint."""

    FATAL = "fatal"
    """The operation raised a failure that aborts the request."""

    UNHEALTHY = "unhealthy"
    """The endpoint failed its health check; the operation was not invoked."""


@dataclass
class Attempt:
    """One selection-invoke-observe cycle.

    Timestamps come from time.monotonic(); only their difference is
    meaningful.
    """

    number: int
    endpoint: Any
    started_at: float
    finished_at: float | None = None
    outcome: AttemptOutcome | None = None
    error_type: str | None = None

    def finish(
        self,
        outcome: AttemptOutcome,
        finished_at: float,
        error: BaseException | None = None,
    ) -> None:
        self.outcome = outcome
        self.finished_at = finished_at
        if error is not None:
            self.error_type = failure_type_name(error)

    @property
    def duration_seconds(self) -> float | None:
        if self.finished_at is None:
            return None
        return self.finished_at - self.started_at


@dataclass
class FailureRecord:
    """Retryable failures observed during one request, in order."""

    failures: list[tuple[Any, BaseException]] = field(default_factory=list)

    def add(self, endpoint: Any, error: BaseException) -> None:
        self.failures.append((endpoint, error))

    def distinct_type_names(self) -> list[str]:
        """Type names of the recorded failures, de-duplicated, first-seen order."""
        names: list[str] = []
        for _endpoint, error in self.failures:
            name = failure_type_name(error)
            if name not in names:
                names.append(name)
        return names

    def __len__(self) -> int:
        return len(self.failures)


def failure_type_name(error: BaseException) -> str:
    """Qualified type name of an exception; builtins keep their bare name."""
    cls = type(error)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


__all__ = [
    "Attempt",
    "AttemptOutcome",
    "FailureRecord",
    "failure_type_name",
]
