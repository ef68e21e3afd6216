"""Endpoint selection policy contract.

A policy chooses the next endpoint for the dispatcher and is told how each
attempt went. Three operations are required (``SelectionPolicy``); two are
optional capabilities, each described by its own protocol so the dispatcher
can query for them once at construction time:

- ``HealthCheckingPolicy.health_check(endpoint) -> bool``
- ``StatsReportingPolicy.get_stats() -> Mapping[endpoint, status]``

``EndpointPolicy`` is a convenience base class that implements both optional
capabilities with neutral defaults.

Policies are shared by every request of a dispatcher, and a dispatcher may be
used from several threads at once, so implementations must be thread-safe.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from switchyard.core.constants import NOT_APPLICABLE

Selection = tuple[Any, bool]
"""(endpoint or None, whether a health check is required before use)."""


@runtime_checkable
class SelectionPolicy(Protocol):
    """Required policy operations."""

    def next(self) -> Selection:
        """Return the next endpoint to try, or (None, False) when none is available.

        Must not raise for the "nothing available" case.
        """
        ...

    def good(self, endpoint: Any, started_at: float, finished_at: float) -> None:
        """Record a successful attempt (monotonic timestamps)."""
        ...

    def bad(self, endpoint: Any, started_at: float, finished_at: float) -> None:
        """Record a retryable failed attempt (monotonic timestamps)."""
        ...


@runtime_checkable
class HealthCheckingPolicy(Protocol):
    """Optional capability: probe an endpoint before use."""

    def health_check(self, endpoint: Any) -> bool:
        ...


@runtime_checkable
class StatsReportingPolicy(Protocol):
    """Optional capability: report a status per endpoint."""

    def get_stats(self) -> Mapping[Any, Any]:
        ...


class EndpointPolicy(ABC):
    """Base class for selection policies.

    Subclasses implement next/good/bad. The defaults below report every
    endpoint healthy and without statistics.
    """

    def __init__(self, endpoints: Sequence[Any]) -> None:
        self._endpoints: tuple[Any, ...] = tuple(endpoints)

    @property
    def endpoints(self) -> tuple[Any, ...]:
        """Endpoints in the order this policy serves them."""
        return self._endpoints

    @abstractmethod
    def next(self) -> Selection:
        ...

    @abstractmethod
    def good(self, endpoint: Any, started_at: float, finished_at: float) -> None:
        ...

    @abstractmethod
    def bad(self, endpoint: Any, started_at: float, finished_at: float) -> None:
        ...

    def health_check(self, endpoint: Any) -> bool:
        return True

    def get_stats(self) -> dict[Any, Any]:
        return {endpoint: NOT_APPLICABLE for endpoint in self._endpoints}


__all__ = [
    "EndpointPolicy",
    "HealthCheckingPolicy",
    "Selection",
    "SelectionPolicy",
    "StatsReportingPolicy",
]
