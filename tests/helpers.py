"""Shared fakes for Switchyard tests."""

from __future__ import annotations

from typing import Any

from switchyard.balancing import EndpointPolicy


class RecordingPolicy(EndpointPolicy):
    """Deterministic policy that serves endpoints in order and records calls.

    Attributes:
        calls: Every policy call as (name, endpoint) tuples; next() records
            the endpoint it returned.
        unhealthy: Endpoints whose health check fails.
        needs_check: Value returned as the health-check flag from next().
        stats: Mapping returned by get_stats(), or None for the default.
    """

    def __init__(
        self,
        endpoints: list[Any],
        config: Any = None,
        *,
        needs_check: bool = False,
        unhealthy: set[Any] | None = None,
        exhausted_after: int | None = None,
    ) -> None:
        super().__init__(endpoints)
        self.calls: list[tuple[str, Any]] = []
        self.needs_check = needs_check
        self.unhealthy = unhealthy or set()
        self.exhausted_after = exhausted_after
        self.stats: dict[Any, Any] | None = None
        self._cursor = 0

    def next(self) -> tuple[Any, bool]:
        if self.exhausted_after is not None and self.count("next") >= self.exhausted_after:
            self.calls.append(("next", None))
            return None, False
        endpoint = self._endpoints[self._cursor % len(self._endpoints)]
        self._cursor += 1
        self.calls.append(("next", endpoint))
        return endpoint, self.needs_check

    def good(self, endpoint: Any, started_at: float, finished_at: float) -> None:
        assert finished_at >= started_at
        self.calls.append(("good", endpoint))

    def bad(self, endpoint: Any, started_at: float, finished_at: float) -> None:
        assert finished_at >= started_at
        self.calls.append(("bad", endpoint))

    def health_check(self, endpoint: Any) -> bool:
        self.calls.append(("health_check", endpoint))
        return endpoint not in self.unhealthy

    def get_stats(self) -> dict[Any, Any]:
        if self.stats is None:
            return super().get_stats()
        return dict(self.stats)

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def outcomes(self) -> list[tuple[str, Any]]:
        """good/bad calls only, in order."""
        return [(call, ep) for call, ep in self.calls if call in ("good", "bad")]


class StatusError(Exception):
    """Exception carrying an HTTP-like status code."""

    def __init__(self, http_code: int) -> None:
        super().__init__(f"HTTP {http_code}")
        self.http_code = http_code


class FlakyError(ConnectionError):
    """Retryable failure used throughout the tests."""


class RecordingLogger:
    """Logger double that keeps (level, event, fields) tuples."""

    def __init__(self) -> None:
        self.entries: list[tuple[str, str, dict[str, Any]]] = []

    def debug(self, event: str, **kw: Any) -> None:
        self.entries.append(("debug", event, kw))

    def info(self, event: str, **kw: Any) -> None:
        self.entries.append(("info", event, kw))

    def warning(self, event: str, **kw: Any) -> None:
        self.entries.append(("warning", event, kw))

    def error(self, event: str, **kw: Any) -> None:
        self.entries.append(("error", event, kw))

    def events(self, level: str | None = None) -> list[str]:
        return [event for lvl, event, _ in self.entries if level is None or lvl == level]
