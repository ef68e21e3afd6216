"""Aggregate endpoint health tracking for change notifications.

Policies that keep health state report it through get_stats() as one status
per endpoint. The tracker reduces those statuses to the least healthy level
and calls a hook whenever that level differs from the previous reading.

Recognized statuses, from healthiest to least healthy:
- "green" (rank 0)
- "yellow-N" (rank N; a bare "yellow" is rank 1)
- "red" (worse than any yellow)
- plain integers rank as themselves (higher is worse)

Anything else ("n/a", None, custom objects) carries no health information
and is ignored. This is a diagnostic aid, never a correctness mechanism.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from threading import Lock
from typing import Any

from switchyard.core.constants import HEALTH_GREEN, HEALTH_RED, HEALTH_YELLOW
from switchyard.core.logging import DispatchLogger

_RED_RANK = sys.maxsize


def health_rank(status: Any) -> int | None:
    """Rank a status value; larger is less healthy, None means "not a health level"."""
    if isinstance(status, bool):
        return None
    if isinstance(status, int):
        return status
    if not isinstance(status, str):
        return None

    normalized = status.strip().lower()
    if normalized == HEALTH_GREEN:
        return 0
    if normalized == HEALTH_RED:
        return _RED_RANK
    if normalized == HEALTH_YELLOW:
        return 1
    prefix = f"{HEALTH_YELLOW}-"
    if normalized.startswith(prefix) and normalized[len(prefix):].isdigit():
        return int(normalized[len(prefix):])
    return None


def least_healthy_level(stats: Mapping[Any, Any]) -> Any | None:
    """Return the least healthy status in ``stats``, or None if none is ranked."""
    worst: Any | None = None
    worst_rank = -1
    for status in stats.values():
        rank = health_rank(status)
        if rank is not None and rank > worst_rank:
            worst, worst_rank = status, rank
    return worst


class HealthLevelTracker:
    """Remembers the least healthy level and reports changes.

    Thread-safe: concurrent requests may finish at the same time; the
    comparison and update of the last level happen under a lock, the hook is
    called outside it.
    """

    def __init__(
        self,
        on_change: Callable[[Any], Any],
        logger: DispatchLogger,
        initial_stats: Mapping[Any, Any] | None = None,
    ) -> None:
        self._on_change = on_change
        self._logger = logger
        self._level = least_healthy_level(initial_stats) if initial_stats else None
        self._lock = Lock()

    @property
    def level(self) -> Any | None:
        """The last observed least healthy level."""
        with self._lock:
            return self._level

    def observe(self, stats: Mapping[Any, Any]) -> bool:
        """Record a stats reading; call the hook if the level changed.

        Returns:
            True if the level changed and the hook was called.
        """
        level = least_healthy_level(stats)
        if level is None:
            return False

        with self._lock:
            previous = self._level
            if previous is not None and health_rank(previous) == health_rank(level):
                return False
            self._level = level

        self._logger.info(
            "dispatcher.health_level_changed",
            previous_level=previous,
            new_level=level,
        )
        try:
            self._on_change(level)
        except Exception as exc:
            # The request outcome has already been decided; a broken hook must not replace it
            self._logger.warning(
                "dispatcher.health_change_hook_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
        return True


__all__ = [
    "HealthLevelTracker",
    "health_rank",
    "least_healthy_level",
]
