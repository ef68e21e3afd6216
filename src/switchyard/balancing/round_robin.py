"""Round-robin endpoint selection.

The endpoints are shuffled once, when the policy is created, so that many
processes configured with the same list do not all start on the same
endpoint. After that the order is fixed and every call to next() returns the
following endpoint, wrapping from the last back to the first.

Example usage:
    from switchyard.balancing import RoundRobinPolicy

    policy = RoundRobinPolicy(["http://a", "http://b", "http://c"])
    endpoint, needs_check = policy.next()
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from threading import Lock
from typing import TYPE_CHECKING, Any

from switchyard.balancing.base import EndpointPolicy, Selection
from switchyard.core.exceptions import ConfigurationError
from switchyard.core.logging import get_logger

if TYPE_CHECKING:
    from switchyard.core.config import DispatcherConfig

_logger = get_logger("round_robin")


class RoundRobinPolicy(EndpointPolicy):
    """Cycle through a once-shuffled endpoint order.

    Thread-safe: the cursor is the only mutable state and is advanced under a
    lock. good() and bad() are no-ops.

    When the dispatcher configuration carries a ``health_check`` callable,
    every selection asks for a health check and that callable decides;
    otherwise no health checks are requested.
    """

    def __init__(
        self,
        endpoints: Sequence[Any],
        config: DispatcherConfig | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the policy.

        Args:
            endpoints: Endpoints to balance across. Must not be empty.
            config: Dispatcher configuration; only ``health_check`` is used.
            rng: Random source for the initial shuffle (inject for tests).
        """
        if not endpoints:
            raise ConfigurationError("Must specify at least one endpoint")

        order = list(endpoints)
        (rng or random.Random()).shuffle(order)
        super().__init__(order)

        self._probe: Callable[[Any], Any] | None = config.health_check if config else None
        self._cursor = 0
        self._lock = Lock()

        _logger.debug(
            "round_robin.initialized",
            endpoint_count=len(order),
            health_checked=self._probe is not None,
        )

    def next(self) -> Selection:
        with self._lock:
            endpoint = self._endpoints[self._cursor]
            self._cursor = (self._cursor + 1) % len(self._endpoints)
        return endpoint, self._probe is not None

    def good(self, endpoint: Any, started_at: float, finished_at: float) -> None:
        pass

    def bad(self, endpoint: Any, started_at: float, finished_at: float) -> None:
        pass

    def health_check(self, endpoint: Any) -> bool:
        if self._probe is None:
            return True
        return bool(self._probe(endpoint))

    def __repr__(self) -> str:
        return f"RoundRobinPolicy(endpoints={len(self._endpoints)}, cursor={self._cursor})"


__all__ = ["RoundRobinPolicy"]
