"""Request dispatcher with endpoint failover.

The dispatcher does not perform requests itself, which keeps it usable for any
protocol (and for things that are not network requests at all). The
operation passed to request() does the work; the dispatcher only decides
which endpoint to hand it next and what to do when it fails.

State machine of one request:

    SELECTING -> HEALTH-CHECKING (optional) -> EXECUTING
        -> SUCCEEDED          return the result
        -> FAILED-FATAL       re-raise the original exception
        -> FAILED-RETRYABLE   back to SELECTING while the retry controller allows

Example usage:
    from switchyard import Dispatcher

    dispatcher = Dispatcher(
        ["http://a:8080", "http://b:8080"],
        retry=4,
        on_exception=lambda fatal, error, endpoint: metrics.count(endpoint),
    )
    response = dispatcher.request(lambda endpoint: session.get(endpoint + "/v1/items"))

PLEASE NOTE that the dispatcher is only as good as its fatal classifier.
See switchyard.core.classifier before overriding ``fatal``.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from switchyard.balancing.base import (
    HealthCheckingPolicy,
    SelectionPolicy,
    StatsReportingPolicy,
)
from switchyard.balancing.round_robin import RoundRobinPolicy
from switchyard.core.config import DispatcherConfig
from switchyard.core.constants import NOT_APPLICABLE
from switchyard.core.exceptions import (
    ConfigurationError,
    NoEndpointAvailableError,
    NoResultError,
)
from switchyard.core.logging import DispatchContext, DispatchLogger, get_logger, with_context
from switchyard.execution.health import HealthLevelTracker
from switchyard.execution.models import (
    Attempt,
    AttemptOutcome,
    FailureRecord,
    failure_type_name,
)

T = TypeVar("T")

_logger = get_logger("dispatcher")


def _always_healthy(endpoint: Any) -> bool:
    return True


class Dispatcher:
    """Selects endpoints through a policy and fails over on retryable errors.

    A dispatcher is configured once and may then be shared by any number of
    threads; every call to request() keeps its own attempt counter and
    failure record. Reconfiguring means building a new dispatcher.

    Attributes:
        endpoints: The configured endpoints, in the order given.
        config: The resolved DispatcherConfig.
        policy: The selection policy instance in use.
    """

    def __init__(
        self,
        endpoints: Sequence[Any],
        config: DispatcherConfig | None = None,
        *,
        name: str = "default",
        **options: Any,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            endpoints: Non-empty sequence of endpoints (URLs, addresses...).
                They are treated as opaque values.
            config: A ready DispatcherConfig. Mutually exclusive with options.
            name: Dispatcher name, included in every log entry.
            **options: DispatcherConfig fields (policy, retry, fatal,
                on_exception, health_check, on_health_change, logger).

        Raises:
            ConfigurationError: For empty endpoints, an invalid option, or a
                policy that does not provide next, good and bad.
        """
        if endpoints is None or len(endpoints) == 0:
            raise ConfigurationError("Must specify at least one endpoint")
        if config is not None and options:
            raise ConfigurationError("Pass either a DispatcherConfig or options, not both")

        self._endpoints: tuple[Any, ...] = tuple(endpoints)
        self._config = config if config is not None else DispatcherConfig.from_options(**options)
        self._name = name
        self._logger: DispatchLogger = self._config.logger or _logger
        self._policy = self._resolve_policy()

        # Optional policy capabilities are looked up once, here
        if isinstance(self._policy, HealthCheckingPolicy):
            self._health_probe: Callable[[Any], Any] = self._policy.health_check
        else:
            self._health_probe = self._config.health_check or _always_healthy
        self._stats_source: StatsReportingPolicy | None = (
            self._policy if isinstance(self._policy, StatsReportingPolicy) else None
        )

        self._health_tracker: HealthLevelTracker | None = None
        if self._config.on_health_change is not None and self._stats_source is not None:
            self._health_tracker = HealthLevelTracker(
                self._config.on_health_change,
                self._logger,
                initial_stats=self._stats_source.get_stats(),
            )

    @classmethod
    def dispatch(
        cls,
        endpoints: Sequence[Any],
        operation: Callable[[Any], T],
        **options: Any,
    ) -> T:
        """Build a one-off dispatcher and perform a single request."""
        return cls(endpoints, **options).request(operation)

    @property
    def endpoints(self) -> tuple[Any, ...]:
        return self._endpoints

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    @property
    def policy(self) -> SelectionPolicy:
        return self._policy

    @property
    def name(self) -> str:
        return self._name

    def _resolve_policy(self) -> SelectionPolicy:
        policy = self._config.policy
        if policy is None:
            policy = RoundRobinPolicy
        if isinstance(policy, type) or not isinstance(policy, SelectionPolicy):
            policy = policy(list(self._endpoints), self._config)
        if not isinstance(policy, SelectionPolicy):
            raise ConfigurationError(
                "policy must be a class, factory or object that provides next, good and bad"
            )
        return policy

    def request(self, operation: Callable[[Any], T]) -> T:
        """Perform a request, failing over between endpoints.

        Args:
            operation: Called with the selected endpoint. Its return value is
                the result of the request; raising reports a failure.

        Returns:
            The first successful result.

        Raises:
            TypeError: If no callable operation is supplied.
            NoEndpointAvailableError: If the policy has no endpoint to offer.
            NoResultError: If every allowed attempt failed retryably.
            Exception: The operation's own exception, unchanged, when it is
                classified fatal.
        """
        if operation is None or not callable(operation):
            raise TypeError("request() must be called with an operation callable")

        with with_context(DispatchContext(dispatcher=self._name)):
            try:
                return self._run(operation)
            finally:
                self._observe_health()

    def _run(self, operation: Callable[[Any], T]) -> T:
        failures = FailureRecord()
        attempts: list[Attempt] = []
        count = 0

        while self._config.retry.should_continue(self._endpoints, count):
            # A bare None from next() means the same as (None, False)
            endpoint, needs_health_check = self._policy.next() or (None, False)
            if endpoint is None:
                self._logger.error(
                    "dispatcher.no_endpoints_available",
                    endpoints=list(self._endpoints),
                    attempts=count,
                )
                raise NoEndpointAvailableError(
                    "No endpoints are available",
                    endpoints=self._endpoints,
                    failure_types=failures.distinct_type_names(),
                    attempts=attempts,
                )
            count += 1

            if needs_health_check and not self._passes_health_check(endpoint):
                skipped = Attempt(number=count, endpoint=endpoint, started_at=time.monotonic())
                skipped.finish(AttemptOutcome.UNHEALTHY, skipped.started_at)
                attempts.append(skipped)
                continue

            attempt = Attempt(number=count, endpoint=endpoint, started_at=time.monotonic())
            attempts.append(attempt)
            try:
                result = operation(endpoint)
            except Exception as exc:
                finished_at = time.monotonic()
                if self._classify_failure(attempt, exc, finished_at):
                    attempt.finish(AttemptOutcome.FATAL, finished_at, exc)
                    raise
                attempt.finish(AttemptOutcome.RETRYABLE, finished_at, exc)
                self._policy.bad(endpoint, attempt.started_at, finished_at)
                failures.add(endpoint, exc)
                continue

            finished_at = time.monotonic()
            attempt.finish(AttemptOutcome.SUCCEEDED, finished_at)
            self._policy.good(endpoint, attempt.started_at, finished_at)
            return result

        failure_types = failures.distinct_type_names()
        message = (
            f"No available endpoints from {list(self._endpoints)!r}! "
            f"Exceptions: {', '.join(failure_types)}"
        )
        self._logger.error(
            "dispatcher.endpoints_exhausted",
            endpoints=list(self._endpoints),
            attempts=count,
            failure_types=failure_types,
        )
        raise NoResultError(
            message,
            endpoints=self._endpoints,
            failure_types=failure_types,
            attempts=attempts,
        )

    def _observe_health(self) -> None:
        """Re-read the policy stats after a request; never raises."""
        if self._health_tracker is None or self._stats_source is None:
            return
        try:
            self._health_tracker.observe(self._stats_source.get_stats())
        except Exception as exc:
            self._logger.warning(
                "dispatcher.health_stats_failed",
                error_type=failure_type_name(exc),
                error=str(exc),
            )

    def _passes_health_check(self, endpoint: Any) -> bool:
        """Probe an endpoint; any exception or falsy result means unhealthy."""
        try:
            healthy = self._health_probe(endpoint)
        except Exception as exc:
            self._logger.error(
                "dispatcher.health_check_failed",
                endpoint=endpoint,
                reason="exception",
                error_type=failure_type_name(exc),
                error=str(exc),
            )
            return False

        if not healthy:
            self._logger.error(
                "dispatcher.health_check_failed",
                endpoint=endpoint,
                reason="non_true_return",
            )
            return False

        self._logger.info("dispatcher.health_check_succeeded", endpoint=endpoint)
        return True

    def _classify_failure(self, attempt: Attempt, error: Exception, finished_at: float) -> bool:
        """Classify a failure once, log it and notify the exception hook."""
        fatal = self._config.fatal.is_fatal(error)
        self._logger.error(
            "dispatcher.exception_rescued",
            fatal=fatal,
            endpoint=attempt.endpoint,
            attempt=attempt.number,
            error_type=failure_type_name(error),
            error=str(error),
            duration_seconds=round(finished_at - attempt.started_at, 4),
        )
        if self._config.on_exception is not None:
            self._config.on_exception(fatal, error, attempt.endpoint)
        return fatal

    def get_stats(self) -> dict[Any, Any]:
        """Return a status per endpoint.

        Delegates to the policy when it reports statistics; otherwise every
        endpoint maps to "n/a".
        """
        if self._stats_source is not None:
            stats: Mapping[Any, Any] = self._stats_source.get_stats()
            return dict(stats)
        return {endpoint: NOT_APPLICABLE for endpoint in self._endpoints}

    def __repr__(self) -> str:
        return (
            f"Dispatcher(name={self._name!r}, endpoints={len(self._endpoints)}, "
            f"policy={type(self._policy).__name__}, retry={self._config.retry!r})"
        )


__all__ = ["Dispatcher"]
