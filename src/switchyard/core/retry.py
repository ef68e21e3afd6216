"""Retry-continuation decisions.

A RetryController answers one question before every attempt: given the
dispatcher's fixed endpoints and the attempts made so far, may another one
start? The ``retry`` option is normalized into a controller once, when the
dispatcher is configured.

Example:
    RetryController.default().should_continue(("a", "b"), 1)  # True
    RetryController.fixed(1).should_continue(("a", "b"), 1)   # False
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from switchyard.core.callables import require_callable
from switchyard.core.exceptions import ConfigurationError

RetryDecision = bool | int | None
"""A predicate may answer yes/no, an attempt bound, or None for stop."""


def try_each_endpoint_once(endpoints: Sequence[Any], attempts: int) -> bool:
    """Default rule: at most one attempt per configured endpoint."""
    return attempts < len(endpoints)


class RetryController:
    """Wraps a retry predicate and interprets its verdicts.

    Attributes:
        description: Short human-readable form, used in logs and repr.
    """

    def __init__(
        self,
        decide: Callable[[Sequence[Any], int], RetryDecision],
        description: str,
    ) -> None:
        self._decide = decide
        self.description = description

    @classmethod
    def default(cls) -> RetryController:
        """Try every endpoint once."""
        return cls(try_each_endpoint_once, "each-endpoint-once")

    @classmethod
    def fixed(cls, max_attempts: int) -> RetryController:
        """Allow at most ``max_attempts`` attempts regardless of endpoint count."""
        if max_attempts < 0:
            raise ConfigurationError("retry limit must not be negative")
        return cls(lambda _endpoints, _attempts: max_attempts, f"max-{max_attempts}")

    @classmethod
    def from_predicate(
        cls,
        predicate: Callable[[Sequence[Any], int], RetryDecision],
    ) -> RetryController:
        """Use a two-argument predicate ``(endpoints, attempts)``."""
        require_callable("retry", predicate, 2)
        return cls(predicate, f"predicate:{getattr(predicate, '__name__', 'callable')}")

    def should_continue(self, endpoints: Sequence[Any], attempts: int) -> bool:
        """Decide whether another attempt may start.

        Args:
            endpoints: The dispatcher's original endpoints.
            attempts: Attempts made so far in this request.

        Returns:
            False for a None/False verdict or when an integer verdict is
            already reached, True otherwise.
        """
        verdict = self._decide(endpoints, attempts)
        if verdict is None or verdict is False:
            return False
        if verdict is True:
            return True
        if isinstance(verdict, int):
            return attempts < verdict
        return bool(verdict)

    def __repr__(self) -> str:
        return f"RetryController({self.description})"


def build_retry_controller(value: Any) -> RetryController:
    """Normalize the ``retry`` option into a RetryController.

    Accepts None (try each endpoint once), a RetryController, an integer
    attempt limit, or a two-argument predicate.

    Raises:
        ConfigurationError: For any other value.
    """
    if value is None:
        return RetryController.default()
    if isinstance(value, RetryController):
        return value
    if isinstance(value, bool):
        raise ConfigurationError("retry must be an integer limit or a predicate, not a bool")
    if isinstance(value, int):
        return RetryController.fixed(value)
    return RetryController.from_predicate(value)


__all__ = [
    "RetryController",
    "RetryDecision",
    "build_retry_controller",
    "try_each_endpoint_once",
]
