"""Exception hierarchy for Switchyard.

All dispatcher-specific exceptions inherit from DispatchError, so callers can
catch broad (DispatchError) or narrow (e.g., NoEndpointAvailableError).
Failures raised by the caller's own operation are never wrapped: a fatal one
is re-raised unchanged and retryable ones only surface through NoResultError.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from switchyard.execution.models import Attempt


class DispatchError(Exception):
    """Base exception for all dispatcher errors."""


class ConfigurationError(DispatchError, ValueError):
    """Raised while constructing a dispatcher with invalid inputs.

    Examples: an empty endpoint list, a policy without next/good/bad, a
    callback that does not accept the expected number of arguments.
    Never raised once a dispatcher exists.
    """


class NoResultError(DispatchError):
    """Raised when every allowed attempt failed without a result.

    Attributes:
        endpoints: The dispatcher's configured endpoints.
        failure_types: Distinct type names of the retryable failures seen,
            in the order they were first observed.
        attempts: The attempts made during the request.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoints: Sequence[Any] = (),
        failure_types: Sequence[str] = (),
        attempts: Sequence[Attempt] = (),
    ) -> None:
        super().__init__(message)
        self.endpoints = tuple(endpoints)
        self.failure_types = tuple(failure_types)
        self.attempts = tuple(attempts)


class NoEndpointAvailableError(NoResultError):
    """Raised when the selection policy has no endpoint to offer.

    Typically every endpoint has been marked unhealthy by the policy. Raised
    immediately; no further attempts are made for the request.
    """


__all__ = [
    "ConfigurationError",
    "DispatchError",
    "NoEndpointAvailableError",
    "NoResultError",
]
