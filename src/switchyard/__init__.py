"""Switchyard - protocol-agnostic request dispatching with endpoint failover.

The dispatcher picks an endpoint through a pluggable selection policy, hands it
to a caller-supplied operation and fails over to other endpoints when the
operation raises a retryable error.

Example:
    from switchyard import Dispatcher

    dispatcher = Dispatcher(["http://a:8080", "http://b:8080"])
    body = dispatcher.request(lambda endpoint: fetch(endpoint))
"""

__version__ = "0.1.0"

from switchyard.balancing import (
    EndpointPolicy,
    HealthCheckingPolicy,
    RoundRobinPolicy,
    SelectionPolicy,
    StatsReportingPolicy,
)
from switchyard.core.config import DispatcherConfig
from switchyard.core.exceptions import (
    ConfigurationError,
    DispatchError,
    NoEndpointAvailableError,
    NoResultError,
)
from switchyard.execution import Dispatcher

__all__ = [
    "__version__",
    "ConfigurationError",
    "DispatchError",
    "Dispatcher",
    "DispatcherConfig",
    "EndpointPolicy",
    "HealthCheckingPolicy",
    "NoEndpointAvailableError",
    "NoResultError",
    "RoundRobinPolicy",
    "SelectionPolicy",
    "StatsReportingPolicy",
]
