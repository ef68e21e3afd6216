"""Endpoint selection policies.

Re-exports the policy contract and the default round-robin policy.
"""

from switchyard.balancing.base import (
    EndpointPolicy,
    HealthCheckingPolicy,
    Selection,
    SelectionPolicy,
    StatsReportingPolicy,
)
from switchyard.balancing.round_robin import RoundRobinPolicy

__all__ = [
    "EndpointPolicy",
    "HealthCheckingPolicy",
    "RoundRobinPolicy",
    "Selection",
    "SelectionPolicy",
    "StatsReportingPolicy",
]
