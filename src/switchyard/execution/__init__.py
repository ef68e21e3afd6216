"""Request execution: the dispatcher and its per-request records."""

from switchyard.execution.dispatcher import Dispatcher
from switchyard.execution.health import HealthLevelTracker
from switchyard.execution.models import Attempt, AttemptOutcome, FailureRecord

__all__ = [
    "Attempt",
    "AttemptOutcome",
    "Dispatcher",
    "FailureRecord",
    "HealthLevelTracker",
]
