# switchyard/cli/commands: Command modules for the Switchyard CLI.
#
# Each module in this package provides one CLI command.

from .fetch import fetch
from .validate import validate

__all__ = [
    "fetch",
    "validate",
]
