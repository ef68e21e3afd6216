"""Configuration models for Switchyard.

Pydantic models for dispatcher options and for the HTTP client profile used
by the command-line interface.
"""

from switchyard.core.config.client import ClientConfig
from switchyard.core.config.dispatcher import DispatcherConfig

__all__ = [
    "ClientConfig",
    "DispatcherConfig",
]
