"""Transport adapters that turn protocol clients into dispatcher operations."""

from switchyard.transports.http import HttpFetcher, join_endpoint

__all__ = ["HttpFetcher", "join_endpoint"]
