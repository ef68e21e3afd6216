"""HTTP operations for the dispatcher, using httpx.

The dispatcher core knows nothing about HTTP. This adapter builds the
callables it needs: an operation that performs a request against whichever
endpoint it is handed, and a probe usable as the ``health_check`` option.

Responses go through raise_for_status(), so an error status surfaces as
httpx.HTTPStatusError. Under the default classifier that makes 4xx (except
408) fatal, and 5xx, timeouts and connection failures retryable.

Example usage:
    with HttpFetcher(timeout=5.0) as fetcher:
        dispatcher = Dispatcher(
            ["https://api-1.example.com", "https://api-2.example.com"],
            health_check=fetcher.probe("/healthz"),
        )
        response = dispatcher.request(fetcher.operation("GET", "/v1/items"))
"""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType
from typing import Any

import httpx

from switchyard.core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS
from switchyard.core.logging import get_logger

_logger = get_logger("transports.http")


def join_endpoint(endpoint: str, path: str) -> str:
    """Join a base endpoint URL and a request path with exactly one slash."""
    if not path:
        return endpoint
    return f"{endpoint.rstrip('/')}/{path.lstrip('/')}"


class HttpFetcher:
    """Builds dispatcher operations on top of a synchronous httpx client.

    The fetcher closes its client on exit only when it created it; an
    injected client stays open for its owner.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
        follow_redirects: bool = True,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds.
            headers: Headers sent with every request.
            follow_redirects: Whether redirects are followed.
            client: Existing client to use instead of creating one.
            transport: Transport for a created client (e.g. httpx.MockTransport).
        """
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers=headers or {},
            follow_redirects=follow_redirects,
            transport=transport,
        )

    @property
    def client(self) -> httpx.Client:
        return self._client

    def operation(
        self,
        method: str,
        path: str = "",
        **request_kwargs: Any,
    ) -> Callable[[str], httpx.Response]:
        """Return an operation that performs ``method path`` against an endpoint.

        Extra keyword arguments (params, json, content, headers...) are
        passed through to httpx.Client.request().
        """
        method = method.upper()

        def _perform(endpoint: str) -> httpx.Response:
            url = join_endpoint(endpoint, path)
            _logger.debug("http.request", method=method, url=url)
            response = self._client.request(method, url, **request_kwargs)
            _logger.debug(
                "http.response",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            response.raise_for_status()
            return response

        return _perform

    def probe(self, path: str) -> Callable[[str], bool]:
        """Return a health check that GETs ``path`` and expects a 2xx status.

        Transport errors propagate; the dispatcher logs them and treats the
        endpoint as unhealthy.
        """

        def _check(endpoint: str) -> bool:
            response = self._client.get(join_endpoint(endpoint, path))
            return response.is_success

        return _check

    def close(self) -> None:
        if self._owns_client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> HttpFetcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["HttpFetcher", "join_endpoint"]
