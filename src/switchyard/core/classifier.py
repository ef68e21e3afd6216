"""Fatal-versus-retryable classification of operation failures.

The dispatcher asks a FatalClassifier exactly once per failure. A fatal
failure aborts the request and is re-raised unchanged; anything else lets the
dispatcher move on to another endpoint.

PLEASE NOTE that getting this wrong is expensive in both directions: a
retryable error classified as fatal gives up on healthy endpoints, a fatal
one classified as retryable hammers every endpoint with a request that can
never succeed. Read DEFAULT_FATAL_EXCEPTIONS before supplying your own list.

Example:
    classifier = build_fatal_classifier([PermissionError, LookupError])
    classifier.is_fatal(KeyError("x"))  # True
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from switchyard.core.callables import require_callable
from switchyard.core.constants import (
    HTTP_CLIENT_ERROR_MAX,
    HTTP_CLIENT_ERROR_MIN,
    HTTP_REQUEST_TIMEOUT,
    STATUS_CODE_ATTRIBUTES,
)
from switchyard.core.exceptions import ConfigurationError

# Built-in exceptions that indicate a program error rather than a bad
# endpoint. Broad bases (Exception, RuntimeError, ValueError, OSError) are
# left out on purpose: HTTP client libraries routinely derive their
# retryable exceptions from them.
DEFAULT_FATAL_EXCEPTIONS: tuple[type[BaseException], ...] = (
    MemoryError,
    RecursionError,
    KeyboardInterrupt,
    SystemExit,
    GeneratorExit,
    SyntaxError,
    ImportError,
    NotImplementedError,
    TypeError,
    IndexError,
    KeyError,
    NameError,
    AttributeError,
    OverflowError,
    re.error,
    ZeroDivisionError,
)


def _as_status_code(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def extract_status_code(error: BaseException) -> int | None:
    """Extract an HTTP-like status code from an exception, if it carries one.

    Looks at ``http_code``, ``status_code`` and ``status`` on the exception,
    then at ``response.status_code`` (httpx.HTTPStatusError,
    requests.HTTPError). Only integer values count.
    """
    for attr_name in STATUS_CODE_ATTRIBUTES:
        code = _as_status_code(getattr(error, attr_name, None))
        if code is not None:
            return code

    response = getattr(error, "response", None)
    if response is not None:
        return _as_status_code(getattr(response, "status_code", None))
    return None


def is_fatal_by_default(error: BaseException) -> bool:
    """Default fatal predicate.

    1. Program-error types in DEFAULT_FATAL_EXCEPTIONS are fatal.
    2. An HTTP-like status code is fatal when it is a 4xx other than 408.
    3. Everything else is retryable.
    """
    if isinstance(error, DEFAULT_FATAL_EXCEPTIONS):
        return True

    code = extract_status_code(error)
    if code is not None:
        return (
            HTTP_CLIENT_ERROR_MIN <= code < HTTP_CLIENT_ERROR_MAX
            and code != HTTP_REQUEST_TIMEOUT
        )

    return False


class FatalClassifier(ABC):
    """Decides whether a failure must abort the whole request."""

    @abstractmethod
    def is_fatal(self, error: BaseException) -> bool:
        ...

    def __call__(self, error: BaseException) -> bool:
        return self.is_fatal(error)


class DefaultFatalClassifier(FatalClassifier):
    """Program errors and 4xx statuses (except 408) are fatal."""

    def is_fatal(self, error: BaseException) -> bool:
        return is_fatal_by_default(error)

    def __repr__(self) -> str:
        return "DefaultFatalClassifier()"


class ExceptionTypeClassifier(FatalClassifier):
    """Fatal when the failure is an instance of one of the given types."""

    def __init__(self, types: tuple[type[BaseException], ...]) -> None:
        self._types = types

    @property
    def types(self) -> tuple[type[BaseException], ...]:
        return self._types

    def is_fatal(self, error: BaseException) -> bool:
        return isinstance(error, self._types)

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self._types)
        return f"ExceptionTypeClassifier({names})"


class PredicateClassifier(FatalClassifier):
    """Delegates to a caller-supplied one-argument predicate."""

    def __init__(self, predicate: Callable[[BaseException], Any]) -> None:
        self._predicate = predicate

    def is_fatal(self, error: BaseException) -> bool:
        return bool(self._predicate(error))

    def __repr__(self) -> str:
        return f"PredicateClassifier({self._predicate!r})"


def _is_exception_type(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, BaseException)


def build_fatal_classifier(value: Any) -> FatalClassifier:
    """Normalize the ``fatal`` option into a FatalClassifier.

    Accepts None (default rules), a FatalClassifier, an exception class, a
    list/tuple/set of exception classes, or a one-argument predicate.

    Raises:
        ConfigurationError: For any other value.
    """
    if value is None:
        return DefaultFatalClassifier()
    if isinstance(value, FatalClassifier):
        return value
    if _is_exception_type(value):
        return ExceptionTypeClassifier((value,))
    if isinstance(value, type):
        raise ConfigurationError(
            f"fatal must be an exception class, got class {value.__name__}"
        )
    if isinstance(value, (list, tuple, set, frozenset)):
        types = tuple(value)
        if not all(_is_exception_type(t) for t in types):
            raise ConfigurationError("fatal list may only contain exception classes")
        return ExceptionTypeClassifier(types)
    return PredicateClassifier(require_callable("fatal", value, 1))


__all__ = [
    "DEFAULT_FATAL_EXCEPTIONS",
    "DefaultFatalClassifier",
    "ExceptionTypeClassifier",
    "FatalClassifier",
    "PredicateClassifier",
    "build_fatal_classifier",
    "extract_status_code",
    "is_fatal_by_default",
]
