"""Signature checks for user-supplied callbacks.

Callbacks are validated once, when a dispatcher is configured, so that a
wrong signature fails construction instead of the first request.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from switchyard.core.exceptions import ConfigurationError

_ARGUMENT_WORDS = {1: "one parameter", 2: "two parameters", 3: "three parameters"}


def accepts_positional(func: Callable[..., Any], count: int) -> bool:
    """Check whether ``func`` can be called with ``count`` positional arguments.

    Callables whose signature cannot be introspected (some builtins and C
    extensions) are accepted.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return True
    try:
        signature.bind(*([None] * count))
    except TypeError:
        return False
    return True


def require_callable(
    name: str,
    func: Any,
    count: int,
) -> Callable[..., Any]:
    """Validate a callback option and return it.

    Raises:
        ConfigurationError: If ``func`` is not callable or cannot take
            ``count`` positional arguments.
    """
    expected = _ARGUMENT_WORDS.get(count, f"{count} parameters")
    if not callable(func):
        raise ConfigurationError(f"{name} must be callable and accept {expected}")
    if not accepts_positional(func, count):
        raise ConfigurationError(f"{name} callback must accept {expected}")
    return func
