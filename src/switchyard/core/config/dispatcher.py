"""Dispatcher configuration model.

Every option is resolved once, when the model is built: ``retry`` and
``fatal`` are normalized into canonical controller/classifier objects and
every callback is checked for the number of positional arguments it must
accept. A bad option is therefore a construction-time ConfigurationError,
never a surprise in the middle of a request.

Example:
    config = DispatcherConfig.from_options(
        retry=3,
        fatal=[PermissionError],
        on_exception=lambda fatal, error, endpoint: print(fatal, endpoint),
    )
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from switchyard.balancing.base import SelectionPolicy
from switchyard.core.callables import require_callable
from switchyard.core.classifier import (
    DefaultFatalClassifier,
    FatalClassifier,
    build_fatal_classifier,
)
from switchyard.core.exceptions import ConfigurationError
from switchyard.core.logging import DispatchLogger
from switchyard.core.retry import RetryController, build_retry_controller

_CALLBACK_ARITY: dict[str, int] = {
    "on_exception": 3,
    "health_check": 1,
    "on_health_change": 1,
}


class DispatcherConfig(BaseModel):
    """Immutable option bundle for a Dispatcher."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra="forbid",
    )

    policy: Any = Field(
        default=None,
        description=(
            "Selection policy instance, or a factory called as "
            "factory(endpoints, config). Defaults to RoundRobinPolicy."
        ),
    )
    retry: RetryController = Field(
        default_factory=RetryController.default,
        description="Attempt limit, (endpoints, attempts) predicate, or RetryController",
    )
    fatal: FatalClassifier = Field(
        default_factory=DefaultFatalClassifier,
        description="Exception class, list of classes, one-argument predicate, or FatalClassifier",
    )
    on_exception: Any = Field(
        default=None,
        description="Hook called as on_exception(is_fatal, error, endpoint)",
    )
    health_check: Any = Field(
        default=None,
        description="Probe called as health_check(endpoint); falsy or raising means unhealthy",
    )
    on_health_change: Any = Field(
        default=None,
        description="Hook called with the new least-healthy level when it changes",
    )
    logger: Any = Field(
        default=None,
        description="Logger with debug/info/warning/error(event, **kw); defaults to structlog",
    )

    @field_validator("policy", mode="before")
    @classmethod
    def _validate_policy(cls, value: Any) -> Any:
        if value is None:
            return None
        # A policy class itself has next, good and bad attributes
        if not isinstance(value, type) and isinstance(value, SelectionPolicy):
            return value
        if callable(value):
            # Classes and factories are called as policy(endpoints, config)
            return require_callable("policy", value, 2)
        raise ConfigurationError(
            "policy must be a class, factory or object that provides next, good and bad"
        )

    @field_validator("retry", mode="before")
    @classmethod
    def _normalize_retry(cls, value: Any) -> RetryController:
        return build_retry_controller(value)

    @field_validator("fatal", mode="before")
    @classmethod
    def _normalize_fatal(cls, value: Any) -> FatalClassifier:
        return build_fatal_classifier(value)

    @field_validator("on_exception", "health_check", "on_health_change", mode="before")
    @classmethod
    def _validate_callback(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return None
        return require_callable(info.field_name, value, _CALLBACK_ARITY[info.field_name])

    @field_validator("logger", mode="before")
    @classmethod
    def _validate_logger(cls, value: Any) -> Any:
        if value is None or isinstance(value, DispatchLogger):
            return value
        raise ConfigurationError("logger must provide debug, info, warning and error")

    @classmethod
    def from_options(cls, **options: Any) -> DispatcherConfig:
        """Build a config, reporting any problem as ConfigurationError."""
        try:
            return cls(**options)
        except ValidationError as exc:
            raise ConfigurationError(_describe_validation_error(exc)) from exc


def _describe_validation_error(exc: ValidationError) -> str:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        original = error.get("ctx", {}).get("error")
        if isinstance(original, ConfigurationError):
            messages.append(str(original))
        elif error["type"] == "extra_forbidden":
            messages.append(f"unknown option {location!r}")
        else:
            messages.append(f"{location}: {error['msg']}")
    return "; ".join(messages)


__all__ = ["DispatcherConfig"]
