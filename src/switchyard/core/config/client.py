"""HTTP client profile loaded from YAML.

Describes the endpoints and transport settings the ``switchyard`` command uses.

Example:
    endpoints:
      - https://api-1.example.com
      - https://api-2.example.com
    timeout_seconds: 5
    max_attempts: 4
    health_path: /healthz
    headers:
      Accept: application/json
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from switchyard.core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS


class ClientConfig(BaseModel):
    """Endpoint list and transport settings for HTTP dispatching."""

    endpoints: list[str] = Field(
        min_length=1,
        description="Base URLs to balance across",
    )
    timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        gt=0,
        description="Per-request timeout",
    )
    max_attempts: int | None = Field(
        default=None,
        ge=1,
        description="Attempt limit per request (default: each endpoint once)",
    )
    health_path: str | None = Field(
        default=None,
        description="Path probed before using an endpoint; no probing when unset",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers sent with every request",
    )
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")

    @field_validator("endpoints")
    @classmethod
    def _validate_endpoints(cls, value: list[str]) -> list[str]:
        cleaned = [endpoint.strip() for endpoint in value]
        if any(not endpoint for endpoint in cleaned):
            raise ValueError("endpoints must not contain blank entries")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("endpoints must be unique")
        return cleaned

    @classmethod
    def from_yaml(cls, path: Path) -> ClientConfig:
        """Load a client profile from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> ClientConfig:
        """Load a client profile from a YAML string."""
        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data)


__all__ = ["ClientConfig"]
