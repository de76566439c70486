"""
Pydantic configuration model for the console.

Validates the emulation endpoint and credentials once at start-up instead
of silently passing bad values to the SDK clients.
"""

from __future__ import annotations

import os
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_ENDPOINT = "http://localhost:4566"
DEFAULT_REGION = "ap-south-1"


class ConsoleConfig(BaseModel):
    """Configuration for the console and its SDK clients.

    Values are resolved in order:
    1. Explicit values passed to the model.
    2. Environment variables (LOCALSTACK_ENDPOINT, AWS_REGION,
       AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, REFRESH_INTERVAL, ...).
    3. Defaults suitable for a stock LocalStack container.
    """

    model_config = ConfigDict(extra="forbid")

    endpoint_url: str = Field(default=DEFAULT_ENDPOINT, description="Emulation endpoint URL")
    region_name: str = Field(default=DEFAULT_REGION, description="AWS region (e.g. 'us-east-1')")
    aws_access_key_id: str = Field(default="test", description="Static access key ID")
    aws_secret_access_key: str = Field(default="test", description="Static secret access key")
    refresh_interval_ms: int = Field(
        default=5000, gt=0, description="UI polling interval in milliseconds"
    )
    disabled_services: list[str] = Field(
        default_factory=list, description="Registry ids reported as stopped"
    )
    log_level: str = Field(default="INFO", description="Logging level name")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for anything not set explicitly."""
        env_map = {
            "endpoint_url": ("LOCALSTACK_ENDPOINT",),
            "region_name": ("AWS_REGION", "AWS_DEFAULT_REGION"),
            "aws_access_key_id": ("AWS_ACCESS_KEY_ID",),
            "aws_secret_access_key": ("AWS_SECRET_ACCESS_KEY",),
            "refresh_interval_ms": ("REFRESH_INTERVAL",),
            "disabled_services": ("DISABLED_SERVICES",),
            "log_level": ("LOG_LEVEL",),
        }
        values = dict(values)
        for field, env_vars in env_map.items():
            if values.get(field):
                continue
            for env_var in env_vars:
                env_value = os.environ.get(env_var)
                if env_value:
                    values[field] = env_value
                    break
        return values

    @field_validator("disabled_services", mode="before")
    @classmethod
    def split_service_list(cls, value: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("endpoint_url")
    @classmethod
    def check_endpoint(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("endpoint_url must be an http:// or https:// URL")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalise_level(cls, value: str) -> str:
        return value.upper()


def load_config(**overrides: Any) -> ConsoleConfig:
    """Build a validated :class:`ConsoleConfig` from overrides plus the environment.

    Args:
        **overrides: Explicit field values; these win over environment variables.

    Returns:
        A validated config model.

    Raises:
        pydantic.ValidationError: If a value is invalid.
    """
    return ConsoleConfig(**overrides)


__all__ = [
    "ConsoleConfig",
    "DEFAULT_ENDPOINT",
    "DEFAULT_REGION",
    "load_config",
]
