from __future__ import annotations

import os
from datetime import timedelta
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .contracts import PolicyLimits
from .errors import ConfigurationError
from .utils.durations import parse_duration


class BrokerConfig(BaseModel):
    """Backend configuration for the GitLab token broker."""

    base_url: str
    token: str = Field(default="", repr=False)
    max_ttl: timedelta = timedelta(0)
    allow_owner_level: bool = False
    timeout: float = 10.0

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("base_url must be a non-empty string")
        return v

    @field_validator("max_ttl", mode="before")
    @classmethod
    def _parse_max_ttl(cls, v: Any) -> Any:
        return parse_duration(v)

    @field_validator("max_ttl")
    @classmethod
    def _non_negative_max_ttl(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("max_ttl must not be negative")
        return v

    def policy_limits(self) -> PolicyLimits:
        """Return the policy limits enforced on token requests."""
        return PolicyLimits(
            max_ttl=self.max_ttl, allow_owner_level=self.allow_owner_level
        )


def load_config(path: Optional[str] = None) -> Optional[BrokerConfig]:
    """Load configuration from a YAML file and environment overrides.

    Args:
        path: Optional path to config file. Falls back to PATBROKER_CONFIG env
            variable or 'config.yaml' in the current directory.

    Returns:
        The loaded configuration, or ``None`` when neither a config file nor
        ``PATBROKER_BASE_URL`` is available.

    Raises:
        ConfigurationError: the configuration exists but is invalid.
    """

    config_path = path or os.getenv("PATBROKER_CONFIG", "config.yaml")
    data: dict = {}
    found = False
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"invalid configuration: expected a mapping in {config_path}"
            )
        found = True

    overrides = {
        "base_url": os.getenv("PATBROKER_BASE_URL"),
        "token": os.getenv("PATBROKER_TOKEN"),
        "max_ttl": os.getenv("PATBROKER_MAX_TTL"),
        "allow_owner_level": os.getenv("PATBROKER_ALLOW_OWNER_LEVEL"),
    }
    for key, value in overrides.items():
        if value is not None:
            data[key] = value

    if not found and "base_url" not in data:
        return None

    try:
        return BrokerConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration: {e}") from e
