"""Token request and issued token contracts."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import IntEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils.durations import parse_duration
from .utils.timestamps import parse_timestamp

VALID_SCOPES = (
    "api",
    "read_api",
    "read_registry",
    "write_registry",
    "read_repository",
    "write_repository",
)


class AccessLevel(IntEnum):
    """Named project access tiers.

    Only multiples of ten are grantable; ``OWNER`` additionally requires
    ``allow_owner_level`` in the policy limits.
    """

    NO_ACCESS = 0
    MINIMAL_ACCESS = 5
    GUEST = 10
    REPORTER = 20
    DEVELOPER = 30
    MAINTAINER = 40
    OWNER = 50


class TokenRequest(BaseModel):
    """A request to mint one project access token.

    Every field defaults to its zero value. ``model_fields_set`` records which
    fields were supplied explicitly, so a caller can tell ``access_level=0``
    apart from an omitted access level.
    """

    model_config = ConfigDict(populate_by_name=True)

    resource_id: int = Field(default=0, alias="id")
    name: str = ""
    scopes: List[str] = Field(default_factory=list)
    access_level: int = 0
    expires_at: Optional[datetime] = None

    @field_validator("expires_at", mode="before")
    @classmethod
    def _parse_expires_at(cls, v: Any) -> Optional[datetime]:
        return parse_timestamp(v) if v is not None else None

    def is_set(self, field: str) -> bool:
        """Return ``True`` if ``field`` was explicitly supplied."""
        return field in self.model_fields_set


class PolicyLimits(BaseModel):
    """Organization policy applied to every token request."""

    model_config = ConfigDict(frozen=True)

    max_ttl: timedelta = timedelta(0)
    allow_owner_level: bool = False

    @field_validator("max_ttl", mode="before")
    @classmethod
    def _parse_max_ttl(cls, v: Any) -> Any:
        return parse_duration(v)

    @field_validator("max_ttl")
    @classmethod
    def _non_negative(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("max_ttl must not be negative")
        return v


class IssuedToken(BaseModel):
    """A token returned by the issuing service."""

    token: str
    resource_id: int
    name: str
    scopes: List[str] = Field(default_factory=list)
    access_level: int = 0
    expires_at: Optional[datetime] = None
    token_id: Optional[int] = None

    @field_validator("expires_at", mode="before")
    @classmethod
    def _parse_expires_at(cls, v: Any) -> Optional[datetime]:
        return parse_timestamp(v) if v is not None else None


def token_details(issued: IssuedToken) -> Dict[str, Any]:
    """Render an issued token as the response map returned to callers."""
    details: Dict[str, Any] = {
        "token": issued.token,
        "id": issued.resource_id,
        "name": issued.name,
        "scopes": list(issued.scopes),
        "access_level": issued.access_level,
    }
    if issued.expires_at is not None:
        details["expires_at"] = issued.expires_at
    return details
