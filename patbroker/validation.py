"""Policy validation for token requests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from .contracts import VALID_SCOPES, PolicyLimits, TokenRequest
from .errors import MultiError
from .utils.timestamps import as_utc

INVALID_ACCESS_LEVEL = "invalid access level"


def validate_scopes(scopes: Iterable[str]) -> Optional[str]:
    """Return an error message if any scope is outside the known vocabulary."""
    unknown: List[str] = [s for s in scopes if s not in VALID_SCOPES]
    if not unknown:
        return None
    return (
        f"scopes are invalid: unrecognized {', '.join(unknown)}; "
        f"valid scopes are {', '.join(VALID_SCOPES)}"
    )


def access_level_is_valid(access_level: int, allow_owner_level: bool) -> bool:
    """Check ``access_level`` is a non-negative multiple of ten within the tier cap."""
    factor = 5 if allow_owner_level else 4
    return access_level >= 0 and access_level // 10 <= factor and access_level % 10 == 0


def _check_identity(request: TokenRequest, errors: MultiError) -> None:
    if request.resource_id <= 0:
        errors.append("id", "id is empty or invalid")
    if request.name == "":
        errors.append("name", "name is empty")


def _check_scopes(request: TokenRequest, errors: MultiError) -> None:
    if not request.scopes:
        errors.append("scopes", "scopes are empty")
        return
    message = validate_scopes(request.scopes)
    if message:
        errors.append("scopes", message, kind="policy")


def _check_access_level(
    request: TokenRequest, limits: PolicyLimits, errors: MultiError
) -> None:
    if not access_level_is_valid(request.access_level, limits.allow_owner_level):
        errors.append("access_level", INVALID_ACCESS_LEVEL, kind="policy")


def _check_expiry(
    request: TokenRequest, limits: PolicyLimits, now: datetime, errors: MultiError
) -> None:
    if limits.max_ttl <= timedelta(0) or request.expires_at is None:
        return
    max_expires_at = now + limits.max_ttl
    if request.expires_at > max_expires_at:
        errors.append(
            "expires_at",
            f"Requested expires_at '{request.expires_at.isoformat()}' exceeds "
            f"configured maximum ttl of '{int(limits.max_ttl.total_seconds())}'s. "
            f"Expires at or before '{max_expires_at.isoformat()}'",
            kind="policy",
        )


def validate_token_request(
    request: TokenRequest,
    limits: PolicyLimits,
    now: Optional[datetime] = None,
) -> MultiError:
    """Run every check against ``request`` and collect all violations.

    The returned :class:`MultiError` is empty when the request is valid.
    Nothing is raised for policy violations.
    """
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    errors = MultiError()
    _check_identity(request, errors)
    _check_scopes(request, errors)
    _check_access_level(request, limits, errors)
    _check_expiry(request, limits, now, errors)
    return errors
