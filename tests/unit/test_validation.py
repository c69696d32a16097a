"""Tests for token request policy validation."""

from datetime import datetime, timedelta, timezone

import pytest

from patbroker.contracts import PolicyLimits, TokenRequest
from patbroker.extract import extract_token_request
from patbroker.fields import FieldData
from patbroker.validation import (
    INVALID_ACCESS_LEVEL,
    access_level_is_valid,
    validate_scopes,
    validate_token_request,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _request(**overrides) -> TokenRequest:
    values = {
        "resource_id": 7,
        "name": "ci-token",
        "scopes": ["read_api", "read_repository"],
        "access_level": 30,
    }
    values.update(overrides)
    return TokenRequest(**values)


def test_valid_request_has_no_errors() -> None:
    errors = validate_token_request(_request(), PolicyLimits(), now=NOW)
    assert errors.is_empty()
    assert errors.error_or_none() is None


@pytest.mark.parametrize("resource_id", [0, -1, -100])
def test_non_positive_id_is_rejected(resource_id: int) -> None:
    errors = validate_token_request(
        _request(resource_id=resource_id), PolicyLimits(), now=NOW
    )
    assert errors.messages == ["id is empty or invalid"]


def test_empty_name_is_rejected() -> None:
    errors = validate_token_request(_request(name=""), PolicyLimits(), now=NOW)
    assert errors.messages == ["name is empty"]


def test_empty_scopes_skip_vocabulary_check() -> None:
    errors = validate_token_request(_request(scopes=[]), PolicyLimits(), now=NOW)
    assert errors.messages == ["scopes are empty"]


def test_unknown_scope_lists_accepted_names() -> None:
    errors = validate_token_request(
        _request(scopes=["read_api", "sudo"]), PolicyLimits(), now=NOW
    )
    assert len(errors) == 1
    message = errors.messages[0]
    assert "sudo" in message
    assert "read_repository" in message
    assert errors.violations[0].kind == "policy"


def test_validate_scopes_accepts_known_names() -> None:
    assert validate_scopes(["api", "write_registry"]) is None


@pytest.mark.parametrize("level", [1, 15, 25, 41, 5])
def test_access_level_not_multiple_of_ten(level: int) -> None:
    errors = validate_token_request(
        _request(access_level=level), PolicyLimits(allow_owner_level=True), now=NOW
    )
    assert errors.messages == [INVALID_ACCESS_LEVEL]


@pytest.mark.parametrize("level", [0, 10, 20, 30, 40])
def test_standard_access_levels_are_valid(level: int) -> None:
    assert access_level_is_valid(level, allow_owner_level=False)


def test_owner_level_requires_policy_flag() -> None:
    request = _request(access_level=50)
    denied = validate_token_request(request, PolicyLimits(), now=NOW)
    allowed = validate_token_request(
        request, PolicyLimits(allow_owner_level=True), now=NOW
    )
    assert denied.messages == [INVALID_ACCESS_LEVEL]
    assert allowed.is_empty()


@pytest.mark.parametrize("level", [-10, -5, 60, 100])
def test_access_level_out_of_range(level: int) -> None:
    assert not access_level_is_valid(level, allow_owner_level=True)


def test_expiry_beyond_max_ttl_is_rejected() -> None:
    limits = PolicyLimits(max_ttl=timedelta(hours=24))
    errors = validate_token_request(
        _request(expires_at=NOW + timedelta(hours=48)), limits, now=NOW
    )
    assert len(errors) == 1
    message = errors.messages[0]
    assert "exceeds configured maximum ttl of '86400's" in message
    assert (NOW + timedelta(hours=24)).isoformat() in message
    assert errors.violations[0].field == "expires_at"


def test_expiry_within_max_ttl_is_accepted() -> None:
    limits = PolicyLimits(max_ttl=timedelta(hours=24))
    errors = validate_token_request(
        _request(expires_at=NOW + timedelta(hours=1)), limits, now=NOW
    )
    assert errors.is_empty()


def test_expiry_exactly_at_ceiling_is_accepted() -> None:
    limits = PolicyLimits(max_ttl=timedelta(hours=24))
    errors = validate_token_request(
        _request(expires_at=NOW + timedelta(hours=24)), limits, now=NOW
    )
    assert errors.is_empty()


def test_zero_max_ttl_allows_any_expiry() -> None:
    errors = validate_token_request(
        _request(expires_at=NOW + timedelta(days=3650)), PolicyLimits(), now=NOW
    )
    assert errors.is_empty()


def test_missing_expiry_is_allowed_with_max_ttl() -> None:
    limits = PolicyLimits(max_ttl=timedelta(hours=1))
    assert validate_token_request(_request(), limits, now=NOW).is_empty()


def test_all_violations_are_reported_together() -> None:
    request = TokenRequest(resource_id=3, scopes=[], access_level=15)
    errors = validate_token_request(request, PolicyLimits(), now=NOW)
    assert errors.messages == [
        "name is empty",
        "scopes are empty",
        INVALID_ACCESS_LEVEL,
    ]


def test_validation_is_repeatable() -> None:
    request = _request()
    limits = PolicyLimits(max_ttl=timedelta(days=1))
    first = validate_token_request(request, limits, now=NOW)
    second = validate_token_request(request, limits, now=NOW)
    assert first.is_empty() and second.is_empty()


def test_missing_id_reported_alongside_other_violations() -> None:
    request = extract_token_request(
        FieldData({"name": "n", "scopes": "bogus", "access_level": 60})
    )
    errors = validate_token_request(request, PolicyLimits(), now=NOW)
    assert len(errors) == 3
    assert errors.messages[0] == "id is empty or invalid"
    assert "bogus" in errors.messages[1]
    assert errors.messages[2] == INVALID_ACCESS_LEVEL
