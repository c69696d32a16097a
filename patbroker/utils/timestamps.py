from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

from pydantic import TypeAdapter

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_datetime_adapter = TypeAdapter(datetime)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(raw: Any) -> datetime:
    """Parse ``raw`` into a UTC datetime.

    Dates and ``YYYY-MM-DD`` strings map to midnight UTC on that date. Other
    values go through pydantic's datetime parsing, so RFC 3339 strings and
    unix timestamps are accepted.

    Raises:
        pydantic.ValidationError: ``raw`` is not a recognisable timestamp.
    """
    if isinstance(raw, date) and not isinstance(raw, datetime):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    if isinstance(raw, str) and _DATE_ONLY.match(raw.strip()):
        d = date.fromisoformat(raw.strip())
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    return as_utc(_datetime_adapter.validate_python(raw))
