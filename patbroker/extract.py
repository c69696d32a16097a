"""Map raw request fields onto a :class:`TokenRequest`."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .contracts import TokenRequest
from .fields import FieldData

# request key -> TokenRequest attribute
FIELD_MAP = {
    "id": "resource_id",
    "name": "name",
    "scopes": "scopes",
    "access_level": "access_level",
    "expires_at": "expires_at",
}


def extract_token_request(
    data: FieldData, into: Optional[TokenRequest] = None
) -> TokenRequest:
    """Build a token request from the fields explicitly present in ``data``.

    Absent fields keep their zero value, or the value from ``into`` when a
    base request is supplied. No validation or defaulting happens here.

    Raises:
        FieldDecodeError: a present field has a value of the wrong type.
    """
    present: Dict[str, Any] = {}
    for key, attr in FIELD_MAP.items():
        value, ok = data.get_ok(key)
        if ok:
            present[attr] = value

    if into is None:
        return TokenRequest(**present)

    merged = {name: getattr(into, name) for name in into.model_fields_set}
    merged.update(present)
    return TokenRequest(**merged)
