from __future__ import annotations

import re
from datetime import timedelta
from typing import Any

_UNITS = {
    "ms": 0.001,
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
}
_COMPONENT = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h|d)")


def parse_duration(value: Any) -> Any:
    """Parse Go-style duration strings such as ``24h`` or ``1h30m``.

    Plain numbers are treated as seconds. Values that are not recognised
    are returned untouched so pydantic can apply its own timedelta parsing
    (ISO-8601 ``P1D`` and friends).
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return timedelta(seconds=value)
    if not isinstance(value, str):
        return value

    text = value.strip().lower()
    if not text:
        return timedelta(0)
    if re.fullmatch(r"\d+(?:\.\d+)?", text):
        return timedelta(seconds=float(text))

    pos = 0
    seconds = 0.0
    for match in _COMPONENT.finditer(text):
        if match.start() != pos:
            return value
        seconds += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        return value
    return timedelta(seconds=seconds)
