"""Request validation helpers.

Every helper raises :class:`InvalidRequestError` so a handler fails with
HTTP 400 before any SDK call is issued.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from stackview.base.exceptions import InvalidRequestError


def is_missing(value: Any) -> bool:
    """True for ``None``, empty strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, (str, list, dict, tuple)) and not value:
        return True
    return False


def require(message: str, *values: Any) -> None:
    """Raise :class:`InvalidRequestError` with *message* if any value is missing."""
    if any(is_missing(v) for v in values):
        raise InvalidRequestError(message)


def parse_json(text: Any, message: str) -> Any:
    """Decode a JSON string, raising :class:`InvalidRequestError` on failure.

    Non-string values are returned as-is, so callers may accept either a
    pre-parsed object or its JSON text.
    """
    if not isinstance(text, str):
        return text
    try:
        return json.loads(text)
    except ValueError as e:
        raise InvalidRequestError(message) from e


def as_json_text(value: Any) -> str:
    """Serialise *value* to JSON unless it is already a string."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def as_bool(value: Any) -> bool:
    """Interpret query-string style booleans (only ``"true"`` is truthy)."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.lower() == "true"


def as_int(value: Any, default: int | None = None) -> int | None:
    """Parse an integer query value, falling back to *default*."""
    if is_missing(value):
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"Invalid integer value: {value}") from e


def as_datetime(value: Any) -> datetime | None:
    """Parse epoch milliseconds (number or digit string) or an ISO-8601 string."""
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) or (isinstance(value, str) and value.isdigit()):
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidRequestError(f"Invalid timestamp: {value}") from e
    raise InvalidRequestError(f"Invalid timestamp: {value}")


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated query value, dropping empty entries."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def compact(**params: Any) -> dict[str, Any]:
    """Drop ``None`` values from keyword arguments destined for an SDK call."""
    return {k: v for k, v in params.items() if v is not None}
