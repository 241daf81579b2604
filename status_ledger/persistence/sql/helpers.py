"""Shared helper functions for the SQL repository adapters.

Centralizes argument validation, timestamp parsing and row-to-DTO conversion
so both repositories and every dialect decode rows the same way.

All timestamps are normalized to timezone-aware UTC ``datetime`` objects on
read, whether the driver returned a ``datetime`` (psycopg) or ISO-8601 text
(sqlite3 without ``detect_types``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Union

from ...base.errors import InvalidArgumentError
from ..interfaces.repos import CompanyStatus, StatusRecord


def require_key(value: Any, operation: str, name: str) -> str:
    """Return ``value`` when it is a non-blank string, else raise.

    Raises
    ------
    InvalidArgumentError
        If ``value`` is not a string or is empty after stripping.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(message=f"no {name}", operation=operation)
    return value


def parse_timestamp(raw: Any) -> datetime:
    """Parse a stored timestamp into an aware UTC ``datetime``.

    Strategy:
    - ``datetime``: ensure tz-aware (assume UTC if naive).
    - ``str``/``bytes``: ISO-8601 parse, coercing naive to UTC.

    Raises
    ------
    ValueError
        On any other type or malformed text.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        raw = datetime.fromisoformat(raw)
    if isinstance(raw, datetime):
        return raw.replace(tzinfo=timezone.utc) if raw.tzinfo is None else raw.astimezone(timezone.utc)
    raise ValueError(f"unsupported timestamp value {raw!r}")


def status_to_db(status: Union[CompanyStatus, str]) -> str:
    """Return the plain string persisted for a status tag."""
    return status.value if isinstance(status, CompanyStatus) else str(status)


def status_from_db(raw: Any) -> Union[CompanyStatus, str]:
    """Map a stored tag back to ``CompanyStatus`` when it is a known value."""
    text = str(raw)
    try:
        return CompanyStatus(text)
    except ValueError:
        return text


def status_from_row(r: Any) -> StatusRecord:
    """Convert a ``(user_id, note, status, created_at)`` row into a DTO.

    Parameters
    ----------
    r:
        Sequence matching the status SELECT column order.
    """
    return StatusRecord(
        user_id=r[0],
        note=r[1] if r[1] is not None else "",
        status=status_from_db(r[2]),
        created_at=parse_timestamp(r[3]),
    )


__all__ = [
    "require_key",
    "parse_timestamp",
    "status_to_db",
    "status_from_db",
    "status_from_row",
]
