"""Dialect capability object.

A :class:`Dialect` bundles everything that differs between SQL engines for the
ledger: placeholder syntax, recognition of a uniqueness violation, whether a
transaction survives a failed statement, timestamp binding, and how to obtain
a cursor. Repositories hold one dialect and never branch on engine names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, List


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive input is taken as UTC)."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _default_cursor(conn: Any) -> Any:
    return conn.cursor()


def _leave_connection(conn: Any) -> Any:
    return conn


@dataclass(frozen=True)
class Dialect:
    """SQL engine specifics consumed by the shared repository logic.

    Attributes
    ----------
    name:
        Canonical dialect name (``"generic"``, ``"postgres"``).
    placeholder:
        Renders the 1-based positional parameter marker.
    is_unique_violation:
        True when a driver exception means a unique constraint fired.
    keeps_transaction_after_error:
        False for engines that abort the whole transaction once a statement
        fails; the upsert then continues in a fresh transaction.
    encode_timestamp:
        Converts an aware UTC datetime into the value bound to the driver.
    timestamp_type:
        Column type used for timestamps by ``init_schema``.
    open_cursor:
        Returns a new cursor for a connection.
    prepare_connection:
        Puts a connection into driver-level autocommit so that transactions
        are only the explicit BEGIN/COMMIT/ROLLBACK issued by repositories.
    """

    name: str
    placeholder: Callable[[int], str]
    is_unique_violation: Callable[[BaseException], bool]
    keeps_transaction_after_error: bool
    encode_timestamp: Callable[[datetime], Any]
    timestamp_type: str = "TIMESTAMP"
    open_cursor: Callable[[Any], Any] = field(default=_default_cursor)
    prepare_connection: Callable[[Any], Any] = field(default=_leave_connection)

    def placeholders(self, count: int) -> List[str]:
        """Return markers for parameters ``1..count`` in order."""
        return [self.placeholder(i) for i in range(1, count + 1)]


__all__ = ["Dialect", "ensure_utc"]
