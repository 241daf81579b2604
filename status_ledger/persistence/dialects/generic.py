"""Generic dialect for engines using ``?`` placeholders (SQLite, MySQL family).

Both SQLite and MySQL roll back only the failing statement on a constraint
error, so the transaction stays usable and the upsert can fall through to its
update inside the same transaction.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any

from .dialect import Dialect, ensure_utc

# sqlite3 exposes the extended result code name on IntegrityError
_SQLITE_UNIQUE_NAMES = frozenset({"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"})

# MySQL/MariaDB ER_DUP_ENTRY
_MYSQL_DUP_ENTRY = 1062


def _placeholder(_index: int) -> str:
    return "?"


def is_unique_violation(exc: BaseException) -> bool:
    """Recognize a duplicate-key failure from sqlite3 or a MySQL driver."""
    if isinstance(exc, sqlite3.IntegrityError):
        return getattr(exc, "sqlite_errorname", None) in _SQLITE_UNIQUE_NAMES
    if getattr(exc, "errno", None) == _MYSQL_DUP_ENTRY:
        return True
    args = getattr(exc, "args", ())
    return bool(args) and args[0] == _MYSQL_DUP_ENTRY


def _encode_timestamp(value: datetime) -> str:
    # fixed-width ISO text keeps lexical order equal to chronological order
    return ensure_utc(value).isoformat(timespec="microseconds")


def _prepare_connection(conn: Any) -> Any:
    if isinstance(conn, sqlite3.Connection):
        if conn.isolation_level is not None and not conn.in_transaction:
            conn.isolation_level = None
        return conn
    autocommit = getattr(conn, "autocommit", None)
    if callable(autocommit):  # PyMySQL
        autocommit(True)
    return conn


GENERIC = Dialect(
    name="generic",
    placeholder=_placeholder,
    is_unique_violation=is_unique_violation,
    keeps_transaction_after_error=True,
    encode_timestamp=_encode_timestamp,
    timestamp_type="TIMESTAMP",
    prepare_connection=_prepare_connection,
)


__all__ = ["GENERIC", "is_unique_violation"]
