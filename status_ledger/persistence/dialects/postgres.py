"""PostgreSQL dialect (native ``$n`` placeholders, psycopg 3).

PostgreSQL marks the whole transaction as aborted after any failed statement,
so after a unique violation the upsert must roll back and run its update in a
fresh transaction. psycopg's ``RawCursor`` passes ``$n`` placeholders to the
server unchanged.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import psycopg

from ...base.errors_parts.classification import extract_sqlstate
from .dialect import Dialect, ensure_utc

UNIQUE_VIOLATION_SQLSTATE = "23505"


def _placeholder(index: int) -> str:
    return f"${index}"


def is_unique_violation(exc: BaseException) -> bool:
    """True when ``exc`` carries SQLSTATE 23505 (psycopg 3 or psycopg2)."""
    return extract_sqlstate(exc) == UNIQUE_VIOLATION_SQLSTATE


def _encode_timestamp(value: datetime) -> datetime:
    return ensure_utc(value)


def _open_cursor(conn: Any) -> Any:
    if isinstance(conn, psycopg.Connection):
        return psycopg.RawCursor(conn)
    return conn.cursor()


def _prepare_connection(conn: Any) -> Any:
    if isinstance(conn, psycopg.Connection) and not conn.autocommit:
        conn.autocommit = True
    return conn


POSTGRES = Dialect(
    name="postgres",
    placeholder=_placeholder,
    is_unique_violation=is_unique_violation,
    keeps_transaction_after_error=False,
    encode_timestamp=_encode_timestamp,
    timestamp_type="TIMESTAMPTZ",
    open_cursor=_open_cursor,
    prepare_connection=_prepare_connection,
)


__all__ = ["POSTGRES", "UNIQUE_VIOLATION_SQLSTATE", "is_unique_violation"]
