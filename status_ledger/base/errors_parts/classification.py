"""
Error classification helpers mapping store exceptions to ErrorCode values.

Drivers encode failure categories differently: psycopg exposes a SQLSTATE on
``sqlstate`` (``pgcode`` on psycopg2), ``sqlite3`` exposes the extended result
code name on ``sqlite_errorname``. Only these structured attributes are
consulted; error text is never parsed.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

from .error_code import ErrorCode
from .ledger_error import LedgerError, StorageError

_SQLSTATE_MAP: Dict[str, ErrorCode] = {
    "23505": ErrorCode.CONFLICT,
    "40001": ErrorCode.TRANSIENT,
    "40P01": ErrorCode.TRANSIENT,
    "55P03": ErrorCode.TRANSIENT,
    "57014": ErrorCode.TIMEOUT,
}

_SQLSTATE_CLASS_MAP: Dict[str, ErrorCode] = {
    "08": ErrorCode.UNAVAILABLE,
    "53": ErrorCode.UNAVAILABLE,
    "57": ErrorCode.UNAVAILABLE,
}

_SQLITE_MAP: Dict[str, ErrorCode] = {
    "SQLITE_CONSTRAINT_UNIQUE": ErrorCode.CONFLICT,
    "SQLITE_CONSTRAINT_PRIMARYKEY": ErrorCode.CONFLICT,
    "SQLITE_BUSY": ErrorCode.TRANSIENT,
    "SQLITE_BUSY_SNAPSHOT": ErrorCode.TRANSIENT,
    "SQLITE_LOCKED": ErrorCode.TRANSIENT,
    "SQLITE_CANTOPEN": ErrorCode.UNAVAILABLE,
}


def extract_sqlstate(exc: BaseException) -> Optional[str]:
    """Return the five-character SQLSTATE carried by ``exc`` if any."""
    for attr in ("sqlstate", "pgcode"):
        val = getattr(exc, attr, None)
        if isinstance(val, str) and len(val) == 5:
            return val
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. LedgerError passthrough.
        2. Timeout exceptions (sync/async).
        3. SQLSTATE mapping (exact code, then class).
        4. SQLite result code name mapping.
        5. ``STORAGE`` fallback.
    """
    if isinstance(exc, LedgerError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    sqlstate = extract_sqlstate(exc)
    if sqlstate is not None:
        if sqlstate in _SQLSTATE_MAP:
            return _SQLSTATE_MAP[sqlstate]
        return _SQLSTATE_CLASS_MAP.get(sqlstate[:2], ErrorCode.STORAGE)
    errorname = getattr(exc, "sqlite_errorname", None)
    if isinstance(errorname, str) and errorname in _SQLITE_MAP:
        return _SQLITE_MAP[errorname]
    return ErrorCode.STORAGE


def storage_error(
    operation: str,
    message: str,
    cause: Optional[BaseException] = None,
    *,
    rollback_attempted: bool = False,
    rollback_error: Optional[BaseException] = None,
) -> StorageError:
    """Build a :class:`StorageError` whose code is derived from ``cause``."""
    return StorageError(
        message=message,
        operation=operation,
        code=classify_exception(cause) if cause is not None else ErrorCode.STORAGE,
        cause=cause,
        rollback_attempted=rollback_attempted,
        rollback_error=rollback_error,
    )


__all__ = [
    "classify_exception",
    "storage_error",
    "extract_sqlstate",
]
