"""Common state and lifecycle shared by the SQL repositories.

Holds the caller-owned connection, the dialect, the logger, and the closed
flag. Once ``close()`` has run, every operation raises ``StorageError`` with
``ErrorCode.UNAVAILABLE``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ...base.errors import ErrorCode, StorageError, storage_error
from ...base.logging import LogContext, log_event
from ..dialects.dialect import Dialect


class SqlRepoBase:
    """Base class for repositories bound to one connection and dialect."""

    _close_operation = "repo.close"

    def __init__(self, conn: Any, dialect: Dialect, logger: logging.Logger) -> None:
        self.conn = conn
        self._dialect = dialect
        self._logger = logger
        self._closed = False

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise StorageError(
                message="repository is closed",
                operation=operation,
                code=ErrorCode.UNAVAILABLE,
            )

    def _log_failure(self, event: str, ctx: Optional[LogContext], exc: BaseException) -> None:
        log_event(
            self._logger,
            event,
            ctx,
            level=logging.WARNING,
            error=str(exc),
            error_type=type(exc).__name__,
        )

    def close(self) -> None:
        """Close the underlying connection; repeated calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        try:
            self.conn.close()
        except Exception as exc:
            raise storage_error(self._close_operation, "close failed", exc) from exc


__all__ = ["SqlRepoBase"]
