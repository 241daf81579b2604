"""SQL implementation of ``IStatusRepo``.

The company status ledger keeps at most one live row per
``(company_id, user_id)``; a partial unique index on the store enforces it.
``upsert_status`` inserts first and lets that index detect an existing row,
turning the call into an update of ``note``/``status`` without a prior
existence check. ``created_at`` is never touched by the update.

Dialect differences handled here through the :class:`Dialect` object only:

- engines that keep a transaction usable after a failed statement (SQLite,
  MySQL) run the update in the same transaction as the failed insert;
- engines that abort the transaction (PostgreSQL) roll back and run the
  update in a fresh transaction. If the conflicting row vanished in between
  (zero rows updated) the insert is tried again, bounded by
  ``max_attempts``.
"""

from __future__ import annotations

import logging
from contextlib import closing
from datetime import datetime
from typing import Any, NoReturn, Optional

from ...base.errors import InvalidArgumentError, storage_error
from ...base.logging import LogContext, get_logger, log_event
from ...config.defaults import UPSERT_MAX_ATTEMPTS
from ..dialects.dialect import Dialect
from ..interfaces.repos import IStatusRepo, StatusRecord
from .base_repo import SqlRepoBase
from .helpers import require_key, status_from_row, status_to_db
from .queries import status_queries
from .transaction import Transaction


class StatusRepoSql(SqlRepoBase, IStatusRepo):
    """Company status ledger over any DB-API connection.

    The connection is owned by the caller and must not be shared with
    concurrent callers on other threads unless the driver allows it.
    """

    _close_operation = "status.close"

    def __init__(
        self,
        conn: Any,
        dialect: Dialect,
        *,
        logger: Optional[logging.Logger] = None,
        max_attempts: int = UPSERT_MAX_ATTEMPTS,
    ) -> None:
        super().__init__(conn, dialect, logger or get_logger("ledger.persistence.status"))
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._queries = status_queries(dialect)
        self._max_attempts = max_attempts

    def get_latest_status(self, company_id: str) -> Optional[StatusRecord]:
        """Return the newest live record for ``company_id`` or ``None``."""
        op = "status.get_latest"
        company_id = require_key(company_id, op, "company_id")
        self._ensure_open(op)
        ctx = LogContext(database_kind=self._dialect.name, operation=op, company_id=company_id)
        try:
            with closing(self._dialect.open_cursor(self.conn)) as cur:
                cur.execute(self._queries.select_latest, (company_id,))
                row = cur.fetchone()
        except Exception as exc:
            self._log_failure("status.read.failed", ctx, exc)
            raise storage_error(op, "query failed", exc) from exc
        if row is None:
            return None
        try:
            return status_from_row(row)
        except (TypeError, ValueError) as exc:
            self._log_failure("status.read.failed", ctx, exc)
            raise storage_error(op, "malformed status row", exc) from exc

    def upsert_status(self, company_id: str, record: StatusRecord) -> None:
        """Insert ``record`` or, on a live-row conflict, update it in place.

        One attempt is an insert plus, on conflict, the update that follows
        it (in a fresh transaction when the dialect aborts on error). Only an
        update that finds no live row starts another attempt.
        """
        op = "status.upsert"
        company_id = require_key(company_id, op, "company_id")
        require_key(record.user_id, op, "user_id")
        require_key(record.status, op, "status")
        if not isinstance(record.created_at, datetime):
            raise InvalidArgumentError(message="created_at must be a datetime", operation=op)
        self._ensure_open(op)

        status = status_to_db(record.status)
        insert_params = (
            company_id,
            record.user_id,
            record.note,
            status,
            self._dialect.encode_timestamp(record.created_at),
        )
        update_params = (record.note, status, company_id, record.user_id)
        ctx = LogContext(
            database_kind=self._dialect.name,
            operation=op,
            company_id=company_id,
            extra={"user_id": record.user_id},
        )

        for attempt in range(1, self._max_attempts + 1):
            with Transaction(self.conn, self._dialect) as tx:
                self._begin(tx, op, ctx)
                try:
                    tx.execute(self._queries.insert, insert_params)
                except Exception as exc:
                    if not self._dialect.is_unique_violation(exc):
                        self._abort(tx, op, "insert failed", exc, ctx)
                    same_transaction = self._dialect.keeps_transaction_after_error
                    log_event(
                        self._logger,
                        "status.upsert.conflict",
                        ctx,
                        level=logging.DEBUG,
                        attempt=attempt,
                        same_transaction=same_transaction,
                    )
                    if same_transaction:
                        if self._update(tx, op, update_params, ctx, attempt):
                            return
                        continue
                    self._discard(tx, op, "rollback after conflict failed", exc)
                else:
                    self._commit(tx, op, ctx)
                    return

            with Transaction(self.conn, self._dialect) as tx:
                self._begin(tx, op, ctx)
                if self._update(tx, op, update_params, ctx, attempt):
                    return

        log_event(self._logger, "status.upsert.failed", ctx, level=logging.WARNING, attempts=self._max_attempts)
        raise storage_error(op, f"no stable outcome after {self._max_attempts} attempts")

    # ---- transaction steps ----

    def _update(self, tx: Transaction, op: str, params: tuple, ctx: LogContext, attempt: int) -> bool:
        """Update the live row; False when none matched and the insert must run again."""
        try:
            updated = tx.execute(self._queries.update, params)
        except Exception as exc:
            self._abort(tx, op, "update failed", exc, ctx)

        if updated == 0:
            # conflicting live row is gone
            self._discard(tx, op, "rollback after empty update failed", None)
            log_event(self._logger, "status.upsert.retry", ctx, level=logging.DEBUG, attempt=attempt)
            return False

        self._commit(tx, op, ctx)
        log_event(self._logger, "status.upsert.updated", ctx, level=logging.DEBUG, attempt=attempt)
        return True

    def _begin(self, tx: Transaction, op: str, ctx: LogContext) -> None:
        try:
            tx.begin()
        except Exception as exc:
            self._log_failure("status.upsert.failed", ctx, exc)
            raise storage_error(op, "begin failed", exc) from exc

    def _commit(self, tx: Transaction, op: str, ctx: LogContext) -> None:
        try:
            tx.commit()
        except Exception as exc:
            self._abort(tx, op, "commit failed", exc, ctx)

    def _abort(self, tx: Transaction, op: str, message: str, exc: BaseException, ctx: LogContext) -> NoReturn:
        rollback_error = tx.rollback()
        self._log_failure("status.upsert.failed", ctx, exc)
        raise storage_error(
            op,
            message,
            exc,
            rollback_attempted=True,
            rollback_error=rollback_error,
        ) from exc

    def _discard(self, tx: Transaction, op: str, message: str, exc: Optional[BaseException]) -> None:
        """Roll back a transaction that is being replaced by a fresh one."""
        rollback_error = tx.rollback()
        if rollback_error is None:
            return
        cause = exc if exc is not None else rollback_error
        raise storage_error(
            op,
            message,
            cause,
            rollback_attempted=True,
            rollback_error=rollback_error,
        ) from cause


__all__ = ["StatusRepoSql"]
