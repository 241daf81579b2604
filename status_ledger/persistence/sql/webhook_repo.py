"""SQL implementation of ``IWebhookRepo``.

Appends one ``webhook_stats`` row per delivery attempt. There is no update
path and no uniqueness constraint, so the single INSERT runs in the
connection's autocommit mode without an explicit transaction.
"""

from __future__ import annotations

import logging
from contextlib import closing
from datetime import datetime
from typing import Any, Optional

from ...base.errors import InvalidArgumentError, storage_error
from ...base.logging import LogContext, get_logger
from ..dialects.dialect import Dialect
from ..interfaces.repos import IWebhookRepo, WebhookAttempt
from .base_repo import SqlRepoBase
from .queries import webhook_queries


class WebhookRepoSql(SqlRepoBase, IWebhookRepo):
    """Append-only webhook delivery attempt ledger."""

    _close_operation = "webhook.close"

    def __init__(self, conn: Any, dialect: Dialect, *, logger: Optional[logging.Logger] = None) -> None:
        super().__init__(conn, dialect, logger or get_logger("ledger.persistence.webhook"))
        self._queries = webhook_queries(dialect)

    def record_attempt(self, watch_id: str, attempted_at: datetime, status_code: int) -> None:
        """Persist one delivery attempt.

        Raises
        ------
        InvalidArgumentError
            If ``attempted_at`` is not a ``datetime``.
        StorageError
            On any store failure.
        """
        op = "webhook.record"
        if not isinstance(attempted_at, datetime):
            raise InvalidArgumentError(message="attempted_at must be a datetime", operation=op)
        self._ensure_open(op)
        self._insert(WebhookAttempt(watch_id=watch_id, attempted_at=attempted_at, status_code=status_code), op)

    def _insert(self, attempt: WebhookAttempt, op: str) -> None:
        params = (
            attempt.watch_id,
            self._dialect.encode_timestamp(attempt.attempted_at),
            attempt.status_code,
        )
        try:
            with closing(self._dialect.open_cursor(self.conn)) as cur:
                cur.execute(self._queries.insert, params)
        except Exception as exc:
            ctx = LogContext(database_kind=self._dialect.name, operation=op, watch_id=attempt.watch_id)
            self._log_failure("webhook.record.failed", ctx, exc)
            raise storage_error(op, "insert failed", exc) from exc


__all__ = ["WebhookRepoSql"]
