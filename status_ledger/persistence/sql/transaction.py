"""Explicit transaction scope over an autocommit DB-API connection.

Repositories run with the driver in autocommit mode and demarcate their own
transactions with ``BEGIN``/``COMMIT``/``ROLLBACK`` statements. This keeps the
transaction boundary identical across drivers, whatever their implicit
transaction behavior.

On context exit, a transaction that is still open is rolled back, so every
path out of a repository call has either committed or rolled back.
"""

from __future__ import annotations

from contextlib import closing
from typing import Any, Optional, Sequence

from ..dialects.dialect import Dialect


class Transaction:
    """One explicit transaction on ``conn``.

    ``rollback`` reports its own failure as a return value instead of
    raising, so callers can attach it to the error that caused the rollback.
    """

    def __init__(self, conn: Any, dialect: Dialect) -> None:
        self._conn = conn
        self._dialect = dialect
        self.active = False

    def _run(self, statement: str) -> None:
        with closing(self._dialect.open_cursor(self._conn)) as cur:
            cur.execute(statement)

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.active:
            return
        rollback_error = self.rollback()
        if exc is not None and rollback_error is not None:
            exc.add_note(f"rollback failed: {rollback_error}")

    def begin(self) -> None:
        """Start the transaction."""
        self._run("BEGIN")
        self.active = True

    def execute(self, query: str, params: Sequence[Any]) -> int:
        """Execute one statement and return the driver's row count."""
        with closing(self._dialect.open_cursor(self._conn)) as cur:
            cur.execute(query, tuple(params))
            return cur.rowcount

    def commit(self) -> None:
        """Commit; the transaction stays active if COMMIT itself fails."""
        self._run("COMMIT")
        self.active = False

    def rollback(self) -> Optional[BaseException]:
        """Roll back and return the rollback failure, if any."""
        self.active = False
        try:
            self._run("ROLLBACK")
        except Exception as exc:  # noqa: BLE001 - reported to the caller
            return exc
        return None


__all__ = ["Transaction"]
