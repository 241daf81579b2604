"""Engine helpers for the ledger persistence layer.

Purpose
-------
Open local SQLite connections with sane defaults and create the ledger tables
for local development, tests, and first-run bootstrap. This is not a
migration system; deployed databases are expected to be managed externally.

Timeout and reliability strategy
--------------------------------
- Applies a standard ``busy_timeout`` (milliseconds) from
  ``status_ledger.config.defaults`` to mitigate lock contention.
- Enables WAL journaling and NORMAL synchronous mode.
- Opens connections in autocommit mode (``isolation_level=None``); the
  repositories issue explicit ``BEGIN``/``COMMIT``/``ROLLBACK``.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, List, Optional

from ...config.defaults import (
    DEFAULT_SQLITE_PATH,
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)
from ..dialects.dialect import Dialect
from ..dialects.registry import get_dialect


def _ensure_dir(p: Path) -> None:
    """Create directory ``p`` (and parents) if missing."""
    p.mkdir(parents=True, exist_ok=True)


def get_db_path(db_path: Optional[str] = None) -> Path:
    """Return a concrete database file path.

    Parameters
    ----------
    db_path:
        Optional string path. When ``None``, defaults to ``DEFAULT_SQLITE_PATH``.
        ``~`` is expanded.
    """
    return Path(db_path).expanduser() if db_path else DEFAULT_SQLITE_PATH


def create_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a SQLite connection configured for the ledger.

    Behavior
    --------
    - Ensures the parent directory exists prior to opening the database file.
    - Avoids ``detect_types``; timestamps come back as ISO-8601 text and are
      parsed explicitly by the repositories.
    - Sets ``row_factory`` to ``sqlite3.Row`` and autocommit mode.
    """
    path = get_db_path(db_path)
    _ensure_dir(path.parent)
    conn = sqlite3.connect(str(path), isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
    conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    return conn


def schema_statements(dialect: Dialect) -> List[str]:
    """Return the idempotent DDL for the ledger tables under ``dialect``.

    - ``company_status``: one live row per (company_id, user_id), enforced by
      a partial unique index that ignores soft-deleted rows.
    - ``webhook_stats``: append-only delivery attempts.
    """
    ts = dialect.timestamp_type
    return [
        f"""
        CREATE TABLE IF NOT EXISTS company_status (
            company_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            note TEXT NOT NULL DEFAULT '',
            status TEXT NOT NULL,
            created_at {ts} NOT NULL,
            deleted_at {ts}
        )
        """,
        """
        CREATE UNIQUE INDEX IF NOT EXISTS company_status_live_idx
            ON company_status (company_id, user_id)
            WHERE deleted_at IS NULL
        """,
        """
        CREATE INDEX IF NOT EXISTS company_status_created_idx
            ON company_status (company_id, created_at)
        """,
        f"""
        CREATE TABLE IF NOT EXISTS webhook_stats (
            watch_id TEXT NOT NULL,
            attempted_at {ts} NOT NULL,
            status INTEGER NOT NULL
        )
        """,
        """
        CREATE INDEX IF NOT EXISTS webhook_stats_watch_idx
            ON webhook_stats (watch_id, attempted_at)
        """,
    ]


def init_schema(conn: Any, database_kind: str = "sqlite") -> None:
    """Create the ledger tables and indexes if they do not exist.

    Each statement runs in the connection's autocommit mode.
    """
    dialect = get_dialect(database_kind)
    dialect.prepare_connection(conn)
    for statement in schema_statements(dialect):
        with closing(dialect.open_cursor(conn)) as cur:
            cur.execute(statement)


__all__ = [
    "create_connection",
    "get_db_path",
    "init_schema",
    "schema_statements",
]
