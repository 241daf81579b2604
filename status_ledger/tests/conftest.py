"""Shared fixtures for the status ledger test suite.

Provides an isolated on-disk SQLite database per test (``conn``) with the
ledger schema created, repositories bound to it, and a ``ts`` helper that
builds aware UTC timestamps. Ledger environment variables are cleared for
every test so a developer's shell cannot leak configuration into the suite.
"""
from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator

import pytest

from status_ledger.config import CONFIG_FILE_ENV, ENV_FIELD_MAP
from status_ledger.persistence.dialects import GENERIC
from status_ledger.persistence.sql.engine import create_connection, init_schema
from status_ledger.persistence.sql.status_repo import StatusRepoSql
from status_ledger.persistence.sql.webhook_repo import WebhookRepoSql

BASE_TS = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolate_ledger_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (CONFIG_FILE_ENV, *ENV_FIELD_MAP.values()):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def conn(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    """Provision a fresh SQLite connection with the ledger schema.

    Parameters
    ----------
    tmp_path: Path
        Pytest-provided temp directory unique per test invocation.

    Yields
    ------
    sqlite3.Connection
        Open connection to a temporary database file with schema created.
    """
    db_path = tmp_path / "ledger.db"
    connection = create_connection(str(db_path))
    init_schema(connection)
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture()
def status_repo(conn: sqlite3.Connection) -> StatusRepoSql:
    return StatusRepoSql(conn, GENERIC)


@pytest.fixture()
def webhook_repo(conn: sqlite3.Connection) -> WebhookRepoSql:
    return WebhookRepoSql(conn, GENERIC)


@pytest.fixture()
def ts() -> Callable[[int], datetime]:
    """Return ``minutes -> BASE_TS + minutes`` for readable ordering tests."""

    def _ts(minutes: int = 0) -> datetime:
        return BASE_TS + timedelta(minutes=minutes)

    return _ts
