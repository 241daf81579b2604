"""Repository constructors keyed by declared database kind.

Purpose
-------
Single entry point for callers holding a database kind string and an open
DB-API connection. The kind selects a dialect from the registry (unknown
kinds get the generic dialect); the connection is switched into autocommit so
repositories own transaction demarcation.

Ownership
---------
The connection stays owned by the caller. ``close()`` on either repository
closes it; call it once, after which that repository is unusable.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional, Tuple

import psycopg

from ..base.errors import InvalidArgumentError, storage_error
from ..base.logging import configure_logger
from ..config import LedgerConfig, get_ledger_config
from .dialects.dialect import Dialect
from .dialects.postgres import POSTGRES
from .dialects.registry import get_dialect
from .interfaces.repos import IStatusRepo, IWebhookRepo
from .sql.engine import create_connection
from .sql.status_repo import StatusRepoSql
from .sql.webhook_repo import WebhookRepoSql

SQLITE_KINDS = frozenset({"sqlite", "sqlite3", "generic"})


def _prepare(dialect: Dialect, conn: Any, operation: str) -> None:
    try:
        dialect.prepare_connection(conn)
    except Exception as exc:
        raise storage_error(operation, "cannot switch connection to autocommit", exc) from exc


def get_status_repository(
    database_kind: str,
    conn: Any,
    *,
    logger: Optional[logging.Logger] = None,
    config: Optional[LedgerConfig] = None,
) -> IStatusRepo:
    """Return the company status repository for ``database_kind``.

    ``config`` defaults to ``get_ledger_config()``, so the upsert attempt
    bound follows ``LEDGER_UPSERT_MAX_ATTEMPTS`` and the config file.
    """
    dialect = get_dialect(database_kind)
    _prepare(dialect, conn, "status.open")
    cfg = config if config is not None else get_ledger_config()
    return StatusRepoSql(conn, dialect, logger=logger, max_attempts=cfg.upsert_max_attempts)


def get_webhook_repository(
    database_kind: str,
    conn: Any,
    *,
    logger: Optional[logging.Logger] = None,
) -> IWebhookRepo:
    """Return the webhook attempt repository for ``database_kind``."""
    dialect = get_dialect(database_kind)
    _prepare(dialect, conn, "webhook.open")
    return WebhookRepoSql(conn, dialect, logger=logger)


def open_connection(config: Optional[LedgerConfig] = None) -> Tuple[str, Any]:
    """Open a store connection described by ``config``.

    Applies the configured log level/format to the shared ledger logger and
    returns ``(database_kind, connection)``, ready for the ``get_*``
    constructors.

    Raises
    ------
    InvalidArgumentError
        Postgres selected without a DSN, or a kind without a built-in
        connector (open the handle yourself and pass it to ``get_*``).
    StorageError
        The driver failed to connect.
    """
    op = "store.open"
    cfg = config if config is not None else get_ledger_config()
    configure_logger(level=cfg.log_level, json_mode=cfg.log_json)
    kind = cfg.database_kind
    if get_dialect(kind) is POSTGRES:
        if not cfg.postgres_dsn:
            raise InvalidArgumentError(message="postgres_dsn is required", operation=op)
        try:
            return kind, psycopg.connect(cfg.postgres_dsn, autocommit=True)
        except psycopg.Error as exc:
            raise storage_error(op, "connect failed", exc) from exc
    if kind not in SQLITE_KINDS:
        raise InvalidArgumentError(message=f"no built-in connector for '{kind}'", operation=op)
    try:
        return kind, create_connection(cfg.sqlite_path)
    except (OSError, sqlite3.Error) as exc:
        raise storage_error(op, "connect failed", exc) from exc


__all__ = [
    "get_status_repository",
    "get_webhook_repository",
    "open_connection",
]
