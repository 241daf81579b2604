"""status_ledger.config.defaults
=============================

Central place for small, stable default values used across the status_ledger
package. These defaults can be overridden via environment variables or an
external configuration file, but provide sensible fallbacks for local
development and tests.

This module intentionally avoids importing from other ledger packages to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

from pathlib import Path

# ---- Store selection ----
# Database kind used when none is configured; any kind other than the
# postgres family resolves to the generic dialect.
DEFAULT_DATABASE_KIND = "sqlite"

# Default on-disk location of the local SQLite ledger.
DEFAULT_SQLITE_DIR = Path("~/.local/share/status_ledger").expanduser()
DEFAULT_SQLITE_PATH = DEFAULT_SQLITE_DIR / "ledger.db"


# ---- Upsert protocol ----
# Upper bound on insert/update steering rounds for stores that abort a
# transaction after a failed statement.
UPSERT_MAX_ATTEMPTS = 3


# ---- SQLite config (infrastructure) ----
# Standard busy timeout to mitigate lock contention (milliseconds).
SQLITE_BUSY_TIMEOUT_MS = 5000
# Journal and sync mode optimized for local development and light concurrency.
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"


# ---- Logging ----
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_JSON = True


__all__ = [
    "DEFAULT_DATABASE_KIND",
    "DEFAULT_SQLITE_DIR",
    "DEFAULT_SQLITE_PATH",
    "UPSERT_MAX_ATTEMPTS",
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_JSON",
]
