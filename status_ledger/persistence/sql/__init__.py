"""SQL repository adapters shared by every dialect."""

from .constraints import is_unique_violation
from .engine import create_connection, get_db_path, init_schema
from .status_repo import StatusRepoSql
from .transaction import Transaction
from .webhook_repo import WebhookRepoSql

__all__ = [
    "StatusRepoSql",
    "WebhookRepoSql",
    "Transaction",
    "create_connection",
    "get_db_path",
    "init_schema",
    "is_unique_violation",
]
