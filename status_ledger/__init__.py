"""status_ledger package

Compliance status ledger for companies plus an append-only webhook delivery
log, over SQLite, PostgreSQL, or any DB-API store using ``?`` placeholders.

Public API (re-exported):
    - Version: ``__version__``
    - Constructors: :func:`get_status_repository`,
      :func:`get_webhook_repository`, :func:`open_connection`
    - DTOs: :class:`StatusRecord`, :class:`WebhookAttempt`,
      :class:`CompanyStatus`
    - Exceptions: :class:`LedgerError`, :class:`InvalidArgumentError`,
      :class:`StorageError`, :class:`ErrorCode`
"""

from .base.errors import ErrorCode, InvalidArgumentError, LedgerError, StorageError
from .persistence import (
    CompanyStatus,
    IStatusRepo,
    IWebhookRepo,
    StatusRecord,
    WebhookAttempt,
    get_status_repository,
    get_webhook_repository,
    open_connection,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorCode",
    "InvalidArgumentError",
    "LedgerError",
    "StorageError",
    "CompanyStatus",
    "IStatusRepo",
    "IWebhookRepo",
    "StatusRecord",
    "WebhookAttempt",
    "get_status_repository",
    "get_webhook_repository",
    "open_connection",
]
