"""Persistence layer of the status ledger.

``interfaces`` declares the repository contracts and DTOs, ``dialects`` the
engine-specific SQL details, ``sql`` the shared repository logic, and
``factory`` the constructors keyed by database kind.
"""

from .factory import get_status_repository, get_webhook_repository, open_connection
from .interfaces import CompanyStatus, IStatusRepo, IWebhookRepo, StatusRecord, WebhookAttempt

__all__ = [
    "CompanyStatus",
    "IStatusRepo",
    "IWebhookRepo",
    "StatusRecord",
    "WebhookAttempt",
    "get_status_repository",
    "get_webhook_repository",
    "open_connection",
]
