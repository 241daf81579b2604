"""Persistence interfaces package for the status ledger.

Defines repository protocols and shared DTOs for company status records and
webhook delivery attempts. Concrete implementations live under
``persistence/sql``.
"""

from .repos import (  # noqa: F401
    CompanyStatus,
    IStatusRepo,
    IWebhookRepo,
    StatusRecord,
    WebhookAttempt,
)
