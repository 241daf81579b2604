"""Repository protocol definitions for the status ledger persistence layer.

This module declares the contracts consumed by callers (HTTP handlers,
classification jobs, webhook dispatchers). Concrete implementations live under
`persistence/sql/` and are parameterized by a dialect from
`persistence/dialects/`.

Design Principles:
- No concrete behavior; pure structural typing via `Protocol`.
- Dataclasses represent DTOs crossing repository boundaries.
- Each call is one bounded unit of work; transaction control lives inside the
    implementation, never with the caller.

Failure / Error Semantics:
- Empty required keys raise ``InvalidArgumentError`` before the store is
    touched.
- Every store failure surfaces as ``StorageError`` carrying the driver
    exception and, when a transaction was abandoned, the rollback outcome.
- "Nothing recorded yet" is ``None``, never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol, Union

# ---------- Data Transfer Objects ----------


class CompanyStatus(str, Enum):
    """Well-known status tags. Other strings are stored verbatim."""

    UNSAFE = "unsafe"
    EXCEPTION = "exception"
    CLEARED = "cleared"


@dataclass
class StatusRecord:
    """One status fact about a company, set by one actor.

    Attributes
    ----------
    user_id: Actor that set the status; unique per company among live rows.
    note: Free-text justification (may be empty).
    status: Status tag (``CompanyStatus`` member or an opaque string).
    created_at: Timestamp chosen by the caller when the fact was created.
    deleted_at: Soft-delete marker; populated rows are invisible to reads.
    """

    user_id: str
    note: str
    status: Union[CompanyStatus, str]
    created_at: datetime
    deleted_at: Optional[datetime] = None


@dataclass
class WebhookAttempt:
    """Single webhook delivery attempt.

    Attributes
    ----------
    watch_id: Watch (subscription) that was notified.
    attempted_at: Time the delivery was attempted.
    status_code: Outcome code of the attempt (HTTP-style, opaque here).
    """

    watch_id: str
    attempted_at: datetime
    status_code: int


# ---------- Repository Protocols ----------


class IStatusRepo(Protocol):
    """Company status ledger."""

    def get_latest_status(self, company_id: str) -> Optional[StatusRecord]:
        """Return the newest live status record for ``company_id``.

        Parameters
        ----------
        company_id:
            Non-empty company identifier.

        Returns
        -------
        Optional[StatusRecord]
            The live record with the greatest ``created_at``; ``None`` when
            the company has no live record.
        """
        ...

    def upsert_status(self, company_id: str, record: StatusRecord) -> None:
        """Record ``record`` for ``company_id`` atomically.

        Inserts a new row; when a live row for ``(company_id, record.user_id)``
        already exists its ``note`` and ``status`` are replaced instead, with
        ``created_at`` left untouched. Callers cannot tell the two apart.
        """
        ...

    def close(self) -> None:
        """Release the store handle. The repository is unusable afterwards."""
        ...


class IWebhookRepo(Protocol):
    """Webhook delivery attempt ledger (append-only)."""

    def record_attempt(self, watch_id: str, attempted_at: datetime, status_code: int) -> None:
        """Append one delivery attempt row."""
        ...

    def close(self) -> None:
        """Release the store handle. The repository is unusable afterwards."""
        ...
