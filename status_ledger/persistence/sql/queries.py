"""SQL text for the ledger tables, rendered once per dialect.

Only placeholder markers vary between dialects; the statements themselves are
plain SQL understood by every supported engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from ..dialects.dialect import Dialect


@dataclass(frozen=True)
class StatusQueries:
    """Statements used by the company status repository."""

    select_latest: str
    insert: str
    update: str


@dataclass(frozen=True)
class WebhookQueries:
    """Statements used by the webhook attempt repository."""

    insert: str


@lru_cache(maxsize=None)
def status_queries(dialect: Dialect) -> StatusQueries:
    """Render the status statements for ``dialect``.

    Parameter order:
        select_latest: company_id
        insert: company_id, user_id, note, status, created_at
        update: note, status, company_id, user_id
    """
    (c1,) = dialect.placeholders(1)
    i = dialect.placeholders(5)
    u = dialect.placeholders(4)
    return StatusQueries(
        select_latest=(
            "select user_id, note, status, created_at from company_status "
            f"where company_id = {c1} and deleted_at is null "
            "order by created_at desc limit 1"
        ),
        insert=(
            "insert into company_status (company_id, user_id, note, status, created_at) "
            f"values ({', '.join(i)})"
        ),
        update=(
            f"update company_status set note = {u[0]}, status = {u[1]} "
            f"where company_id = {u[2]} and user_id = {u[3]} and deleted_at is null"
        ),
    )


@lru_cache(maxsize=None)
def webhook_queries(dialect: Dialect) -> WebhookQueries:
    """Render the webhook statements for ``dialect`` (watch_id, attempted_at, status)."""
    p = dialect.placeholders(3)
    return WebhookQueries(
        insert=f"insert into webhook_stats (watch_id, attempted_at, status) values ({', '.join(p)})",
    )


__all__ = ["StatusQueries", "WebhookQueries", "status_queries", "webhook_queries"]
