"""Constraint-violation classifier keyed by database kind.

Thin façade over the dialect registry for callers that hold a database kind
string rather than a :class:`Dialect`.
"""

from __future__ import annotations

from ..dialects.registry import get_dialect


def is_unique_violation(exc: BaseException, database_kind: str) -> bool:
    """Return True when ``exc`` is a uniqueness violation for ``database_kind``."""
    return get_dialect(database_kind).is_unique_violation(exc)


__all__ = ["is_unique_violation"]
