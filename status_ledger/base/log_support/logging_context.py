"""Structured logging context object for ledger events.

This module defines :class:`LogContext`, a dataclass used to carry common
fields for ledger logging events (database kind, operation, and the entity
identifiers involved). ``to_dict`` merges the ``extra`` mapping and prunes
``None`` values for clean structured output.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for ledger logging events."""

    database_kind: Optional[str] = None
    operation: Optional[str] = None
    company_id: Optional[str] = None
    watch_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
