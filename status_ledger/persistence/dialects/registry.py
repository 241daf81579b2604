"""Dialect registry keyed by declared database kind.

The registry is the dialect selector: ``get_dialect(kind)`` normalizes the
kind and returns the registered dialect, falling back to the generic dialect
for every unrecognized kind (SQLite, MySQL, empty strings...).
"""

from __future__ import annotations

from typing import Dict

from .dialect import Dialect
from .generic import GENERIC
from .postgres import POSTGRES

_DIALECTS: Dict[str, Dialect] = {
    "postgres": POSTGRES,
    "postgresql": POSTGRES,
}


def _normalize(kind: str | None) -> str:
    return (kind or "").strip().lower()


def register_dialect(kind: str, dialect: Dialect) -> None:
    """Register ``dialect`` for ``kind`` (replacing any previous entry)."""
    name = _normalize(kind)
    if not name:
        raise ValueError("dialect kind must be a non-empty string")
    _DIALECTS[name] = dialect


def get_dialect(kind: str | None) -> Dialect:
    """Return the dialect registered for ``kind`` or the generic dialect."""
    return _DIALECTS.get(_normalize(kind), GENERIC)


def registered_kinds() -> list[str]:
    """Return the explicitly registered kinds in ascending order."""
    return sorted(_DIALECTS)


__all__ = ["get_dialect", "register_dialect", "registered_kinds"]
