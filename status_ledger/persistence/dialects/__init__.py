"""SQL dialects for the ledger repositories.

Each dialect supplies placeholder syntax, a uniqueness-violation classifier,
transaction semantics after errors, and timestamp binding. ``get_dialect``
selects one from a declared database kind.
"""

from .dialect import Dialect, ensure_utc
from .generic import GENERIC
from .postgres import POSTGRES
from .registry import get_dialect, register_dialect, registered_kinds

__all__ = [
    "Dialect",
    "ensure_utc",
    "GENERIC",
    "POSTGRES",
    "get_dialect",
    "register_dialect",
    "registered_kinds",
]
