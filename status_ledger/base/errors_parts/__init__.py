"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `status_ledger.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .ledger_error import InvalidArgumentError, LedgerError, StorageError
from .classification import classify_exception, storage_error

__all__ = [
    "ErrorCode",
    "LedgerError",
    "InvalidArgumentError",
    "StorageError",
    "classify_exception",
    "extract_sqlstate",
    "storage_error",
]
