"""Unified ledger error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``status_ledger.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.ledger_error import InvalidArgumentError, LedgerError, StorageError
from .errors_parts.classification import classify_exception, extract_sqlstate, storage_error

__all__ = [
    "ErrorCode",
    "LedgerError",
    "InvalidArgumentError",
    "StorageError",
    "classify_exception",
    "extract_sqlstate",
    "storage_error",
]
