"""
Ledger Base Package

Cross-cutting infrastructure shared by the persistence layer:
- Errors: normalized error codes and the ledger exception hierarchy
- Logging: structured JSON logging helpers
"""

from .errors import (
    ErrorCode,
    InvalidArgumentError,
    LedgerError,
    StorageError,
    classify_exception,
)
from .logging import LogContext, configure_logger, get_logger, log_event

__all__ = [
    "ErrorCode",
    "InvalidArgumentError",
    "LedgerError",
    "StorageError",
    "classify_exception",
    "LogContext",
    "configure_logger",
    "get_logger",
    "log_event",
]
