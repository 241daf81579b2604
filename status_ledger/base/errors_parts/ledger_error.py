"""
Structured ledger exception types.

`LedgerError` carries a normalized `ErrorCode`, the stable identifier of the
operation that failed, the original store exception and, when a transaction
had to be abandoned, the outcome of the rollback. Both the cause and the
rollback outcome are rendered by ``str()`` so a stuck transaction can be
diagnosed from a single log line.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class LedgerError(Exception):
    """Base exception raised by ledger repositories.

    Attributes:
        message: Human-readable summary of what failed.
        operation: Stable operation identifier (e.g. ``"status.upsert"``).
        code: Normalized :class:`ErrorCode` classification.
        cause: Original exception raised by the store driver, if any.
        rollback_attempted: True when the failing call issued a ROLLBACK.
        rollback_error: Exception raised by that ROLLBACK (``None`` when it
            succeeded or was not attempted).
    """

    message: str
    operation: str
    code: ErrorCode = ErrorCode.UNKNOWN
    cause: Optional[BaseException] = None
    rollback_attempted: bool = False
    rollback_error: Optional[BaseException] = None

    def __str__(self) -> str:
        parts = [f"{self.operation} {self.code.value}: {self.message}"]
        if self.cause is not None:
            parts.append(f"error={self.cause}")
        if self.rollback_attempted:
            parts.append(f"rollback={self.rollback_error if self.rollback_error is not None else 'ok'}")
        return " ".join(parts)


@dataclass(eq=False)
class InvalidArgumentError(LedgerError):
    """Caller supplied an empty or malformed required argument."""

    code: ErrorCode = ErrorCode.INVALID_ARGUMENT


@dataclass(eq=False)
class StorageError(LedgerError):
    """Any failure reported by the underlying store."""

    code: ErrorCode = ErrorCode.STORAGE


__all__ = ["LedgerError", "InvalidArgumentError", "StorageError"]
