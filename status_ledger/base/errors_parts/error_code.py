"""
Normalized ledger error codes (taxonomy).

Defines the `ErrorCode` enumeration attached to every ledger exception. Values
are lowercase snake_case and are considered a stable public contract for
logging and operator dashboards.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    INVALID_ARGUMENT = "invalid_argument"
    CONFLICT = "conflict"
    TRANSIENT = "transient"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    STORAGE = "storage"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
