"""Validated ledger configuration model.

``LedgerConfig`` is the typed result of merging defaults, the optional config
file, environment variables, and in-code overrides. Validation happens once,
at construction, so callers never see half-parsed values.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .defaults import (
    DEFAULT_DATABASE_KIND,
    DEFAULT_LOG_JSON,
    DEFAULT_LOG_LEVEL,
    UPSERT_MAX_ATTEMPTS,
)

_LOG_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR", "CRITICAL"}


class LedgerConfig(BaseModel):
    """Runtime configuration for the status ledger.

    Attributes
    ----------
    database_kind:
        Declared store kind (``"sqlite"``, ``"postgres"``, ``"mysql"``...),
        normalized to lowercase.
    sqlite_path:
        Path of the SQLite database file; ``None`` selects the default path.
    postgres_dsn:
        libpq connection string used when ``database_kind`` is postgres.
    upsert_max_attempts:
        Bound on insert/update steering rounds within one upsert call.
    log_level / log_json:
        Level and output format of the shared ``ledger`` logger.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    database_kind: str = DEFAULT_DATABASE_KIND
    sqlite_path: Optional[str] = None
    postgres_dsn: Optional[str] = None
    upsert_max_attempts: int = Field(default=UPSERT_MAX_ATTEMPTS, ge=1, le=10)
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = DEFAULT_LOG_JSON

    @field_validator("database_kind")
    @classmethod
    def _normalize_kind(cls, value: str) -> str:
        return (value or DEFAULT_DATABASE_KIND).strip().lower() or DEFAULT_DATABASE_KIND

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level '{value}'")
        return level


__all__ = ["LedgerConfig"]
