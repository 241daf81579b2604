"""Unified configuration layer for the status ledger.

Merge order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external config file (JSON or YAML) pointed to by
       ``LEDGER_CONFIG_FILE``
    3. Environment variables (``LEDGER_DATABASE_KIND``, ``LEDGER_SQLITE_PATH``,
       ``LEDGER_POSTGRES_DSN``, ``LEDGER_UPSERT_MAX_ATTEMPTS``,
       ``LEDGER_LOG_LEVEL``, ``LEDGER_LOG_JSON``)
    4. In-code overrides passed to ``get_ledger_config``

External config file example (YAML)::

    database_kind: postgres
    postgres_dsn: postgresql://ledger@localhost/ledger
    upsert_max_attempts: 3

The merged mapping is validated by :class:`LedgerConfig`; invalid values
raise ``pydantic.ValidationError``.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .settings import LedgerConfig

CONFIG_FILE_ENV = "LEDGER_CONFIG_FILE"

ENV_FIELD_MAP = {
    "database_kind": "LEDGER_DATABASE_KIND",
    "sqlite_path": "LEDGER_SQLITE_PATH",
    "postgres_dsn": "LEDGER_POSTGRES_DSN",
    "upsert_max_attempts": "LEDGER_UPSERT_MAX_ATTEMPTS",
    "log_level": "LEDGER_LOG_LEVEL",
    "log_json": "LEDGER_LOG_JSON",
}


def _load_external_config() -> Dict[str, Any]:
    """Read the mapping stored in ``LEDGER_CONFIG_FILE`` (JSON, then YAML).

    A missing variable or missing file yields an empty mapping; a file that
    is neither valid JSON nor valid YAML raises ``ValueError``.
    """
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    p = Path(path).expanduser()
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"config file {p} is neither JSON nor YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {p} must contain a mapping")
    return data


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, env_name in ENV_FIELD_MAP.items():
        val = os.getenv(env_name)
        if val is not None and val.strip():
            out[field] = val.strip()
    return out


def get_ledger_config(overrides: Optional[Dict[str, Any]] = None) -> LedgerConfig:
    """Return the merged, validated ledger configuration."""
    cfg: Dict[str, Any] = {}
    cfg |= _load_external_config()
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return LedgerConfig(**cfg)


__all__ = [
    "CONFIG_FILE_ENV",
    "ENV_FIELD_MAP",
    "LedgerConfig",
    "get_ledger_config",
]
