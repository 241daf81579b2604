"""Configuration merge order and validation."""
from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from status_ledger.config import CONFIG_FILE_ENV, LedgerConfig, get_ledger_config
from status_ledger.config.defaults import UPSERT_MAX_ATTEMPTS


def test_defaults_when_nothing_configured():
    cfg = get_ledger_config()
    assert cfg == LedgerConfig()  # nosec B101
    assert cfg.database_kind == "sqlite"  # nosec B101
    assert cfg.upsert_max_attempts == UPSERT_MAX_ATTEMPTS  # nosec B101
    assert cfg.log_json is True  # nosec B101


def test_json_file_then_env_then_overrides(monkeypatch, tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text(
        json.dumps({"database_kind": "postgres", "postgres_dsn": "postgresql://file/ledger", "log_level": "debug"}),
        encoding="utf-8",
    )
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    monkeypatch.setenv("LEDGER_POSTGRES_DSN", "postgresql://env/ledger")
    monkeypatch.setenv("LEDGER_UPSERT_MAX_ATTEMPTS", "5")

    cfg = get_ledger_config({"upsert_max_attempts": 2, "sqlite_path": None})

    assert cfg.database_kind == "postgres"  # nosec B101
    assert cfg.log_level == "DEBUG"  # nosec B101
    assert cfg.postgres_dsn == "postgresql://env/ledger"  # nosec B101
    assert cfg.upsert_max_attempts == 2  # nosec B101


def test_yaml_file_is_accepted(monkeypatch, tmp_path):
    path = tmp_path / "ledger.yaml"
    path.write_text("database_kind: MySQL\nlog_json: false\nupsert_max_attempts: 4\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))

    cfg = get_ledger_config()
    assert cfg.database_kind == "mysql"  # nosec B101
    assert cfg.log_json is False  # nosec B101
    assert cfg.upsert_max_attempts == 4  # nosec B101


def test_missing_config_file_falls_back_to_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "absent.yaml"))
    assert get_ledger_config() == LedgerConfig()  # nosec B101


def test_non_mapping_config_file_rejected(monkeypatch, tmp_path):
    path = tmp_path / "ledger.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    with pytest.raises(ValueError, match="mapping"):
        get_ledger_config()


def test_env_booleans_are_parsed(monkeypatch):
    monkeypatch.setenv("LEDGER_LOG_JSON", "false")
    assert get_ledger_config().log_json is False  # nosec B101


@pytest.mark.parametrize(
    "overrides",
    [
        {"upsert_max_attempts": 0},
        {"log_level": "LOUD"},
        {"unexpected": True},
    ],
)
def test_invalid_values_raise_validation_error(overrides):
    with pytest.raises(ValidationError):
        get_ledger_config(overrides)


def test_config_is_frozen():
    cfg = LedgerConfig()
    with pytest.raises(ValidationError):
        cfg.database_kind = "postgres"
