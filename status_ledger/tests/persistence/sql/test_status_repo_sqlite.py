"""Company status repository behavior against a real SQLite database."""
from __future__ import annotations

import json

import pytest

from status_ledger.base.errors import ErrorCode, InvalidArgumentError, StorageError
from status_ledger.base.logging import configure_logger
from status_ledger.persistence.dialects import GENERIC
from status_ledger.persistence.interfaces.repos import CompanyStatus, StatusRecord


def _count(conn, company_id: str, *, live_only: bool = False) -> int:
    sql = "select count(*) from company_status where company_id = ?"
    if live_only:
        sql += " and deleted_at is null"
    return conn.execute(sql, (company_id,)).fetchone()[0]


def test_latest_status_absent_is_none(status_repo):
    assert status_repo.get_latest_status("nobody") is None  # nosec B101


def test_insert_creates_one_visible_row(conn, status_repo, ts):
    record = StatusRecord(user_id="U1", note="flag", status=CompanyStatus.UNSAFE, created_at=ts(0))
    status_repo.upsert_status("E1", record)

    assert _count(conn, "E1") == 1  # nosec B101
    assert status_repo.get_latest_status("E1") == record  # nosec B101
    assert not conn.in_transaction  # nosec B101


def test_latest_read_is_idempotent(status_repo, ts):
    status_repo.upsert_status("E1", StatusRecord("U1", "flag", CompanyStatus.UNSAFE, ts(0)))
    first = status_repo.get_latest_status("E1")
    second = status_repo.get_latest_status("E1")
    assert first == second  # nosec B101


def test_conflict_updates_note_and_status_but_keeps_created_at(conn, status_repo, ts):
    """Flag then clear the same company by the same user (E1/U1 scenario)."""
    status_repo.upsert_status("E1", StatusRecord("U1", "flag", "unsafe", ts(0)))
    status_repo.upsert_status("E1", StatusRecord("U1", "cleared", "ok", ts(30)))

    assert _count(conn, "E1") == 1  # nosec B101
    latest = status_repo.get_latest_status("E1")
    assert latest is not None  # nosec B101
    assert latest.note == "cleared"  # nosec B101
    assert latest.status == "ok"  # nosec B101
    assert latest.created_at == ts(0)  # nosec B101
    assert not conn.in_transaction  # nosec B101


def test_latest_returns_greatest_created_at_regardless_of_insert_order(status_repo, ts):
    status_repo.upsert_status("E1", StatusRecord("U2", "middle", CompanyStatus.EXCEPTION, ts(10)))
    status_repo.upsert_status("E1", StatusRecord("U3", "newest", CompanyStatus.CLEARED, ts(20)))
    status_repo.upsert_status("E1", StatusRecord("U1", "oldest", CompanyStatus.UNSAFE, ts(0)))

    latest = status_repo.get_latest_status("E1")
    assert latest is not None  # nosec B101
    assert latest.user_id == "U3"  # nosec B101
    assert latest.status is CompanyStatus.CLEARED  # nosec B101


def test_companies_are_independent(status_repo, ts):
    status_repo.upsert_status("E1", StatusRecord("U1", "a", CompanyStatus.UNSAFE, ts(0)))
    status_repo.upsert_status("E2", StatusRecord("U1", "b", CompanyStatus.CLEARED, ts(0)))

    assert status_repo.get_latest_status("E1").note == "a"  # nosec B101
    assert status_repo.get_latest_status("E2").note == "b"  # nosec B101


def test_unknown_status_strings_roundtrip_verbatim(status_repo, ts):
    status_repo.upsert_status("E1", StatusRecord("U1", "", "under-review", ts(0)))
    latest = status_repo.get_latest_status("E1")
    assert latest.status == "under-review"  # nosec B101
    assert latest.note == ""  # nosec B101


def test_naive_created_at_is_stored_as_utc(status_repo, ts):
    naive = ts(0).replace(tzinfo=None)
    status_repo.upsert_status("E1", StatusRecord("U1", "flag", CompanyStatus.UNSAFE, naive))
    assert status_repo.get_latest_status("E1").created_at == ts(0)  # nosec B101


@pytest.mark.parametrize("company_id", ["", "   "])
def test_blank_company_id_rejected_without_mutation(conn, status_repo, ts, company_id):
    with pytest.raises(InvalidArgumentError) as info:
        status_repo.upsert_status(company_id, StatusRecord("U1", "flag", "unsafe", ts(0)))
    assert info.value.code is ErrorCode.INVALID_ARGUMENT  # nosec B101
    assert conn.execute("select count(*) from company_status").fetchone()[0] == 0  # nosec B101

    with pytest.raises(InvalidArgumentError):
        status_repo.get_latest_status(company_id)


def test_blank_user_id_and_bad_created_at_rejected(conn, status_repo, ts):
    with pytest.raises(InvalidArgumentError, match="user_id"):
        status_repo.upsert_status("E1", StatusRecord("", "flag", "unsafe", ts(0)))
    with pytest.raises(InvalidArgumentError, match="created_at"):
        status_repo.upsert_status("E1", StatusRecord("U1", "flag", "unsafe", "2024-03-01"))
    assert _count(conn, "E1") == 0  # nosec B101


def test_soft_deleted_rows_are_invisible_and_do_not_block_new_rows(conn, status_repo, ts):
    status_repo.upsert_status("E1", StatusRecord("U1", "old", CompanyStatus.UNSAFE, ts(0)))
    conn.execute(
        "update company_status set deleted_at = ? where company_id = ?",
        (GENERIC.encode_timestamp(ts(1)), "E1"),
    )
    assert status_repo.get_latest_status("E1") is None  # nosec B101

    status_repo.upsert_status("E1", StatusRecord("U1", "new", CompanyStatus.CLEARED, ts(2)))
    status_repo.upsert_status("E1", StatusRecord("U1", "newer", CompanyStatus.CLEARED, ts(3)))

    assert _count(conn, "E1") == 2  # nosec B101
    assert _count(conn, "E1", live_only=True) == 1  # nosec B101
    latest = status_repo.get_latest_status("E1")
    assert latest.note == "newer"  # nosec B101
    assert latest.created_at == ts(2)  # nosec B101
    deleted_note = conn.execute(
        "select note from company_status where company_id = ? and deleted_at is not null", ("E1",)
    ).fetchone()[0]
    assert deleted_note == "old"  # nosec B101


def test_forced_update_failure_leaves_original_row(conn, status_repo, ts):
    original = StatusRecord("U1", "flag", CompanyStatus.UNSAFE, ts(0))
    status_repo.upsert_status("E1", original)
    conn.execute(
        "CREATE TRIGGER company_status_frozen BEFORE UPDATE ON company_status "
        "BEGIN SELECT RAISE(ABORT, 'forced update failure'); END;"
    )

    with pytest.raises(StorageError) as info:
        status_repo.upsert_status("E1", StatusRecord("U1", "cleared", "ok", ts(5)))

    err = info.value
    assert err.rollback_attempted  # nosec B101
    assert err.rollback_error is None  # nosec B101
    assert "update failed" in str(err)  # nosec B101
    assert "rollback=ok" in str(err)  # nosec B101
    assert "forced update failure" in str(err)  # nosec B101
    assert status_repo.get_latest_status("E1") == original  # nosec B101
    assert not conn.in_transaction  # nosec B101


def test_non_unique_insert_failure_is_storage_error(conn, status_repo, ts):
    with pytest.raises(StorageError) as info:
        status_repo.upsert_status("E1", StatusRecord("U1", None, "unsafe", ts(0)))
    err = info.value
    assert err.message == "insert failed"  # nosec B101
    assert err.rollback_attempted  # nosec B101
    assert err.cause is not None  # nosec B101
    assert _count(conn, "E1") == 0  # nosec B101
    assert not conn.in_transaction  # nosec B101


def test_insert_failure_is_logged_without_note(capsys, status_repo, ts):
    configure_logger(level="INFO", json_mode=True)
    with pytest.raises(StorageError):
        status_repo.upsert_status("E1", StatusRecord("U1", None, "unsafe", ts(0)))

    lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
    failed = [line for line in lines if line.get("event") == "status.upsert.failed"]
    assert failed  # nosec B101
    assert failed[-1]["company_id"] == "E1"  # nosec B101
    assert failed[-1]["user_id"] == "U1"  # nosec B101
    assert failed[-1]["level"] == "WARNING"  # nosec B101
    assert "note" not in failed[-1]  # nosec B101


def test_malformed_row_surfaces_as_storage_error(conn, status_repo):
    conn.execute(
        "insert into company_status (company_id, user_id, note, status, created_at) values (?, ?, ?, ?, ?)",
        ("E1", "U1", "x", "unsafe", "not-a-timestamp"),
    )
    with pytest.raises(StorageError, match="malformed status row"):
        status_repo.get_latest_status("E1")


def test_missing_table_surfaces_as_storage_error(conn, status_repo, ts):
    conn.execute("drop table company_status")
    with pytest.raises(StorageError, match="query failed"):
        status_repo.get_latest_status("E1")
    with pytest.raises(StorageError, match="insert failed"):
        status_repo.upsert_status("E1", StatusRecord("U1", "flag", "unsafe", ts(0)))


def test_closed_repository_raises_unavailable(status_repo, ts):
    status_repo.close()
    status_repo.close()

    with pytest.raises(StorageError) as info:
        status_repo.get_latest_status("E1")
    assert info.value.code is ErrorCode.UNAVAILABLE  # nosec B101
    assert "repository is closed" in str(info.value)  # nosec B101

    with pytest.raises(StorageError):
        status_repo.upsert_status("E1", StatusRecord("U1", "flag", "unsafe", ts(0)))


@pytest.mark.parametrize("status", [None, "", "  "])
def test_missing_status_rejected_without_mutation(conn, status_repo, ts, status):
    with pytest.raises(InvalidArgumentError, match="status"):
        status_repo.upsert_status("E1", StatusRecord("U1", "flag", status, ts(0)))
    assert _count(conn, "E1") == 0  # nosec B101
