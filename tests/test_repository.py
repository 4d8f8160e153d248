"""Repository behaviour checked against a stub connection pool."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone

import pytest
from psycopg.errors import UniqueViolation

from account_service.domain.errors import DuplicateAccountError
from account_service.repository import AccountRepository


class StubCursor:
    def __init__(self, conn: "StubConnection") -> None:
        self._conn = conn
        self.rowcount = conn.rowcount

    def __enter__(self) -> "StubCursor":
        return self

    def __exit__(self, *exc_info) -> None:
        return None

    def execute(self, query, params=None) -> None:
        self._conn.executed.append((" ".join(query.split()), params))
        if self._conn.error is not None:
            raise self._conn.error

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)


class StubConnection:
    def __init__(self, rows=None, rowcount: int = 0, error: Exception | None = None) -> None:
        self.rows = rows or []
        self.rowcount = rowcount
        self.error = error
        self.executed: list[tuple[str, tuple | None]] = []
        self.commits = 0

    def cursor(self, row_factory=None) -> StubCursor:
        return StubCursor(self)

    def commit(self) -> None:
        self.commits += 1


class StubPool:
    def __init__(self, conn: StubConnection) -> None:
        self.conn = conn

    @contextmanager
    def connection(self):
        yield self.conn


def _row(name: str = "alice"):
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return (uuid.uuid4(), name, "$2b$04$digest", None, now, now)


def test_unique_violation_becomes_duplicate_account_error():
    repository = AccountRepository(StubPool(StubConnection(error=UniqueViolation("duplicate key"))))

    with pytest.raises(DuplicateAccountError) as excinfo:
        repository.insert_account(name="alice", password_digest="x", email=None)

    assert excinfo.value.name == "alice"


def test_insert_returns_mapped_account():
    conn = StubConnection(rows=[_row()])
    repository = AccountRepository(StubPool(conn))

    account = repository.insert_account(name="alice", password_digest="x", email=None)

    assert account.name == "alice"
    assert isinstance(account.account_id, str)
    assert conn.commits == 1


def test_list_projection_never_selects_digest():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    conn = StubConnection(rows=[(uuid.uuid4(), "alice", None, now)])
    repository = AccountRepository(StubPool(conn))

    summaries = repository.list_accounts()

    assert [summary.name for summary in summaries] == ["alice"]
    query, _ = conn.executed[0]
    assert "password_digest" not in query


def test_update_and_delete_report_missing_rows():
    repository = AccountRepository(StubPool(StubConnection(rowcount=0)))
    account_id = str(uuid.uuid4())

    assert repository.update_email(account_id, "a@x.com") is False
    assert repository.delete_account(account_id) is False


def test_delete_reports_removed_row():
    repository = AccountRepository(StubPool(StubConnection(rowcount=1)))

    assert repository.delete_account(str(uuid.uuid4())) is True


def test_find_by_name_returns_none_when_absent():
    repository = AccountRepository(StubPool(StubConnection()))

    assert repository.find_by_name("ghost") is None
