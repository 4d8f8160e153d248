"""Database repository for account data."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from psycopg.errors import UniqueViolation
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account, AccountSummary
from .domain.errors import DuplicateAccountError

_ACCOUNT_COLUMNS = "account_id, name, password_digest, email, created_at, updated_at"

_SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS accounts (
        account_id UUID PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        password_digest VARCHAR(255) NOT NULL,
        email VARCHAR(100),
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL,
        CONSTRAINT accounts_name_key UNIQUE (name)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_accounts_created_at ON accounts (created_at)",
)


class AccountRepository:
    """Postgres-backed account collection keyed by a generated UUID."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def ensure_schema(self) -> None:
        """Create the accounts table and its unique name constraint if they are missing."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                for statement in _SCHEMA_STATEMENTS:
                    cur.execute(statement)
            conn.commit()

    def insert_account(self, *, name: str, password_digest: str, email: str | None) -> Account:
        """Persist a new account.

        Raises ``DuplicateAccountError`` when ``name`` is already taken, including
        when a concurrent insert wins the race after the caller's existence check.
        """
        account_id = uuid.uuid4()
        now = datetime.now(timezone.utc)
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO accounts ({_ACCOUNT_COLUMNS})
                        VALUES (%s, %s, %s, %s, %s, %s)
                        RETURNING {_ACCOUNT_COLUMNS}
                        """,
                        (account_id, name, password_digest, email, now, now),
                    )
                    record = cur.fetchone()
                conn.commit()
        except UniqueViolation as exc:
            raise DuplicateAccountError(name) from exc
        return self._map_record(record)

    def find_by_name(self, name: str) -> Account | None:
        """Fetch the account registered under ``name`` or return ``None``."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE name = %s",
                    (name,),
                )
                row = cur.fetchone()
                if not row:
                    return None
        return self._map_record(row)

    def list_accounts(self) -> list[AccountSummary]:
        """Return every account projected to its public fields, oldest first."""
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=tuple_row) as cur:
                cur.execute(
                    """
                    SELECT account_id, name, email, created_at
                    FROM accounts
                    ORDER BY created_at, account_id
                    """
                )
                rows = cur.fetchall()
        return [
            AccountSummary(account_id=str(row[0]), name=row[1], email=row[2], created_at=row[3])
            for row in rows
        ]

    def update_email(self, account_id: str, email: str) -> bool:
        """Set the email of an account; return ``False`` when no account matched."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE accounts
                    SET email = %s, updated_at = %s
                    WHERE account_id = %s
                    """,
                    (email, datetime.now(timezone.utc), uuid.UUID(account_id)),
                )
                updated = cur.rowcount
            conn.commit()
        return updated > 0

    def delete_account(self, account_id: str) -> bool:
        """Remove an account; return ``False`` when no account matched."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM accounts WHERE account_id = %s",
                    (uuid.UUID(account_id),),
                )
                deleted = cur.rowcount
            conn.commit()
        return deleted > 0

    def _map_record(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            account_id=str(row[0]),
            name=row[1],
            password_digest=row[2],
            email=row[3],
            created_at=row[4],
            updated_at=row[5],
        )
