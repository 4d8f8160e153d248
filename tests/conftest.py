from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from account_service.config import get_settings
from account_service.domain.account import Account, AccountSummary
from account_service.domain.errors import DuplicateAccountError
from account_service.domain.service import AccountService
from account_service.main import create_app
from account_service.security.passwords import PasswordHasher


class FakeRepository:
    """In-memory repository mimicking the Postgres-backed account store."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        # Simulates a concurrent registration slipping past the existence check.
        self.hide_names_on_lookup = False

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def insert_account(self, *, name: str, password_digest: str, email: str | None) -> Account:
        if any(account.name == name for account in self._accounts.values()):
            raise DuplicateAccountError(name)
        now = self._tick()
        account = Account(
            account_id=str(uuid.uuid4()),
            name=name,
            password_digest=password_digest,
            email=email,
            created_at=now,
            updated_at=now,
        )
        self._accounts[account.account_id] = account
        return account

    def find_by_name(self, name: str) -> Account | None:
        if self.hide_names_on_lookup:
            return None
        for account in self._accounts.values():
            if account.name == name:
                return account
        return None

    def list_accounts(self) -> list[AccountSummary]:
        ordered = sorted(self._accounts.values(), key=lambda a: a.created_at)
        return [
            AccountSummary(
                account_id=account.account_id,
                name=account.name,
                email=account.email,
                created_at=account.created_at,
            )
            for account in ordered
        ]

    def update_email(self, account_id: str, email: str) -> bool:
        account = self._accounts.get(account_id)
        if account is None:
            return False
        account.email = email
        account.updated_at = self._tick()
        return True

    def delete_account(self, account_id: str) -> bool:
        return self._accounts.pop(account_id, None) is not None


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def service(repository: FakeRepository, hasher: PasswordHasher) -> AccountService:
    return AccountService(repository, hasher)


@pytest.fixture
def api_client(service: AccountService):
    """Provide a FastAPI test client with isolated state."""
    app = create_app()
    app.state.account_service = service
    with TestClient(app) as client:
        yield client
