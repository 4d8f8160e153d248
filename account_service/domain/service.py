"""Account service orchestrating persistence and credential checks."""

from __future__ import annotations

import logging

from .account import Account, AccountSummary
from .contracts import DeleteAccountInput, LoginInput, RegisterInput, UpdateEmailInput
from .errors import AuthError, ConflictError, DuplicateAccountError, NotFoundError
from ..repository import AccountRepository
from ..security.passwords import PasswordHasher

logger = logging.getLogger(__name__)


class AccountService:
    """Account workflows backed by the account store and the password hasher."""

    def __init__(self, repository: AccountRepository, hasher: PasswordHasher) -> None:
        """Store dependencies used to orchestrate persistence and hashing."""
        self._repository = repository
        self._hasher = hasher

    def register(self, payload: RegisterInput) -> Account:
        """Create an account, rejecting names that are already taken."""
        if self._repository.find_by_name(payload.name) is not None:
            raise ConflictError("Username already exists")

        digest = self._hasher.hash(payload.password)
        try:
            account = self._repository.insert_account(
                name=payload.name,
                password_digest=digest,
                email=payload.email,
            )
        except DuplicateAccountError as exc:
            logger.info("concurrent registration lost the race for name %r", payload.name)
            raise ConflictError("Username already exists") from exc
        logger.info("account %s created", account.account_id)
        return account

    def login(self, payload: LoginInput) -> Account:
        """Verify credentials and return the matching account.

        Unknown names and wrong passwords raise the same ``AuthError`` so callers
        cannot tell which accounts exist.
        """
        account = self._repository.find_by_name(payload.name)
        if account is None:
            raise AuthError("Invalid credentials")
        if not self._hasher.verify(payload.password, account.password_digest):
            raise AuthError("Invalid credentials")
        return account

    def list_accounts(self) -> list[AccountSummary]:
        return self._repository.list_accounts()

    def update_email(self, payload: UpdateEmailInput) -> None:
        if not self._repository.update_email(payload.account_id, payload.email):
            raise NotFoundError("User not found")

    def delete_account(self, payload: DeleteAccountInput) -> None:
        if not self._repository.delete_account(payload.account_id):
            raise NotFoundError("User not found")
        logger.info("account %s deleted", payload.account_id)
