from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Account:
    """Stored user account, including the password digest."""

    account_id: str
    name: str
    password_digest: str
    email: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class AccountSummary:
    """Projection of an account that is safe to return to clients.

    Built directly from the store's projected read; it has no digest field to leak.
    """

    account_id: str
    name: str
    email: str | None
    created_at: datetime
