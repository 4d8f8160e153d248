"""Pydantic response bodies returned by the account API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .domain.account import AccountSummary


class _ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True


class UserSummary(BaseModel):
    """Public view of an account; the password digest has no field here."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str | None = None
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_domain(cls, summary: AccountSummary) -> "UserSummary":
        return cls(
            id=summary.account_id,
            name=summary.name,
            email=summary.email,
            created_at=summary.created_at,
        )


class AccountIdResponse(_ResponseModel):
    """Returned by register and login."""

    message: str
    user_id: str = Field(..., alias="userId")


class MessageResponse(_ResponseModel):
    message: str


class UserListResponse(_ResponseModel):
    users: list[UserSummary]


class HealthResponse(_ResponseModel):
    status: str = "healthy"
    timestamp: datetime
    environment: str
    port: int
