"""Validated request contracts for the account operations.

Each ``from_payload`` constructor runs its guard checks in order and raises
``ValidationError`` on the first one that fails.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import ValidationError

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6
# bcrypt only consumes the first 72 bytes of its input.
PASSWORD_MAX_BYTES = 72


def _text(payload: Mapping[str, Any], key: str) -> str | None:
    """Return a non-empty string field, treating anything else as absent.

    Postgres text columns cannot hold NUL characters, so such values are rejected.
    """
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        return None
    if "\x00" in value:
        raise ValidationError("Fields must not contain NUL characters")
    return value


def parse_account_id(value: str) -> str | None:
    """Return the canonical form of an account identifier, or ``None`` if it is malformed."""
    try:
        return str(uuid.UUID(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _check_email_length(email: str | None) -> None:
    if email is not None and len(email) > EMAIL_MAX_LENGTH:
        raise ValidationError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")


@dataclass(slots=True)
class RegisterInput:
    """Inputs required to create an account."""

    name: str
    password: str
    email: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RegisterInput":
        name = _text(payload, "name")
        password = _text(payload, "password")
        if name is None or password is None:
            raise ValidationError("Name and password required")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(f"Name must be at most {NAME_MAX_LENGTH} characters")
        if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValidationError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        email = _text(payload, "email")
        _check_email_length(email)
        return cls(name=name, password=password, email=email)


@dataclass(slots=True)
class LoginInput:
    """Credentials presented for verification."""

    name: str
    password: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "LoginInput":
        name = _text(payload, "name")
        password = _text(payload, "password")
        if name is None or password is None:
            raise ValidationError("Name and password required")
        return cls(name=name, password=password)


@dataclass(slots=True)
class UpdateEmailInput:
    """Target account and the replacement email address."""

    account_id: str
    email: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UpdateEmailInput":
        raw_id = _text(payload, "id")
        email = _text(payload, "email")
        if raw_id is None or email is None:
            raise ValidationError("ID and new email required")
        account_id = parse_account_id(raw_id)
        if account_id is None:
            raise ValidationError("Invalid user ID format")
        _check_email_length(email)
        return cls(account_id=account_id, email=email)


@dataclass(slots=True)
class DeleteAccountInput:
    account_id: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DeleteAccountInput":
        raw_id = _text(payload, "id")
        if raw_id is None:
            raise ValidationError("User ID required")
        account_id = parse_account_id(raw_id)
        if account_id is None:
            raise ValidationError("Invalid user ID format")
        return cls(account_id=account_id)
