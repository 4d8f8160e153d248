"""Error taxonomy shared by the account service layers."""

from __future__ import annotations


class AccountError(Exception):
    """Base class for failures that map onto a single HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AccountError):
    status_code = 400
    default_message = "Invalid request"


class MalformedBody(ValidationError):
    """Raised when the request body cannot be read or decoded as a JSON object."""

    default_message = "Invalid JSON body"


class AuthError(AccountError):
    status_code = 401
    default_message = "Invalid credentials"


class NotFoundError(AccountError):
    status_code = 404
    default_message = "User not found"


class ConflictError(AccountError):
    status_code = 409
    default_message = "Username already exists"


class InternalError(AccountError):
    status_code = 500
    default_message = "Internal server error"


class DuplicateAccountError(Exception):
    """Raised by the store when an insert violates the unique account name constraint."""

    def __init__(self, name: str) -> None:
        super().__init__(f"account name already taken: {name}")
        self.name = name
