"""bcrypt-backed password hashing."""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 12


class PasswordHasher:
    """One-way password hashing with a fixed bcrypt cost factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        """Return a salted bcrypt digest for ``password``."""
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")

    def verify(self, password: str, digest: str) -> bool:
        """Check ``password`` against a stored digest; malformed digests never match."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), digest.encode("ascii"))
        except (ValueError, UnicodeEncodeError):
            return False
