from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
import os


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration values exposed to FastAPI components."""

    app_name: str = "account-service"
    version: str = "0.1.0"
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    http_host: str = field(default_factory=lambda: os.getenv("HTTP_HOST", "0.0.0.0"))
    http_port: int = field(default_factory=lambda: _env_int("PORT", 8000))
    database_url: str = field(
        default_factory=lambda: os.getenv(
            "DATABASE_URL",
            "postgresql://localhost:5432/gym_data",
        )
    )
    bcrypt_rounds: int = field(default_factory=lambda: _env_int("BCRYPT_ROUNDS", 12))
    db_connect_timeout: int = field(default_factory=lambda: _env_int("DB_CONNECT_TIMEOUT", 10))

    @property
    def database_is_local(self) -> bool:
        """Whether the configured store lives on this host (used for the startup banner)."""
        return "localhost" in self.database_url or "127.0.0.1" in self.database_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance for the running process."""
    return Settings()
