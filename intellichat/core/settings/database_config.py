"""Database connection configuration."""

from typing import Literal

from pydantic import BaseModel, SecretStr


class DatabaseConfig(BaseModel, frozen=True):
    """Database connection settings."""

    backend: Literal["database", "memory"]
    url: SecretStr

    @property
    def async_url(self) -> str:
        """DB URL with the async driver for PostgreSQL."""
        base = self.url.get_secret_value()
        for prefix in ("postgres://", "postgresql://"):
            if base.startswith(prefix):
                return "postgresql+asyncpg://" + base[len(prefix) :]
        return base

    @property
    def is_sqlite(self) -> bool:
        """Check if the URL points at SQLite."""
        return self.async_url.startswith("sqlite")
