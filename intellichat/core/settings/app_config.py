"""Application environment configuration."""

from typing import Literal

from pydantic import BaseModel


class AppConfig(BaseModel, frozen=True):
    """Name, environment and debug flag of the running service."""

    name: str
    env: Literal["development", "staging", "production"]
    debug: bool

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def cors_origins(self) -> list[str]:
        """Browser origins allowed to call the API; open only in development."""
        return ["*"] if self.is_development else []
