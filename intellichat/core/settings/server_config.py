"""HTTP server configuration."""

from pydantic import BaseModel


class ServerConfig(BaseModel, frozen=True):
    """Bind address and reload mode for uvicorn."""

    host: str
    port: int
    reload: bool = False
