"""Redis configuration for cross-process coordination."""

from pydantic import BaseModel


class RedisConfig(BaseModel, frozen=True):
    """Redis connection used by the distributed session lock."""

    url: str
    key_prefix: str = "intellichat:"

    def key(self, *parts: str) -> str:
        """Namespaced key, e.g. ``intellichat:session-lock:<id>``."""
        return self.key_prefix + ":".join(parts)
