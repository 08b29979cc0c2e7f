"""Domain-specific configuration models."""

from intellichat.core.settings.app_config import AppConfig
from intellichat.core.settings.auth_config import AuthConfig
from intellichat.core.settings.chat_config import ChatConfig
from intellichat.core.settings.database_config import DatabaseConfig
from intellichat.core.settings.llm_config import LLMConfig
from intellichat.core.settings.redis_config import RedisConfig
from intellichat.core.settings.server_config import ServerConfig

__all__ = [
    "AppConfig",
    "AuthConfig",
    "ChatConfig",
    "DatabaseConfig",
    "LLMConfig",
    "RedisConfig",
    "ServerConfig",
]
