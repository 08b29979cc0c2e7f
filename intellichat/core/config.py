"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from intellichat.core.settings import (
    AppConfig,
    AuthConfig,
    ChatConfig,
    DatabaseConfig,
    LLMConfig,
    RedisConfig,
    ServerConfig,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.llm.provider).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM Provider
    llm_provider: Literal["openai", "anthropic"] = Field(
        default="openai",
        description="LLM provider to use",
    )

    # OpenAI-compatible endpoint (Kluster AI by default)
    openai_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="API key for the OpenAI-compatible endpoint",
    )
    openai_base_url: str = Field(
        default="https://api.kluster.ai/v1",
        description="Base URL of the OpenAI-compatible endpoint",
    )
    openai_model: str = Field(
        default="klusterai/Meta-Llama-3.1-8B-Instruct-Turbo",
        description="Chat completion model name",
    )

    # Anthropic
    anthropic_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Anthropic API key",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Anthropic model name",
    )

    # Completion parameters
    llm_max_tokens: int = Field(
        default=1000,
        ge=1,
        le=32000,
        description="Maximum tokens in a single completion",
    )
    llm_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    llm_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Upper bound on one completion call",
    )
    llm_system_prompt: str | None = Field(
        default=None,
        description="Optional system prompt prepended to every transcript",
    )

    # App
    app_name: str = Field(
        default="intellichat",
        description="Application name",
    )
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=True,
        description="Debug mode",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Server port",
    )

    # Identity provider
    auth_provider: Literal["firebase", "demo"] = Field(
        default="demo",
        description="Identity provider verifying request tokens",
    )
    firebase_project_id: str = Field(
        default="mariio-chatt",
        description="Firebase project id (token audience)",
    )

    # Database
    storage_backend: Literal["database", "memory"] = Field(
        default="database",
        description="Persistence backend selected at start-up",
    )
    database_url: SecretStr = Field(
        default=SecretStr("sqlite+aiosqlite:///./intellichat.db"),
        description="Database URL (postgresql://... or sqlite+aiosqlite://...)",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    redis_key_prefix: str = Field(
        default="intellichat:",
        description="Namespace for keys written to Redis",
    )

    # Chat
    title_max_length: int = Field(
        default=50,
        ge=1,
        le=255,
        description="Characters of the first message kept in a session title",
    )
    context_max_chars: int = Field(
        default=24000,
        ge=0,
        description="Character budget of prior turns sent to the model (0 = no limit)",
    )
    message_rate_limit: str = Field(
        default="20/minute",
        description="Send-message endpoint rate limit",
    )
    session_lock_backend: Literal["local", "redis"] = Field(
        default="local",
        description="Per-session append lock implementation",
    )
    session_lock_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Lock lease; must exceed the LLM timeout",
    )

    @model_validator(mode="after")
    def check_deployment_safety(self) -> Self:
        """Reject combinations that are only valid for local development."""
        if self.auth_provider == "demo" and self.app_env != "development":
            raise ValueError(
                "AUTH_PROVIDER=demo trusts any bearer token and is only allowed "
                "with APP_ENV=development"
            )
        if self.session_lock_timeout_seconds <= self.llm_timeout_seconds:
            raise ValueError(
                "SESSION_LOCK_TIMEOUT_SECONDS must exceed LLM_TIMEOUT_SECONDS"
            )
        return self

    # --- Domain properties ---

    @cached_property
    def llm(self) -> LLMConfig:
        """LLM provider configuration."""
        return LLMConfig(
            provider=self.llm_provider,
            openai_api_key=self.openai_api_key,
            openai_base_url=self.openai_base_url,
            openai_model=self.openai_model,
            anthropic_api_key=self.anthropic_api_key,
            anthropic_model=self.anthropic_model,
            max_tokens=self.llm_max_tokens,
            temperature=self.llm_temperature,
            timeout_seconds=self.llm_timeout_seconds,
            system_prompt=self.llm_system_prompt,
        )

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
            reload=self.is_development and self.debug,
        )

    @cached_property
    def auth(self) -> AuthConfig:
        """Identity provider configuration."""
        return AuthConfig(
            provider=self.auth_provider,
            firebase_project_id=self.firebase_project_id,
        )

    @cached_property
    def database(self) -> DatabaseConfig:
        """Database connection configuration."""
        return DatabaseConfig(backend=self.storage_backend, url=self.database_url)

    @cached_property
    def redis(self) -> RedisConfig:
        """Redis connection configuration."""
        return RedisConfig(url=self.redis_url, key_prefix=self.redis_key_prefix)

    @cached_property
    def chat(self) -> ChatConfig:
        """Conversation behaviour configuration."""
        return ChatConfig(
            title_max_length=self.title_max_length,
            context_max_chars=self.context_max_chars,
            message_rate_limit=self.message_rate_limit,
            lock_backend=self.session_lock_backend,
            lock_timeout_seconds=self.session_lock_timeout_seconds,
        )

    # --- Convenience properties (delegate to domain configs) ---

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development


# Global settings instance
settings = Settings()
