"""Chat completion provider configuration."""

from typing import Literal

from pydantic import BaseModel, SecretStr


class LLMConfig(BaseModel, frozen=True):
    """Provider credentials and per-call completion parameters."""

    provider: Literal["openai", "anthropic"]
    openai_api_key: SecretStr
    openai_base_url: str
    openai_model: str
    anthropic_api_key: SecretStr
    anthropic_model: str
    max_tokens: int
    temperature: float
    timeout_seconds: float
    system_prompt: str | None = None

    @property
    def model(self) -> str:
        """Model name of the selected provider."""
        if self.provider == "anthropic":
            return self.anthropic_model
        return self.openai_model
