"""Chat behaviour configuration."""

from typing import Literal

from pydantic import BaseModel


class ChatConfig(BaseModel, frozen=True):
    """Conversation, context window and send-path settings."""

    title_max_length: int
    context_max_chars: int
    message_rate_limit: str
    lock_backend: Literal["local", "redis"]
    lock_timeout_seconds: float
