"""Message API schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from intellichat.models.message import MessageRole
from intellichat.schemas.response_schema import CamelModel, Identifier


class CreateMessageRequest(CamelModel):
    """A user turn submitted by the client."""

    content: str = Field(..., min_length=1, max_length=4000)
    role: MessageRole = MessageRole.USER
    user_id: Identifier
    session_id: Identifier

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be blank")
        return value


class MessageResponse(CamelModel):
    """Single stored turn."""

    id: int
    content: str
    role: MessageRole
    user_id: str
    session_id: str
    timestamp: datetime


class SendMessageResponse(CamelModel):
    """Both turns of one completed exchange."""

    user_message: MessageResponse
    ai_message: MessageResponse
