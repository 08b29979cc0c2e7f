"""Chat session API schemas."""

from datetime import datetime

from pydantic import Field

from intellichat.schemas.response_schema import CamelModel, Identifier


class CreateSessionRequest(CamelModel):
    """Pre-create a session before its first message."""

    session_id: Identifier
    user_id: Identifier
    title: str = Field(..., min_length=1, max_length=255)


class UpdateSessionRequest(CamelModel):
    """Rename a session."""

    title: str = Field(..., min_length=1, max_length=255)


class ChatSessionResponse(CamelModel):
    """Single chat session."""

    id: int
    session_id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime
