"""Chat message database model."""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from intellichat.core.database import Base
from intellichat.models.chat_session import UTCDateTime, utcnow


class MessageRole(StrEnum):
    """Author of a turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(Base):
    """Individual turn within a chat session."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_session_id_timestamp", "session_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[MessageRole] = mapped_column(
        Enum(
            MessageRole,
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
            validate_strings=True,
        ),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    session_id: Mapped[str] = mapped_column(String(128), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )
