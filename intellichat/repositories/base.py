"""Persistence contract shared by the database and in-memory stores."""

from abc import ABC, abstractmethod

from intellichat.models.chat_session import ChatSession
from intellichat.models.message import Message, MessageRole
from intellichat.models.user import User


class ChatStore(ABC):
    """Durable mapping of users to chat sessions to ordered messages.

    Implementations own every row; callers never keep an authoritative copy
    across requests. Role invariants are the caller's responsibility.
    """

    # --- Users ---

    @abstractmethod
    async def get_user(self, user_id: int) -> User | None:
        """Find a user by primary key."""

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None:
        """Find a user by username (the identity provider uid)."""

    @abstractmethod
    async def create_user(self, username: str, password: str = "") -> User:
        """Create a local user record."""

    # --- Messages ---

    @abstractmethod
    async def create_message(
        self,
        content: str,
        role: MessageRole,
        user_id: str,
        session_id: str,
    ) -> Message:
        """Append a message with a server-side timestamp.

        Also refreshes ``updated_at`` of the owning session, if it exists.
        """

    @abstractmethod
    async def get_messages(self, session_id: str | None = None) -> list[Message]:
        """Messages of one session, or of the whole store, oldest first."""

    @abstractmethod
    async def clear_messages(self, session_id: str | None = None) -> None:
        """Delete messages of one session, or all of them. Idempotent."""

    # --- Sessions ---

    @abstractmethod
    async def create_chat_session(
        self, session_id: str, user_id: str, title: str
    ) -> ChatSession:
        """Create a session.

        Raises:
            SessionAlreadyExistsError: ``session_id`` is already taken.
        """

    @abstractmethod
    async def get_chat_session(self, session_id: str) -> ChatSession | None:
        """Find a session by its client-generated id."""

    @abstractmethod
    async def get_chat_sessions(self, user_id: str | None = None) -> list[ChatSession]:
        """Sessions (optionally of one owner), most recently active first."""

    @abstractmethod
    async def update_chat_session(self, session_id: str, title: str) -> None:
        """Set the title and refresh ``updated_at``. No-op if absent."""
