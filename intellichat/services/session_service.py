"""Service layer for chat session listing and maintenance."""

import structlog

from intellichat.core.exceptions import AuthorizationError
from intellichat.models.chat_session import ChatSession
from intellichat.repositories.base import ChatStore
from intellichat.schemas.auth_schema import IdentityUser
from intellichat.schemas.session_schema import CreateSessionRequest

logger = structlog.get_logger()


def ensure_caller(user_id: str, user: IdentityUser) -> None:
    """Reject payloads written on behalf of another user."""
    if user_id != user.uid:
        raise AuthorizationError(message="Cannot act on behalf of another user")


def ensure_owner(chat_session: ChatSession | None, user: IdentityUser) -> None:
    """Reject access to an existing session owned by someone else."""
    if chat_session is not None and chat_session.user_id != user.uid:
        raise AuthorizationError(message="Not authorized to access this session")


class SessionService:
    """Lists, creates and renames the caller's chat sessions."""

    def __init__(self, store: ChatStore, user: IdentityUser) -> None:
        self._store = store
        self._user = user

    async def list_sessions(self, user_id: str | None = None) -> list[ChatSession]:
        """The caller's sessions, most recently active first."""
        if user_id is not None:
            ensure_caller(user_id, self._user)
        return await self._store.get_chat_sessions(self._user.uid)

    async def create_session(self, request: CreateSessionRequest) -> ChatSession:
        """Create a session ahead of its first message.

        Raises:
            SessionAlreadyExistsError: The session id is taken.
        """
        ensure_caller(request.user_id, self._user)
        chat_session = await self._store.create_chat_session(
            session_id=request.session_id,
            user_id=request.user_id,
            title=request.title,
        )
        logger.info("Chat session created", session_id=request.session_id)
        return chat_session

    async def update_session(self, session_id: str, title: str) -> None:
        """Rename a session; unknown sessions are ignored."""
        ensure_owner(await self._store.get_chat_session(session_id), self._user)
        await self._store.update_chat_session(session_id, title)
