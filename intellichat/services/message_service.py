"""Service layer for reading and clearing stored messages."""

import structlog

from intellichat.models.message import Message
from intellichat.repositories.base import ChatStore
from intellichat.schemas.auth_schema import IdentityUser
from intellichat.services.session_lock import SessionLock
from intellichat.services.session_service import ensure_owner

logger = structlog.get_logger()


class MessageService:
    """Message history access scoped to the authenticated user."""

    def __init__(
        self,
        store: ChatStore,
        session_lock: SessionLock,
        user: IdentityUser,
    ) -> None:
        self._store = store
        self._session_lock = session_lock
        self._user = user

    async def list_messages(self, session_id: str | None = None) -> list[Message]:
        """Messages of one session, or every message the caller wrote."""
        if session_id is not None:
            ensure_owner(await self._store.get_chat_session(session_id), self._user)
            return await self._store.get_messages(session_id)
        messages = await self._store.get_messages()
        return [m for m in messages if m.user_id == self._user.uid]

    async def clear_messages(self, session_id: str | None = None) -> None:
        """Clear one session, or every session the caller owns."""
        if session_id is not None:
            ensure_owner(await self._store.get_chat_session(session_id), self._user)
            await self._clear(session_id)
            return
        for chat_session in await self._store.get_chat_sessions(self._user.uid):
            await self._clear(chat_session.session_id)

    async def _clear(self, session_id: str) -> None:
        """Clear between exchanges, never in the middle of one."""
        async with self._session_lock.hold(session_id):
            await self._store.clear_messages(session_id)
        logger.info("Messages cleared", session_id=session_id)
