"""Chat repository backed by the relational database."""

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intellichat.core.exceptions import SessionAlreadyExistsError
from intellichat.models.chat_session import ChatSession, utcnow
from intellichat.models.message import Message, MessageRole
from intellichat.models.user import User
from intellichat.repositories.base import ChatStore


class ChatRepository(ChatStore):
    """Encapsulates user, session and message database queries.

    Every write commits on its own so a later failure in the same request
    (e.g. the model call) does not roll back what was already stored.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- Users ---

    async def get_user(self, user_id: int) -> User | None:
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> User | None:
        result = await self._session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def create_user(self, username: str, password: str = "") -> User:
        user = User(username=username, password=password)
        self._session.add(user)
        try:
            await self._session.commit()
        except IntegrityError:
            # Created concurrently by another request.
            await self._session.rollback()
            existing = await self.get_user_by_username(username)
            if existing is None:
                raise
            return existing
        await self._session.refresh(user)
        return user

    # --- Messages ---

    async def create_message(
        self,
        content: str,
        role: MessageRole,
        user_id: str,
        session_id: str,
    ) -> Message:
        message = Message(
            content=content,
            role=role,
            user_id=user_id,
            session_id=session_id,
            timestamp=utcnow(),
        )
        self._session.add(message)
        await self._session.execute(
            update(ChatSession)
            .where(ChatSession.session_id == session_id)
            .values(updated_at=message.timestamp)
        )
        await self._session.commit()
        await self._session.refresh(message)
        return message

    async def get_messages(self, session_id: str | None = None) -> list[Message]:
        stmt = select(Message)
        if session_id is not None:
            stmt = stmt.where(Message.session_id == session_id)
        result = await self._session.execute(
            stmt.order_by(Message.timestamp.asc(), Message.id.asc())
        )
        return list(result.scalars().all())

    async def clear_messages(self, session_id: str | None = None) -> None:
        stmt = delete(Message)
        if session_id is not None:
            stmt = stmt.where(Message.session_id == session_id)
        await self._session.execute(stmt)
        await self._session.commit()

    # --- Sessions ---

    async def create_chat_session(
        self, session_id: str, user_id: str, title: str
    ) -> ChatSession:
        chat_session = ChatSession(session_id=session_id, user_id=user_id, title=title)
        self._session.add(chat_session)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            raise SessionAlreadyExistsError(session_id) from exc
        await self._session.refresh(chat_session)
        return chat_session

    async def get_chat_session(self, session_id: str) -> ChatSession | None:
        result = await self._session.execute(
            select(ChatSession).where(ChatSession.session_id == session_id)
        )
        return result.scalar_one_or_none()

    async def get_chat_sessions(self, user_id: str | None = None) -> list[ChatSession]:
        stmt = select(ChatSession)
        if user_id is not None:
            stmt = stmt.where(ChatSession.user_id == user_id)
        result = await self._session.execute(
            stmt.order_by(ChatSession.updated_at.desc(), ChatSession.id.desc())
        )
        return list(result.scalars().all())

    async def update_chat_session(self, session_id: str, title: str) -> None:
        await self._session.execute(
            update(ChatSession)
            .where(ChatSession.session_id == session_id)
            .values(title=title, updated_at=utcnow())
        )
        await self._session.commit()
