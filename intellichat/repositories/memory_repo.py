"""In-memory chat store for development and tests."""

from intellichat.core.exceptions import SessionAlreadyExistsError
from intellichat.models.chat_session import ChatSession, utcnow
from intellichat.models.message import Message, MessageRole
from intellichat.models.user import User
from intellichat.repositories.base import ChatStore


class MemoryChatRepository(ChatStore):
    """Process-local store with the same contract as ChatRepository.

    Rows are transient ORM instances, so both stores hand out the same types.
    """

    def __init__(self) -> None:
        self._users: list[User] = []
        self._messages: list[Message] = []
        self._sessions: dict[str, ChatSession] = {}
        self._next_user_id = 1
        self._next_message_id = 1
        self._next_session_id = 1

    # --- Users ---

    async def get_user(self, user_id: int) -> User | None:
        return next((u for u in self._users if u.id == user_id), None)

    async def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._users if u.username == username), None)

    async def create_user(self, username: str, password: str = "") -> User:
        user = User(id=self._next_user_id, username=username, password=password)
        self._next_user_id += 1
        self._users.append(user)
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
            id=self._next_message_id,
            content=content,
            role=role,
            user_id=user_id,
            session_id=session_id,
            timestamp=utcnow(),
        )
        self._next_message_id += 1
        self._messages.append(message)
        chat_session = self._sessions.get(session_id)
        if chat_session is not None:
            chat_session.updated_at = message.timestamp
        return message

    async def get_messages(self, session_id: str | None = None) -> list[Message]:
        messages = [
            m
            for m in self._messages
            if session_id is None or m.session_id == session_id
        ]
        return sorted(messages, key=lambda m: (m.timestamp, m.id))

    async def clear_messages(self, session_id: str | None = None) -> None:
        if session_id is None:
            self._messages.clear()
            return
        self._messages = [m for m in self._messages if m.session_id != session_id]

    # --- Sessions ---

    async def create_chat_session(
        self, session_id: str, user_id: str, title: str
    ) -> ChatSession:
        if session_id in self._sessions:
            raise SessionAlreadyExistsError(session_id)
        now = utcnow()
        chat_session = ChatSession(
            id=self._next_session_id,
            session_id=session_id,
            user_id=user_id,
            title=title,
            created_at=now,
            updated_at=now,
        )
        self._next_session_id += 1
        self._sessions[session_id] = chat_session
        return chat_session

    async def get_chat_session(self, session_id: str) -> ChatSession | None:
        return self._sessions.get(session_id)

    async def get_chat_sessions(self, user_id: str | None = None) -> list[ChatSession]:
        sessions = [
            s
            for s in self._sessions.values()
            if user_id is None or s.user_id == user_id
        ]
        return sorted(sessions, key=lambda s: (s.updated_at, s.id), reverse=True)

    async def update_chat_session(self, session_id: str, title: str) -> None:
        chat_session = self._sessions.get(session_id)
        if chat_session is None:
            return
        chat_session.title = title
        chat_session.updated_at = utcnow()
