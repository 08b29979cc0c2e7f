"""Chat service: persist a user turn, ask the model, persist the reply."""

import structlog

from intellichat.core.exceptions import (
    AIResponseError,
    InvalidMessageRoleError,
    SessionAlreadyExistsError,
)
from intellichat.models.message import Message, MessageRole
from intellichat.repositories.base import ChatStore
from intellichat.schemas.auth_schema import IdentityUser
from intellichat.schemas.message_schema import CreateMessageRequest
from intellichat.services.context_builder import ContextBuilder
from intellichat.services.llm_gateway import LLMGateway
from intellichat.services.session_lock import SessionLock
from intellichat.services.session_service import ensure_caller, ensure_owner

logger = structlog.get_logger()


def make_title(content: str, max_length: int = 50) -> str:
    """Default session title: the first message, truncated with an ellipsis."""
    if len(content) <= max_length:
        return content
    return content[:max_length] + "..."


class ChatService:
    """Orchestrates one message exchange."""

    def __init__(
        self,
        store: ChatStore,
        gateway: LLMGateway,
        context_builder: ContextBuilder,
        session_lock: SessionLock,
        user: IdentityUser,
        title_max_length: int = 50,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._context_builder = context_builder
        self._session_lock = session_lock
        self._user = user
        self._title_max_length = title_max_length

    async def send_message(
        self, request: CreateMessageRequest
    ) -> tuple[Message, Message]:
        """Run one exchange and return ``(user_message, ai_message)``.

        The whole exchange holds the session's append lock, so a concurrent
        send on the same session sees this exchange in its context. If the
        model call fails the user turn stays stored.

        Raises:
            InvalidMessageRoleError: ``role`` is not ``user``.
            AIResponseError: The model call failed.
        """
        if request.role != MessageRole.USER:
            raise InvalidMessageRoleError()
        ensure_caller(request.user_id, self._user)

        async with self._session_lock.hold(request.session_id):
            await self._ensure_session(request)
            await self._ensure_user(request.user_id)

            user_message = await self._store.create_message(
                content=request.content,
                role=MessageRole.USER,
                user_id=request.user_id,
                session_id=request.session_id,
            )
            history = await self._store.get_messages(request.session_id)
            context = self._context_builder.build(
                history, exclude_message_id=user_message.id
            )

            try:
                reply = await self._gateway.complete(context, request.content)
            except AIResponseError as exc:
                logger.exception(
                    "AI response failure",
                    session_id=request.session_id,
                    user_message_id=user_message.id,
                    details=exc.details,
                )
                raise

            ai_message = await self._store.create_message(
                content=reply,
                role=MessageRole.ASSISTANT,
                user_id=request.user_id,
                session_id=request.session_id,
            )

        logger.info(
            "Message exchange completed",
            session_id=request.session_id,
            user_message_id=user_message.id,
            ai_message_id=ai_message.id,
            context_turns=len(context),
        )
        return user_message, ai_message

    async def _ensure_session(self, request: CreateMessageRequest) -> None:
        """Create the session on its first message, or verify ownership."""
        chat_session = await self._store.get_chat_session(request.session_id)
        if chat_session is None:
            try:
                await self._store.create_chat_session(
                    session_id=request.session_id,
                    user_id=request.user_id,
                    title=make_title(request.content, self._title_max_length),
                )
                logger.info("Chat session created", session_id=request.session_id)
                return
            except SessionAlreadyExistsError:
                chat_session = await self._store.get_chat_session(request.session_id)
        ensure_owner(chat_session, self._user)

    async def _ensure_user(self, username: str) -> None:
        """Create the local user record on first reference."""
        if await self._store.get_user_by_username(username) is None:
            await self._store.create_user(username=username)
