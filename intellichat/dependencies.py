"""Global dependencies for the application."""

from functools import lru_cache

from fastapi import Depends, Request
from langchain_core.language_models import BaseChatModel
from sqlalchemy.ext.asyncio import AsyncSession

from intellichat.core.config import settings
from intellichat.core.database import get_async_session
from intellichat.core.exceptions import AuthenticationError
from intellichat.repositories.base import ChatStore
from intellichat.repositories.chat_repo import ChatRepository
from intellichat.repositories.memory_repo import MemoryChatRepository
from intellichat.schemas.auth_schema import IdentityUser
from intellichat.services.chat_service import ChatService
from intellichat.services.context_builder import ContextBuilder
from intellichat.services.identity_service import build_identity_provider
from intellichat.services.llm_gateway import LLMGateway, build_chat_model
from intellichat.services.message_service import MessageService
from intellichat.services.session_lock import SessionLock, build_session_lock
from intellichat.services.session_service import SessionService

# Process-wide singletons, selected once at start-up.
memory_store = MemoryChatRepository()
identity_provider = build_identity_provider(settings.auth)
session_lock = build_session_lock(settings.chat, settings.redis)


@lru_cache
def get_llm() -> BaseChatModel:
    """Get the LLM instance based on the configured provider."""
    return build_chat_model(settings.llm)


def get_llm_gateway() -> LLMGateway:
    """Get the gateway wrapping the configured chat model."""
    return LLMGateway(
        llm=get_llm(),
        timeout=settings.llm.timeout_seconds,
        system_prompt=settings.llm.system_prompt,
    )


def get_context_builder() -> ContextBuilder:
    """Get the context window builder."""
    return ContextBuilder(max_chars=settings.chat.context_max_chars)


def get_session_lock() -> SessionLock:
    """Get the per-session append lock."""
    return session_lock


def get_chat_store(
    session: AsyncSession = Depends(get_async_session),
) -> ChatStore:
    """Get the configured store; the database store is bound to the request."""
    if settings.database.backend == "memory":
        return memory_store
    return ChatRepository(session)


def get_current_user(request: Request) -> IdentityUser:
    """Extract the authenticated user from middleware-populated state."""
    state = getattr(request, "state", None)
    user = getattr(state, "user", None) if state else None
    if user is None:
        raise AuthenticationError(message="Not authenticated")
    return user


def get_chat_service(
    store: ChatStore = Depends(get_chat_store),
    gateway: LLMGateway = Depends(get_llm_gateway),
    context_builder: ContextBuilder = Depends(get_context_builder),
    lock: SessionLock = Depends(get_session_lock),
    current_user: IdentityUser = Depends(get_current_user),
) -> ChatService:
    """Get ChatService for the authenticated user."""
    return ChatService(
        store=store,
        gateway=gateway,
        context_builder=context_builder,
        session_lock=lock,
        user=current_user,
        title_max_length=settings.chat.title_max_length,
    )


def get_session_service(
    store: ChatStore = Depends(get_chat_store),
    current_user: IdentityUser = Depends(get_current_user),
) -> SessionService:
    """Get SessionService for the authenticated user."""
    return SessionService(store=store, user=current_user)


def get_message_service(
    store: ChatStore = Depends(get_chat_store),
    lock: SessionLock = Depends(get_session_lock),
    current_user: IdentityUser = Depends(get_current_user),
) -> MessageService:
    """Get MessageService for the authenticated user."""
    return MessageService(store=store, session_lock=lock, user=current_user)
