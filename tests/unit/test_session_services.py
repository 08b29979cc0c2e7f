"""Unit tests for SessionService and MessageService."""

import pytest

from intellichat.core.exceptions import AuthorizationError, SessionAlreadyExistsError
from intellichat.models.message import MessageRole
from intellichat.repositories.memory_repo import MemoryChatRepository
from intellichat.schemas.auth_schema import IdentityUser
from intellichat.schemas.session_schema import CreateSessionRequest
from intellichat.services.message_service import MessageService
from intellichat.services.session_lock import LocalSessionLock
from intellichat.services.session_service import SessionService

ALICE = IdentityUser(uid="alice")
BOB = IdentityUser(uid="bob")


async def _seed(store: MemoryChatRepository) -> None:
    """Two sessions for alice, one for bob, one message each."""
    for session_id, owner in (("a1", "alice"), ("a2", "alice"), ("b1", "bob")):
        await store.create_chat_session(session_id, owner, session_id)
        await store.create_message(f"hi from {session_id}", MessageRole.USER, owner, session_id)


class TestSessionService:
    """Tests for SessionService."""

    @pytest.mark.asyncio
    async def test_list_returns_only_own_sessions(
        self, memory_store: MemoryChatRepository
    ) -> None:
        await _seed(memory_store)

        sessions = await SessionService(memory_store, ALICE).list_sessions()

        assert [s.session_id for s in sessions] == ["a2", "a1"]

    @pytest.mark.asyncio
    async def test_list_for_other_user_forbidden(
        self, memory_store: MemoryChatRepository
    ) -> None:
        with pytest.raises(AuthorizationError):
            await SessionService(memory_store, ALICE).list_sessions(user_id="bob")

    @pytest.mark.asyncio
    async def test_create_session(self, memory_store: MemoryChatRepository) -> None:
        service = SessionService(memory_store, ALICE)

        chat_session = await service.create_session(
            CreateSessionRequest(session_id="new", user_id="alice", title="Planning")
        )

        assert chat_session.title == "Planning"
        assert chat_session.user_id == "alice"

    @pytest.mark.asyncio
    async def test_create_duplicate(self, memory_store: MemoryChatRepository) -> None:
        service = SessionService(memory_store, ALICE)
        request = CreateSessionRequest(session_id="dup", user_id="alice", title="x")
        await service.create_session(request)

        with pytest.raises(SessionAlreadyExistsError):
            await service.create_session(request)

    @pytest.mark.asyncio
    async def test_create_for_other_user_forbidden(
        self, memory_store: MemoryChatRepository
    ) -> None:
        with pytest.raises(AuthorizationError):
            await SessionService(memory_store, ALICE).create_session(
                CreateSessionRequest(session_id="x", user_id="bob", title="x")
            )

    @pytest.mark.asyncio
    async def test_rename_own_session(self, memory_store: MemoryChatRepository) -> None:
        await _seed(memory_store)

        await SessionService(memory_store, ALICE).update_session("a1", "Renamed")

        assert (await memory_store.get_chat_session("a1")).title == "Renamed"

    @pytest.mark.asyncio
    async def test_rename_foreign_session_forbidden(
        self, memory_store: MemoryChatRepository
    ) -> None:
        await _seed(memory_store)

        with pytest.raises(AuthorizationError):
            await SessionService(memory_store, ALICE).update_session("b1", "Mine now")

        assert (await memory_store.get_chat_session("b1")).title == "b1"

    @pytest.mark.asyncio
    async def test_rename_unknown_session_is_noop(
        self, memory_store: MemoryChatRepository
    ) -> None:
        await SessionService(memory_store, ALICE).update_session("ghost", "x")
        assert await memory_store.get_chat_session("ghost") is None


class TestMessageService:
    """Tests for MessageService."""

    def _service(self, store: MemoryChatRepository, user: IdentityUser) -> MessageService:
        return MessageService(store, LocalSessionLock(timeout=1), user)

    @pytest.mark.asyncio
    async def test_list_session_messages(self, memory_store: MemoryChatRepository) -> None:
        await _seed(memory_store)

        messages = await self._service(memory_store, ALICE).list_messages("a1")

        assert [m.content for m in messages] == ["hi from a1"]

    @pytest.mark.asyncio
    async def test_list_unknown_session_is_empty(
        self, memory_store: MemoryChatRepository
    ) -> None:
        assert await self._service(memory_store, ALICE).list_messages("nope") == []

    @pytest.mark.asyncio
    async def test_list_foreign_session_forbidden(
        self, memory_store: MemoryChatRepository
    ) -> None:
        await _seed(memory_store)

        with pytest.raises(AuthorizationError):
            await self._service(memory_store, ALICE).list_messages("b1")

    @pytest.mark.asyncio
    async def test_unscoped_list_is_own_messages(
        self, memory_store: MemoryChatRepository
    ) -> None:
        await _seed(memory_store)

        messages = await self._service(memory_store, ALICE).list_messages()

        assert {m.session_id for m in messages} == {"a1", "a2"}

    @pytest.mark.asyncio
    async def test_clear_one_session(self, memory_store: MemoryChatRepository) -> None:
        await _seed(memory_store)

        await self._service(memory_store, ALICE).clear_messages("a1")

        assert await memory_store.get_messages("a1") == []
        assert len(await memory_store.get_messages("a2")) == 1
        # The session row itself survives.
        assert await memory_store.get_chat_session("a1") is not None

    @pytest.mark.asyncio
    async def test_clear_foreign_session_forbidden(
        self, memory_store: MemoryChatRepository
    ) -> None:
        await _seed(memory_store)

        with pytest.raises(AuthorizationError):
            await self._service(memory_store, ALICE).clear_messages("b1")

        assert len(await memory_store.get_messages("b1")) == 1

    @pytest.mark.asyncio
    async def test_unscoped_clear_spares_other_users(
        self, memory_store: MemoryChatRepository
    ) -> None:
        await _seed(memory_store)

        await self._service(memory_store, ALICE).clear_messages()

        assert await memory_store.get_messages("a1") == []
        assert await memory_store.get_messages("a2") == []
        assert len(await memory_store.get_messages("b1")) == 1
