"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; pin a hermetic configuration first.
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("AUTH_PROVIDER", "demo")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SESSION_LOCK_BACKEND", "local")

from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from langchain_core.language_models import BaseChatModel  # noqa: E402
from langchain_core.messages import AIMessage  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from intellichat.core.database import Base  # noqa: E402
from intellichat.core.rate_limit import limiter  # noqa: E402
from intellichat.models.chat_session import ChatSession  # noqa: E402, F401
from intellichat.models.message import Message  # noqa: E402, F401
from intellichat.models.user import User  # noqa: E402, F401
from intellichat.repositories.base import ChatStore  # noqa: E402
from intellichat.repositories.chat_repo import ChatRepository  # noqa: E402
from intellichat.repositories.memory_repo import MemoryChatRepository  # noqa: E402
from intellichat.services.llm_gateway import LLMGateway  # noqa: E402
from intellichat.services.session_lock import LocalSessionLock  # noqa: E402

# --- Test DB (SQLite in-memory) ---

test_engine = create_async_engine(
    "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool
)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    """Create all tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def disable_rate_limit() -> Generator[None, None, None]:
    """Rate limiting is exercised explicitly where needed."""
    limiter.enabled = False
    limiter.reset()
    yield
    limiter.enabled = True


async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# --- Stores ---


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a raw async session for repository tests."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def memory_store() -> MemoryChatRepository:
    """Create an empty in-memory store."""
    return MemoryChatRepository()


@pytest.fixture(params=["memory", "database"])
def store(request: pytest.FixtureRequest, db_session: AsyncSession) -> ChatStore:
    """Both store implementations, for contract tests."""
    if request.param == "memory":
        return MemoryChatRepository()
    return ChatRepository(db_session)


# --- Mock LLM ---


@pytest.fixture
def mock_llm() -> MagicMock:
    """Create a mock chat model replying with a fixed text."""
    mock = MagicMock(spec=BaseChatModel)
    mock.ainvoke = AsyncMock(return_value=AIMessage(content="Test response"))
    return mock


# --- Auth helpers ---


def make_auth_headers(user_id: str = "u1") -> dict[str, str]:
    """Headers accepted by the demo identity provider for ``user_id``."""
    return {"Authorization": f"Bearer {user_id}"}


# --- App override & client fixtures ---


@pytest.fixture
def app_factory(
    mock_llm: MagicMock,
) -> Generator[Callable[[ChatStore | None], object], None, None]:
    """Build the app with a given store, the mock model and a fresh lock."""
    from intellichat.dependencies import (
        get_chat_store,
        get_llm_gateway,
        get_session_lock,
    )
    from intellichat.main import app

    lock = LocalSessionLock(timeout=5)

    def _build(chat_store: ChatStore | None = None) -> object:
        if chat_store is None:

            async def _sql_store() -> AsyncGenerator[ChatStore, None]:
                async for session in override_get_async_session():
                    yield ChatRepository(session)

            app.dependency_overrides[get_chat_store] = _sql_store
        else:
            app.dependency_overrides[get_chat_store] = lambda: chat_store
        app.dependency_overrides[get_llm_gateway] = lambda: LLMGateway(
            llm=mock_llm, timeout=5
        )
        app.dependency_overrides[get_session_lock] = lambda: lock
        return app

    yield _build
    app.dependency_overrides.clear()


@pytest.fixture
async def client(
    app_factory: Callable[[ChatStore | None], object],
    memory_store: MemoryChatRepository,
) -> AsyncGenerator[AsyncClient, None]:
    """Client for user ``u1`` against the in-memory store."""
    transport = ASGITransport(app=app_factory(memory_store))  # type: ignore[arg-type]
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=make_auth_headers("u1")
    ) as ac:
        yield ac


@pytest.fixture
async def db_client(
    app_factory: Callable[[ChatStore | None], object],
) -> AsyncGenerator[AsyncClient, None]:
    """Client for user ``u1`` against the SQLite-backed store."""
    transport = ASGITransport(app=app_factory(None))  # type: ignore[arg-type]
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=make_auth_headers("u1")
    ) as ac:
        yield ac
