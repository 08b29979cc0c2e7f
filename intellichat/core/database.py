"""Async database engine and session configuration."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from intellichat.core.config import settings
from intellichat.core.settings import DatabaseConfig


def build_engine(config: DatabaseConfig, echo: bool = False) -> AsyncEngine:
    """Create the async engine; SQLite gets no pool sizing."""
    options: dict[str, Any] = {"echo": echo}
    if not config.is_sqlite:
        options.update(
            pool_size=10,
            max_overflow=20,
            pool_recycle=3600,
            pool_pre_ping=True,
        )
    return create_async_engine(config.async_url, **options)


engine = build_engine(settings.database, echo=settings.app.debug)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
