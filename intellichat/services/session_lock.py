"""Per-session append lock serialising sends on one conversation."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import redis.asyncio as redis
import structlog
from redis.exceptions import LockError

from intellichat.core.exceptions import SessionBusyError
from intellichat.core.settings import ChatConfig, RedisConfig

logger = structlog.get_logger()


class SessionLock(ABC):
    """Mutual exclusion keyed by session id."""

    @abstractmethod
    def hold(self, session_id: str) -> AbstractAsyncContextManager[None]:
        """Hold the lock of ``session_id`` for the duration of the block.

        Raises:
            SessionBusyError: The lock was not acquired within the timeout.
        """

    async def aclose(self) -> None:
        """Release backend resources."""


class LocalSessionLock(SessionLock):
    """asyncio locks; correct within a single process only."""

    def __init__(self, timeout: float) -> None:
        self._timeout = timeout
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, session_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._holders[session_id] = self._holders.get(session_id, 0) + 1
        try:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=self._timeout)
            except TimeoutError as exc:
                raise SessionBusyError(session_id) from exc
            try:
                yield
            finally:
                lock.release()
        finally:
            self._holders[session_id] -= 1
            if self._holders[session_id] == 0:
                del self._holders[session_id]
                del self._locks[session_id]

    def is_locked(self, session_id: str) -> bool:
        """Check whether a send on ``session_id`` is in flight."""
        lock = self._locks.get(session_id)
        return lock is not None and lock.locked()


class RedisSessionLock(SessionLock):
    """Redis lease lock shared by every worker process.

    The lease expires after ``timeout`` seconds even if the holder dies.
    """

    def __init__(
        self,
        client: redis.Redis,  # type: ignore[type-arg]
        timeout: float,
        config: RedisConfig,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._config = config

    @asynccontextmanager
    async def hold(self, session_id: str) -> AsyncIterator[None]:
        lock = self._client.lock(
            self._config.key("session-lock", session_id),
            timeout=self._timeout,
            blocking_timeout=self._timeout,
        )
        if not await lock.acquire():
            raise SessionBusyError(session_id)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                logger.warning(
                    "Session lock lease expired before release",
                    session_id=session_id,
                )

    async def aclose(self) -> None:
        await self._client.aclose()


def build_session_lock(config: ChatConfig, redis_config: RedisConfig) -> SessionLock:
    """Create the lock backend selected by configuration."""
    if config.lock_backend == "redis":
        client = redis.from_url(redis_config.url, decode_responses=True)
        return RedisSessionLock(
            client, timeout=config.lock_timeout_seconds, config=redis_config
        )
    return LocalSessionLock(timeout=config.lock_timeout_seconds)
