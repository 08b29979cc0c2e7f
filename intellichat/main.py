"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from intellichat.api.chat.message_router import router as message_router
from intellichat.api.chat.session_router import router as session_router
from intellichat.api.common.auth_router import router as auth_router
from intellichat.core.config import settings
from intellichat.core.database import Base, engine
from intellichat.core.exceptions import (
    AppException,
    app_exception_handler,
    storage_exception_handler,
    validation_exception_handler,
)
from intellichat.core.middleware import AuthMiddleware
from intellichat.core.rate_limit import limiter, rate_limit_exceeded_handler
from intellichat.dependencies import identity_provider, session_lock

# Register ORM tables on Base.metadata.
from intellichat.models import chat_session, message, user  # noqa: F401

logger = structlog.get_logger()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        storage_backend=settings.database.backend,
        llm_provider=settings.llm.provider,
        llm_model=settings.llm.model,
        auth_provider=settings.auth.provider,
        lock_backend=settings.chat.lock_backend,
    )
    if settings.database.backend == "database" and settings.app.is_development:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield
    await session_lock.aclose()
    await engine.dispose()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="IntelliChat AI - chat sessions backed by a hosted language model",
    version=VERSION,
    lifespan=lifespan,
    debug=settings.app.debug,
)

app.state.limiter = limiter

# Exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(SQLAlchemyError, storage_exception_handler)  # type: ignore[arg-type]

# Middleware (registration order: inner→outer, execution order: outer→inner)
app.add_middleware(AuthMiddleware, identity_provider=identity_provider)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "app": settings.app.name,
        "version": VERSION,
        "docs": "/docs",
    }


# Register routers
app.include_router(auth_router)
app.include_router(message_router)
app.include_router(session_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "intellichat.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
    )
