"""Chat session API router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from intellichat.dependencies import get_session_service
from intellichat.schemas.response_schema import ErrorResponse, StatusMessage
from intellichat.schemas.session_schema import (
    ChatSessionResponse,
    CreateSessionRequest,
    UpdateSessionRequest,
)
from intellichat.services.session_service import SessionService

router = APIRouter(
    prefix="/api/sessions",
    tags=["sessions"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)

SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]


@router.get("", response_model=list[ChatSessionResponse])
async def list_sessions(
    service: SessionServiceDep,
    user_id: Annotated[
        str | None, Query(alias="userId", min_length=1, max_length=128)
    ] = None,
) -> list:
    """List the caller's sessions, most recently active first."""
    return await service.list_sessions(user_id)


@router.post(
    "",
    response_model=ChatSessionResponse,
    responses={409: {"model": ErrorResponse}},
)
async def create_session(
    body: CreateSessionRequest,
    service: SessionServiceDep,
) -> ChatSessionResponse:
    """Create a session before its first message."""
    chat_session = await service.create_session(body)
    return ChatSessionResponse.model_validate(chat_session)


@router.patch("/{session_id}", response_model=StatusMessage)
async def update_session(
    session_id: Annotated[str, Path(min_length=1, max_length=128)],
    body: UpdateSessionRequest,
    service: SessionServiceDep,
) -> StatusMessage:
    """Rename a session."""
    await service.update_session(session_id, body.title)
    return StatusMessage(message="Session updated")
