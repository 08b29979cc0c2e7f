"""Message API router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from intellichat.core.config import settings
from intellichat.core.rate_limit import limiter
from intellichat.dependencies import get_chat_service, get_message_service
from intellichat.schemas.message_schema import (
    CreateMessageRequest,
    MessageResponse,
    SendMessageResponse,
)
from intellichat.schemas.response_schema import ErrorResponse, StatusMessage
from intellichat.services.chat_service import ChatService
from intellichat.services.message_service import MessageService

router = APIRouter(
    prefix="/api/messages",
    tags=["messages"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)

ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
SessionIdQuery = Annotated[
    str | None, Query(alias="sessionId", min_length=1, max_length=128)
]


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    service: MessageServiceDep,
    session_id: SessionIdQuery = None,
) -> list:
    """List a session's messages, oldest first."""
    return await service.list_messages(session_id)


@router.post(
    "",
    response_model=SendMessageResponse,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(settings.chat.message_rate_limit)
async def send_message(
    request: Request,
    body: CreateMessageRequest,
    service: ChatServiceDep,
) -> SendMessageResponse:
    """Send a user message and receive the assistant's reply."""
    user_message, ai_message = await service.send_message(body)
    return SendMessageResponse(
        user_message=MessageResponse.model_validate(user_message),
        ai_message=MessageResponse.model_validate(ai_message),
    )


@router.delete("", response_model=StatusMessage)
async def clear_messages(
    service: MessageServiceDep,
    session_id: SessionIdQuery = None,
) -> StatusMessage:
    """Clear a session's messages, or all of the caller's sessions."""
    await service.clear_messages(session_id)
    if session_id is None:
        return StatusMessage(message="All messages cleared")
    return StatusMessage(message="Session messages cleared")
