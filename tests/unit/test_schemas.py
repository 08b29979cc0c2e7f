"""Unit tests for API schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from intellichat.models.message import Message, MessageRole
from intellichat.schemas.auth_schema import IdentityUser
from intellichat.schemas.message_schema import CreateMessageRequest, MessageResponse
from intellichat.schemas.session_schema import CreateSessionRequest


class TestCreateMessageRequest:
    """Validation of the send-message payload."""

    def test_accepts_camel_case(self) -> None:
        request = CreateMessageRequest.model_validate(
            {"content": "Hi", "userId": "u1", "sessionId": "s1"}
        )

        assert request.user_id == "u1"
        assert request.session_id == "s1"
        assert request.role == MessageRole.USER

    @pytest.mark.parametrize("content", ["", "   "])
    def test_blank_content_rejected(self, content: str) -> None:
        with pytest.raises(ValidationError):
            CreateMessageRequest(content=content, user_id="u1", session_id="s1")

    def test_oversized_content_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateMessageRequest(content="x" * 4001, user_id="u1", session_id="s1")

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateMessageRequest.model_validate(
                {"content": "Hi", "role": "system", "userId": "u1", "sessionId": "s1"}
            )

    @pytest.mark.parametrize("session_id", ["", "has space", "a/b"])
    def test_malformed_identifier_rejected(self, session_id: str) -> None:
        with pytest.raises(ValidationError):
            CreateMessageRequest(content="Hi", user_id="u1", session_id=session_id)

    def test_missing_user_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateMessageRequest.model_validate({"content": "Hi", "sessionId": "s1"})


class TestResponses:
    def test_message_response_from_row(self) -> None:
        row = Message(
            id=7,
            content="Hello",
            role=MessageRole.ASSISTANT,
            user_id="u1",
            session_id="s1",
            timestamp=datetime(2026, 1, 1, tzinfo=UTC),
        )

        body = MessageResponse.model_validate(row).model_dump(by_alias=True, mode="json")

        assert body["id"] == 7
        assert body["role"] == "assistant"
        assert body["userId"] == "u1"
        assert body["sessionId"] == "s1"
        assert body["timestamp"].startswith("2026-01-01T00:00:00")

    def test_identity_user_aliases(self) -> None:
        user = IdentityUser(uid="u1", display_name="Mario", photo_url="https://x/p.png")

        body = user.model_dump(by_alias=True)

        assert body["displayName"] == "Mario"
        assert body["photoURL"] == "https://x/p.png"

    def test_session_title_required(self) -> None:
        with pytest.raises(ValidationError):
            CreateSessionRequest(session_id="s1", user_id="u1", title="")
