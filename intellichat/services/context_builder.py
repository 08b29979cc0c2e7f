"""Turn stored session history into the transcript sent to the model."""

from collections.abc import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, trim_messages

from intellichat.models.message import Message, MessageRole


def count_chars(messages: list[BaseMessage]) -> int:
    """Size of a transcript measured in content characters."""
    return sum(len(str(message.content)) for message in messages)


class ContextBuilder:
    """Builds the prior-turn window for one model call.

    Every stored turn of the session is included, oldest first, except the
    message being answered. When ``max_chars`` is positive the oldest turns
    are dropped until the window fits, and the window always opens on a user
    turn. ``max_chars=0`` keeps the whole history.
    """

    def __init__(self, max_chars: int = 0) -> None:
        self._max_chars = max_chars

    def build(
        self,
        messages: Sequence[Message],
        exclude_message_id: int | None = None,
    ) -> list[BaseMessage]:
        history = self.to_langchain_messages(
            [m for m in messages if m.id != exclude_message_id]
        )
        if self._max_chars <= 0 or not history:
            return history
        return trim_messages(
            history,
            max_tokens=self._max_chars,
            token_counter=count_chars,
            strategy="last",
            start_on="human",
            allow_partial=False,
        )

    @staticmethod
    def to_langchain_messages(messages: Sequence[Message]) -> list[BaseMessage]:
        """Convert stored rows to LangChain message objects."""
        result: list[BaseMessage] = []
        for message in messages:
            if message.role == MessageRole.USER:
                result.append(HumanMessage(content=message.content))
            elif message.role == MessageRole.ASSISTANT:
                result.append(AIMessage(content=message.content))
        return result
