"""Single-call gateway to the hosted chat completion model."""

import asyncio
from collections.abc import Sequence
from typing import Any

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from intellichat.core.exceptions import AIResponseError
from intellichat.core.settings import LLMConfig


def build_chat_model(config: LLMConfig) -> BaseChatModel:
    """Create the chat model for the configured provider.

    Retries are disabled: a failed send is surfaced to the user to resubmit.
    """
    match config.provider:
        case "openai":
            return ChatOpenAI(
                model=config.openai_model,
                api_key=config.openai_api_key,
                base_url=config.openai_base_url,
                max_tokens=config.max_tokens,  # type: ignore[call-arg]
                temperature=config.temperature,
                timeout=config.timeout_seconds,
                max_retries=0,
            )
        case "anthropic":
            return ChatAnthropic(  # type: ignore[call-arg]
                model_name=config.anthropic_model,
                api_key=config.anthropic_api_key,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                timeout=config.timeout_seconds,
                max_retries=0,
            )
        case _:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")


def content_text(content: str | list[Any]) -> str:
    """Flatten message content (plain string or content blocks) to text."""
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)


class LLMGateway:
    """Sends one transcript to the model and returns the reply text."""

    def __init__(
        self,
        llm: BaseChatModel,
        timeout: float,
        system_prompt: str | None = None,
    ) -> None:
        self._llm = llm
        self._timeout = timeout
        self._system_prompt = system_prompt

    def build_transcript(
        self, history: Sequence[BaseMessage], content: str
    ) -> list[BaseMessage]:
        """Prior turns followed by the new user turn."""
        transcript: list[BaseMessage] = []
        if self._system_prompt:
            transcript.append(SystemMessage(content=self._system_prompt))
        transcript.extend(history)
        transcript.append(HumanMessage(content=content))
        return transcript

    async def complete(self, history: Sequence[BaseMessage], content: str) -> str:
        """Get the model's reply to ``content`` given ``history``.

        Raises:
            AIResponseError: Timeout, transport/provider failure, or an empty
                completion. Never retried.
        """
        transcript = self.build_transcript(history, content)
        try:
            response = await asyncio.wait_for(
                self._llm.ainvoke(transcript), timeout=self._timeout
            )
        except TimeoutError as exc:
            raise AIResponseError(
                f"Model call timed out after {self._timeout:g}s"
            ) from exc
        except Exception as exc:
            raise AIResponseError(str(exc) or type(exc).__name__) from exc

        text = content_text(response.content)
        if not text.strip():
            raise AIResponseError("No response from AI")
        return text
