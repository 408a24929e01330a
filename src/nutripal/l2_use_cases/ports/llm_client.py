"""Port: text-generation client."""

from __future__ import annotations

from typing import Protocol

from nutripal.l1_entities.chat_message import ChatMessage


class LLMClient(Protocol):
    """Abstract text-generation client. Zero framework types leak through.

    One call is one attempt; retry policy belongs to the caller. Implementations
    raise RetryableUpstreamError, ConnectionFailedError, UpstreamRejected or
    MalformedResponseError from l1_entities.errors.
    """

    async def generate(self, model: str, system_prompt: str, messages: list[ChatMessage]) -> str:
        """Send system prompt + history, return the generated text."""
        ...

    def check_connectivity(self, model: str) -> tuple[bool, str]:
        """Pre-flight connectivity check. Returns (ok, error_message)."""
        ...
