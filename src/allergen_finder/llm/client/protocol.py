"""LLM client protocol definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from allergen_finder.llm.models import ChatMessage, LLMCompletionResult


@runtime_checkable
class LLMClientProtocol(Protocol):
    """Interface the summary service needs from a chat model client."""

    async def initialize(self) -> None:
        """Initialize client resources (HTTP connections, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def chat(
        self,
        messages: list[ChatMessage],
        *,
        model: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Run a chat completion.

        Raises:
            LLMUnavailableError: Service unreachable.
            LLMTimeoutError: Request timed out.
            LLMResponseError: Error status or unusable response.
            LLMRateLimitError: Rate limited by the service.
        """
        ...
