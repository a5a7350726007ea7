"""Base class for LLM prompts.

Provides a standardized interface for defining chat prompts with
model-specific configuration kept next to the prompt text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar


if TYPE_CHECKING:
    from allergen_finder.llm.models import ChatMessage


class BasePrompt(ABC):
    """Base class for all LLM prompts.

    Example:
        ```python
        class ShortlistPrompt(BasePrompt):
            system_prompt = "You are a shopping assistant."

            def build_messages(self, items: str) -> list[ChatMessage]:
                return [
                    ChatMessage(role="system", content=self.system_prompt),
                    ChatMessage(role="user", content=items),
                ]
        ```
    """

    system_prompt: ClassVar[str | None] = None
    """Optional system prompt to set context for the LLM."""

    temperature: ClassVar[float] = 0.1
    """Temperature for generation (low = more deterministic)."""

    max_tokens: ClassVar[int | None] = None
    """Maximum tokens to generate (None = model default)."""

    @abstractmethod
    def build_messages(self, **kwargs: Any) -> list[ChatMessage]:
        """Render the prompt into chat messages.

        Args:
            **kwargs: Variables to substitute into the templates.

        Returns:
            Messages ready to send, system message first.
        """
        ...

    @property
    def name(self) -> str:
        """Prompt identifier for logging."""
        return self.__class__.__name__

    def get_options(self) -> dict[str, Any]:
        """Get model options for this prompt."""
        options: dict[str, Any] = {"temperature": self.temperature}
        if self.max_tokens is not None:
            options["max_tokens"] = self.max_tokens
        return options
