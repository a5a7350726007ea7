"""LLM integration module.

Provides an OpenAI-compatible chat client used to render screened
results as prose. The model never takes part in the screening decision.
"""

from allergen_finder.llm.client import ChatCompletionClient, LLMClientProtocol
from allergen_finder.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from allergen_finder.llm.models import ChatMessage, LLMCompletionResult
from allergen_finder.llm.prompts import BasePrompt


__all__ = [
    "BasePrompt",
    "ChatCompletionClient",
    "ChatMessage",
    "LLMClientProtocol",
    "LLMCompletionResult",
    "LLMConfigurationError",
    "LLMError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
]
